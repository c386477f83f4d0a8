"""Activation utilities for annlite."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid ``1 / (1 + e^-x)``."""

    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_deriv(output: Array) -> Array:
    """Return the sigmoid derivative expressed on the activation ``output``."""

    return output * (1.0 - output)
