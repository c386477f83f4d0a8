"""Plain-text formatting of vectors and prediction tables."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, TextIO

import numpy as np

from ..core.types import Array, Vector

RULE = "-" * 80


def format_vector(values: Vector, num_decimals: int = 1) -> str:
    """Return ``values`` as space separated fixed-point numbers."""

    if num_decimals < 0:
        raise ValueError(f"num_decimals must be non-negative, got {num_decimals}")
    vec = np.asarray(values, dtype=np.float64).reshape(-1)
    return " ".join(f"{value:.{num_decimals}f}" for value in vec)


def print_vector(
    values: Vector, ostream: TextIO | None = None, num_decimals: int = 1
) -> None:
    """Write ``values`` followed by a newline to ``ostream`` (stdout by default)."""

    ostream = ostream if ostream is not None else sys.stdout
    ostream.write(format_vector(values, num_decimals) + "\n")


def print_predictions(
    inputs: Iterable[Vector],
    predict: Callable[[Vector], Array],
    num_decimals: int = 1,
    ostream: TextIO | None = None,
) -> None:
    """Write an ``Input:``/``Output:`` table for ``inputs`` using ``predict``.

    Samples are separated by a blank line and the whole batch is framed by
    rule lines.  An empty batch writes nothing.
    """

    batch = list(inputs)
    if not batch:
        return
    ostream = ostream if ostream is not None else sys.stdout
    ostream.write(RULE + "\n")
    for idx, sample in enumerate(batch):
        ostream.write("Input:\t")
        print_vector(sample, ostream, num_decimals)
        ostream.write("Output:\t")
        print_vector(predict(sample), ostream, num_decimals)
        if idx < len(batch) - 1:
            ostream.write("\n")
    ostream.write(RULE + "\n\n")


__all__ = ["RULE", "format_vector", "print_vector", "print_predictions"]
