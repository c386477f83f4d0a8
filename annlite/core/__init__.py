"""Core numerical primitives for annlite."""

from . import activations, errors, layer, types

__all__ = ["activations", "errors", "layer", "types"]
