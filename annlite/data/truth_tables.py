"""Logic-gate truth tables over ``n`` binary inputs."""

from __future__ import annotations

import itertools
from typing import Callable, Dict

import numpy as np

from .registry import DatasetSpec, register_dataset

Gate = Callable[[np.ndarray], np.ndarray]

_GATES: Dict[str, Gate] = {
    "xor": lambda bits: bits.sum(axis=1) % 2,
    "xnor": lambda bits: 1 - bits.sum(axis=1) % 2,
    "and": lambda bits: bits.min(axis=1),
    "nand": lambda bits: 1 - bits.min(axis=1),
    "or": lambda bits: bits.max(axis=1),
    "nor": lambda bits: 1 - bits.max(axis=1),
}


def truth_table(gate: str, num_inputs: int = 2) -> tuple[np.ndarray, np.ndarray]:
    """Return every input combination (in binary counting order) and the gate output."""

    if gate not in _GATES:
        raise KeyError(f"Unknown gate: {gate}")
    if num_inputs < 1:
        raise ValueError(f"num_inputs must be positive, got {num_inputs}")
    bits = np.array(list(itertools.product((0, 1), repeat=num_inputs)), dtype=np.int64)
    out = _GATES[gate](bits)
    inputs = bits.astype(np.float64)
    targets = np.asarray(out, dtype=np.float64).reshape(-1, 1)
    return inputs, targets


def _make_factory(gate: str, registered_as: str):
    def _factory(num_inputs: int = 2, repeat: int = 1, **_: object) -> DatasetSpec:
        inputs, targets = truth_table(gate, int(num_inputs))
        repeat = max(1, int(repeat))
        return DatasetSpec(
            name=registered_as,
            inputs=np.tile(inputs, (repeat, 1)),
            targets=np.tile(targets, (repeat, 1)),
            provenance={
                "type": "truth_table",
                "gate": gate,
                "num_inputs": int(num_inputs),
                "repeat": repeat,
            },
        )

    _factory.__name__ = f"make_{registered_as}"
    return _factory


for _gate in _GATES:
    register_dataset(_gate, _make_factory(_gate, _gate))
# n-input xor is odd parity
register_dataset("parity", _make_factory("xor", "parity"))

__all__ = ["truth_table"]
