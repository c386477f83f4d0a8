"""Core typing contracts for annlite."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Sequence, Union

import numpy as np

Array = np.ndarray
Vector = Union[Array, Sequence[float]]


@dataclass(frozen=True)
class TrainingSet:
    """Index-aligned training inputs and reference outputs."""

    inputs: Array
    targets: Array

    def __len__(self) -> int:
        return int(self.inputs.shape[0])


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`annlite.training.pipelines.run_pipeline`."""

    epochs: int
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
    predictions_path: str = ""
    final_metrics: Dict[str, float] = field(default_factory=dict)


__all__ = ["Array", "Vector", "TrainingSet", "RunResult"]
