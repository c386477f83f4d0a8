"""Reporting metrics computed from re-predicted training samples.

None of these values feed the learning rule; they only describe how close
the network's outputs are to the reference values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

import numpy as np

from ..core.types import Array
from .losses import REGISTRY as LOSSES

DEFAULT_METRICS: List[str] = ["mse", "mae", "accuracy"]


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def default_metrics() -> List[str]:
    return list(DEFAULT_METRICS)


def compute_metric(name: str, predictions: Array, targets: Array) -> MetricResult:
    key = name.lower()
    preds = np.asarray(predictions, dtype=np.float64)
    targs = np.asarray(targets, dtype=np.float64)
    if preds.size == 0:
        return MetricResult(name=key, value=0.0)
    if key in LOSSES.names():
        value = LOSSES.get(key)(preds, targs)
    elif key == "rmse":
        value = float(np.sqrt(LOSSES.get("mse")(preds, targs)))
    elif key == "max_error":
        value = float(np.max(np.abs(preds - targs)))
    elif key == "accuracy":
        pred_bits = preds >= 0.5
        targ_bits = targs >= 0.5
        value = float(np.mean(np.all(pred_bits == targ_bits, axis=-1)))
    else:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=value)


def compute_metrics(
    names: Iterable[str], predictions: Array, targets: Array
) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, predictions, targets)
        results[metric.name] = metric.value
    return results


def parse_metric_names(metrics: Iterable[str] | str | None) -> List[str]:
    """Normalise a comma separated string or sequence of metric names."""

    if metrics is None:
        return default_metrics()
    if isinstance(metrics, str):
        if metrics == "default" or metrics.strip() == "":
            return default_metrics()
        return [m.strip() for m in metrics.split(",") if m.strip()]
    names = [str(m) for m in metrics]
    return names or default_metrics()


__all__ = [
    "MetricResult",
    "default_metrics",
    "compute_metric",
    "compute_metrics",
    "parse_metric_names",
]
