"""Deterministic run summaries built from epoch metric records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import numpy as np

_SKIP_KEYS = {"epoch", "seed", "split", "sha"}


def tail_auc(points: Sequence[float]) -> float:
    """Return the trapezoidal area under ``points`` along the epoch axis."""

    if len(points) < 2:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    return float(np.sum((y[1:] + y[:-1]) * 0.5))


def read_records(metrics_jsonl: str | Path) -> list[Mapping[str, object]]:
    path = Path(metrics_jsonl)
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


def _numeric_series(records: Iterable[Mapping[str, object]]) -> dict[str, list[float]]:
    series: dict[str, list[float]] = {}
    for record in records:
        for key, value in record.items():
            if key in _SKIP_KEYS or isinstance(value, bool):
                continue
            if isinstance(value, (int, float)):
                series.setdefault(key, []).append(float(value))
    return series


def summarize(records: Sequence[Mapping[str, object]], *, tail: int = 32) -> Mapping[str, object]:
    window = min(tail, len(records))
    metrics: dict[str, Mapping[str, float]] = {}
    for name, values in _numeric_series(records).items():
        arr = np.asarray(values, dtype=np.float64)
        metrics[name] = {
            "min": float(arr.min()),
            "max": float(arr.max()),
            "mean": float(arr.mean()),
            "first": float(arr[0]),
            "last": float(arr[-1]),
            "tail_auc": tail_auc(arr[-window:].tolist()) if window else 0.0,
        }
    return {
        "version": 1,
        "epochs": len(records),
        "tail_window": window,
        "metrics": metrics,
    }


def write_summary(
    metrics_jsonl: str | Path, out_summary_json: str | Path, *, tail: int = 32
) -> str:
    """Summarise ``metrics_jsonl`` into ``out_summary_json`` and return its path."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    summary = summarize(read_records(metrics_jsonl), tail=tail)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["read_records", "summarize", "tail_auc", "write_summary"]
