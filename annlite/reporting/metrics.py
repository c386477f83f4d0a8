"""Epoch metric sinks for training runs."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, List, Mapping

from .artifacts import git_sha


def _numeric(metrics: Mapping[str, float]) -> Dict[str, float]:
    return {k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))}


class _FileSink:
    """Epoch callback that owns one output file, truncated on creation."""

    def __init__(self, path: str | Path, *, split: str = "train") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.split = split
        self.rows = 0

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self._append(self._record(int(epoch), _numeric(metrics)))
        self.rows += 1

    def __call__(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.on_epoch(epoch, metrics)

    def _record(self, epoch: int, values: Dict[str, float]) -> Dict[str, object]:
        return {"epoch": epoch, "split": self.split, **values}

    def _append(self, record: Dict[str, object]) -> None:
        raise NotImplementedError


class JsonlSink(_FileSink):
    """One JSON object per epoch, tagged with the run seed and git revision."""

    def __init__(
        self,
        path: str | Path,
        *,
        split: str = "train",
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        super().__init__(path, split=split)
        self.seed = seed
        self.sha = sha or git_sha()

    def _record(self, epoch: int, values: Dict[str, float]) -> Dict[str, object]:
        record = super()._record(epoch, {})
        record.update(seed=self.seed, sha=self.sha)
        record.update(values)
        return record

    def _append(self, record: Dict[str, object]) -> None:
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")


class CsvSink(_FileSink):
    """Epoch metrics as CSV.

    The header is fixed by the first epoch (sorted column names); later
    epochs must report the same metric names.
    """

    def __init__(self, path: str | Path, *, split: str = "train") -> None:
        super().__init__(path, split=split)
        self.fieldnames: List[str] = []

    def _append(self, record: Dict[str, object]) -> None:
        if not self.fieldnames:
            self.fieldnames = sorted(record)
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=self.fieldnames)
            if self.rows == 0:
                writer.writeheader()
            writer.writerow(record)


class MetricsCapture:
    """Keep every epoch's metrics in memory."""

    def __init__(self) -> None:
        self.history: list[tuple[int, Mapping[str, float]]] = []
        self.last: Mapping[str, float] = {}

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        payload = {k: float(v) for k, v in metrics.items()}
        self.history.append((int(epoch), payload))
        self.last = payload

    def series(self, name: str) -> List[float]:
        return [metrics[name] for _, metrics in self.history if name in metrics]


__all__ = ["JsonlSink", "CsvSink", "MetricsCapture"]
