"""CSV loader for numeric training tables."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

from .registry import DatasetSpec, register_dataset


def _load_csv(path: Path, target_cols: Sequence[str]) -> tuple[np.ndarray, np.ndarray]:
    df = pd.read_csv(path)
    missing = [col for col in target_cols if col not in df.columns]
    if missing:
        raise KeyError(f"Target column(s) {missing!r} not found in CSV {path}")
    y = df[list(target_cols)].to_numpy(dtype=np.float64)
    X = df.drop(columns=list(target_cols)).to_numpy(dtype=np.float64)
    return X, y


@register_dataset("csv")
def load_csv(
    *,
    csv_path: str | Path | None = None,
    target_cols: Sequence[str] | str = "target",
    **_: object,
) -> DatasetSpec:
    """Load samples from a CSV file; every non-target column is an input."""

    if csv_path is None:
        raise ValueError("The csv dataset requires a `csv_path` option")
    if isinstance(target_cols, str):
        target_cols = [c.strip() for c in target_cols.split(",") if c.strip()]
    path = Path(csv_path)
    X, y = _load_csv(path, target_cols)
    return DatasetSpec(
        name="csv",
        inputs=X,
        targets=y,
        provenance={
            "type": "csv",
            "path": str(path),
            "target_cols": list(target_cols),
            "rows": int(X.shape[0]),
        },
    )


__all__ = ["load_csv"]
