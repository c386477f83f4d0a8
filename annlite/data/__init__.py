"""Dataset registry and loader helpers."""

# Ensure built-in datasets register themselves when the package is imported.
from . import csv_table as _csv_table  # noqa: F401
from . import truth_tables as _truth_tables  # noqa: F401
from .registry import DatasetSpec, available_datasets, get_dataset, register_dataset
from .truth_tables import truth_table

__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
    "truth_table",
]
