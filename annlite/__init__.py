"""annlite public API."""

from .core import activations  # noqa: F401
from .core.errors import NotInitializedError, ShapeMismatchError
from .core.layer import DenseLayer
from .core.types import RunResult, TrainingSet
from .data import available_datasets, get_dataset, truth_table
from .network import Network
from .reporting.formatting import format_vector, print_vector
from .training.pipelines import load_preset, presets, run_pipeline

__all__ = [
    "DenseLayer",
    "Network",
    "NotInitializedError",
    "ShapeMismatchError",
    "RunResult",
    "TrainingSet",
    "activations",
    "available_datasets",
    "get_dataset",
    "truth_table",
    "format_vector",
    "print_vector",
    "load_preset",
    "presets",
    "run_pipeline",
]
