"""Reporting utilities for annlite."""

from .artifacts import write_manifest
from .formatting import format_vector, print_predictions, print_vector
from .metrics import CsvSink, JsonlSink, MetricsCapture
from .plots import PlotAdapter
from .summary import write_summary

__all__ = [
    "write_manifest",
    "format_vector",
    "print_predictions",
    "print_vector",
    "CsvSink",
    "JsonlSink",
    "MetricsCapture",
    "PlotAdapter",
    "write_summary",
]
