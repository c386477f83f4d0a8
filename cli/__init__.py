"""Command line entry points for annlite."""
