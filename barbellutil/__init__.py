"""Utilities: iterator pipelines, thread-pool helpers, data structures, CSV conversion and log files."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "algo",
    "datastruct",
    "fileio",
    "iterators",
    "parallel",
    "csvio",
    "logfile",
]