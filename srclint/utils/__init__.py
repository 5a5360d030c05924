"""Utility helpers for the linter."""

from .fileio import read_yaml_file, read_source, read_stream
from .code import iter_source_paths

__all__ = [
    "read_yaml_file",
    "read_source",
    "read_stream",
    "iter_source_paths",
]
