"""Utility helpers for the scanner."""

from .fileio import read_structured_file, read_text_file, write_text_file
from .discovery import is_environment_file, iter_env_files

__all__ = [
    "read_structured_file",
    "read_text_file",
    "write_text_file",
    "is_environment_file",
    "iter_env_files",
]
