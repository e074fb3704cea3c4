"""Utility functions for rulegate."""

from rulegate.utils.helpers import merge_dicts, resolve_path

__all__ = [
    "merge_dicts",
    "resolve_path",
]
