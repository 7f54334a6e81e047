"""Utility functions for checkpoint inspection."""

from .paths import shorten_path
from .size import byte_to_string, dir_size, get_size_metrics

__all__ = ["byte_to_string", "dir_size", "get_size_metrics", "shorten_path"]
