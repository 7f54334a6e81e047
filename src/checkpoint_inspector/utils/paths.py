"""Path helpers for compact display."""

import os


def shorten_path(path: str) -> str:
    """Keep only the last two components of a long path.

    Args:
        path: Path to shorten (e.g., "/var/lib/containers/storage/volume")

    Returns:
        "../<parent>/<name>" when the path has more than two components,
        otherwise the path unchanged. Only meant for display.
    """
    parts = [part for part in path.split(os.sep) if part]
    if len(parts) <= 2:
        return path
    return os.path.join("..", *parts[-2:])
