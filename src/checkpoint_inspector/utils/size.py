"""Checkpoint size calculation utilities."""

import logging
import os
import stat
from pathlib import Path
from typing import Optional, Union

from ..exceptions import TraversalError
from ..metadata.reader import CHECKPOINT_DIRECTORY, ROOTFS_DIFF_TAR
from ..models import CheckpointSizeMetrics

logger = logging.getLogger(__name__)

_BYTE_UNIT = 1024
_UNIT_PREFIXES = "KMGTPE"


def byte_to_string(size: int) -> str:
    """Format a byte count with binary units.

    Args:
        size: Number of bytes

    Returns:
        Human readable size (e.g., "512 B", "4.0 KiB", "1.5 GiB")
    """
    if size < _BYTE_UNIT:
        return f"{size} B"

    div, exp = _BYTE_UNIT, 0
    n = size // _BYTE_UNIT
    while n >= _BYTE_UNIT and exp < len(_UNIT_PREFIXES) - 1:
        div *= _BYTE_UNIT
        exp += 1
        n //= _BYTE_UNIT
    return f"{size / div:.1f} {_UNIT_PREFIXES[exp]}iB"


def _walk_size(path: str) -> int:
    # explicit stack; tree depth is not bounded by the interpreter recursion limit
    total = 0
    pending = [path]
    while pending:
        with os.scandir(pending.pop()) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    pending.append(entry.path)
                else:
                    total += entry.stat(follow_symlinks=False).st_size
    return total


def dir_size(path: Union[str, Path]) -> int:
    """Sum the sizes of all non-directory entries below path.

    Entries are not dereferenced: a symlink contributes the size of the
    link itself and hardlinked files are counted once per link.

    Args:
        path: Directory (or single file) to measure

    Returns:
        Total size in bytes

    Raises:
        TraversalError: If any part of the tree cannot be read
    """
    try:
        st = os.lstat(path)
        if not stat.S_ISDIR(st.st_mode):
            return st.st_size
        return _walk_size(os.fspath(path))
    except OSError as e:
        raise TraversalError(f"Failed to calculate size of {path}: {e}") from e


def get_checkpoint_size(checkpoint_dir: Union[str, Path]) -> int:
    """Size of the CRIU image subtree of a checkpoint."""
    return dir_size(Path(checkpoint_dir) / CHECKPOINT_DIRECTORY)


def get_rootfs_diff_size(checkpoint_dir: Union[str, Path]) -> Optional[int]:
    """Size of rootfs-diff.tar, or None if it is missing or empty."""
    diff_path = Path(checkpoint_dir) / ROOTFS_DIFF_TAR
    try:
        size = os.lstat(diff_path).st_size
    except OSError as e:
        logger.debug("No usable %s in %s: %s", ROOTFS_DIFF_TAR, checkpoint_dir, e)
        return None
    return size or None


def get_size_metrics(checkpoint_dir: Union[str, Path]) -> CheckpointSizeMetrics:
    """Compute fresh size metrics for a checkpoint directory.

    Raises:
        TraversalError: If the checkpoint subtree cannot be walked
    """
    metrics = CheckpointSizeMetrics(
        total_size=get_checkpoint_size(checkpoint_dir),
        rootfs_diff_size=get_rootfs_diff_size(checkpoint_dir),
    )
    logger.debug(
        "Checkpoint %s: size=%d rootfs_diff=%s",
        checkpoint_dir,
        metrics.total_size,
        metrics.rootfs_diff_size,
    )
    return metrics
