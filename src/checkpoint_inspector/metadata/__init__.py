"""Checkpoint metadata file readers."""

from .reader import (
    CHECKPOINT_DIRECTORY,
    CONFIG_DUMP_FILE,
    ROOTFS_DIFF_TAR,
    SPEC_DUMP_FILE,
    STATS_DUMP_FILE,
    STATUS_FILE,
    parse_timestamp,
    read_config_dump,
    read_spec_dump,
    read_status_file,
)

__all__ = [
    "CHECKPOINT_DIRECTORY",
    "CONFIG_DUMP_FILE",
    "ROOTFS_DIFF_TAR",
    "SPEC_DUMP_FILE",
    "STATS_DUMP_FILE",
    "STATUS_FILE",
    "parse_timestamp",
    "read_config_dump",
    "read_spec_dump",
    "read_status_file",
]
