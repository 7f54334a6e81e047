"""Mount overview for checkpoint reports."""

from typing import Iterable

from .models import Mount, MountEntry, ReportTable
from .utils.paths import shorten_path

MOUNTS_TITLE = "Overview of Mounts"
MOUNTS_HEADER = ("Destination", "Type", "Source")


def mount_overview(mounts: Iterable[Mount], full_paths: bool = False) -> list[MountEntry]:
    """One display entry per mount, in spec.dump order.

    Args:
        mounts: Mounts from spec.dump
        full_paths: Show sources verbatim instead of shortened
    """
    return [
        MountEntry(
            destination=mount.destination,
            type=mount.type,
            source=mount.source if full_paths else shorten_path(mount.source),
        )
        for mount in mounts
    ]


def build_mounts_table(mounts: Iterable[Mount], full_paths: bool = False) -> ReportTable:
    rows = tuple(
        (entry.destination, entry.type, entry.source)
        for entry in mount_overview(mounts, full_paths)
    )
    return ReportTable(header=MOUNTS_HEADER, rows=rows, title=MOUNTS_TITLE)
