"""Data models for checkpoint inspection."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Engine(str, Enum):
    """Container engine that produced a checkpoint."""

    PODMAN = "Podman"
    CONTAINERD = "containerd"
    CRIO = "CRI-O"


@dataclass
class ContainerConfig:
    """Container configuration stored in config.dump."""

    id: str
    name: str
    rootfs_image_name: str = ""
    oci_runtime: str = ""
    created_time: Optional[datetime] = None
    checkpointed_time: Optional[datetime] = None
    restored_time: Optional[datetime] = None
    restored: bool = False


@dataclass
class Mount:
    """OCI runtime spec mount entry."""

    destination: str
    type: str = ""
    source: str = ""
    options: list[str] = field(default_factory=list)


@dataclass
class RuntimeSpec:
    """Subset of the OCI runtime spec stored in spec.dump."""

    annotations: dict[str, str] = field(default_factory=dict)
    mounts: list[Mount] = field(default_factory=list)


@dataclass
class ContainerdStatus:
    """containerd status file; timestamps are nanoseconds since the epoch."""

    created_at: int
    started_at: int = 0
    finished_at: int = 0
    exit_code: int = 0
    pid: int = 0
    reason: str = ""
    message: str = ""


@dataclass(frozen=True)
class ContainerIdentity:
    """Normalized container identity independent of the producing engine."""

    name: str
    created: str
    engine: Engine
    ip: Optional[str] = None
    mac: Optional[str] = None


@dataclass(frozen=True)
class CheckpointSizeMetrics:
    """On-disk size of a checkpoint."""

    total_size: int
    rootfs_diff_size: Optional[int] = None


@dataclass(frozen=True)
class DumpStatistics:
    """CRIU dump statistics; times in microseconds."""

    freezing_time: int
    frozen_time: int
    memdump_time: int
    memwrite_time: int
    pages_scanned: int
    pages_written: int
    pages_skipped_parent: Optional[int] = None
    pages_lazy: Optional[int] = None


@dataclass(frozen=True)
class MountEntry:
    """Display row for one mount."""

    destination: str
    type: str
    source: str


@dataclass(frozen=True)
class ReportTable:
    """Header and rows handed to a presentation sink."""

    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    title: str = ""

    def __post_init__(self) -> None:
        for row in self.rows:
            if len(row) != len(self.header):
                raise ValueError(
                    f"Row has {len(row)} cells but header has {len(self.header)} columns"
                )


@dataclass(frozen=True)
class CheckpointReport:
    """Everything rendered for one checkpoint directory."""

    directory: str
    identity: ContainerIdentity
    sizes: CheckpointSizeMetrics
    container: ReportTable
    mounts: Optional[ReportTable] = None
    statistics: Optional[ReportTable] = None
