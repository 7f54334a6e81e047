"""Checkpoint Inspector - summarize CRIU container checkpoint directories."""

import logging

__version__ = "0.1.0"

from .config import CritConfig, DisplayOptions
from .engines import extract_identity
from .exceptions import (
    CheckpointError,
    ClassificationError,
    MetadataParseError,
    MetadataReadError,
    StatisticsError,
    TraversalError,
)
from .models import CheckpointReport, ContainerIdentity, Engine, ReportTable
from .render import RecordingSink, RichTableSink
from .report import (
    build_checkpoint_report,
    show_container_checkpoint,
    show_container_checkpoints,
)
from .stats import CritStatisticsReader, get_dump_statistics

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "build_checkpoint_report",
    "show_container_checkpoint",
    "show_container_checkpoints",
    "extract_identity",
    "get_dump_statistics",
    "CritStatisticsReader",
    "CritConfig",
    "DisplayOptions",
    "CheckpointReport",
    "ContainerIdentity",
    "Engine",
    "ReportTable",
    "RecordingSink",
    "RichTableSink",
    "CheckpointError",
    "ClassificationError",
    "MetadataParseError",
    "MetadataReadError",
    "StatisticsError",
    "TraversalError",
]
