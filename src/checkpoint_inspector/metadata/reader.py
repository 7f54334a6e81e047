"""Readers for the metadata files stored in a checkpoint directory."""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from ..exceptions import MetadataReadError
from ..models import ContainerConfig, ContainerdStatus, Mount, RuntimeSpec

logger = logging.getLogger(__name__)

CONFIG_DUMP_FILE = "config.dump"
SPEC_DUMP_FILE = "spec.dump"
STATUS_FILE = "status"
CHECKPOINT_DIRECTORY = "checkpoint"
ROOTFS_DIFF_TAR = "rootfs-diff.tar"
STATS_DUMP_FILE = "stats-dump"

# Go writes 1-9 fractional digits; datetime.fromisoformat wants exactly 6
_FRACTION_PATTERN = re.compile(r"\.(\d+)")

PathLike = Union[str, Path]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp as written by Go's encoding/json.

    Args:
        value: Timestamp string such as "2024-05-01T10:20:30.123456789+02:00"

    Returns:
        Timezone-aware datetime, or None for empty values

    Raises:
        ValueError: If the value is not a valid timestamp
    """
    if value in (None, ""):
        return None
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be a string, got {type(value).__name__}")

    normalized = _FRACTION_PATTERN.sub(
        lambda m: "." + m.group(1)[:6].ljust(6, "0"), value.strip(), count=1
    )
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    return datetime.fromisoformat(normalized)


def _read_json_file(checkpoint_dir: PathLike, file_name: str) -> Any:
    """Load a JSON metadata file from the checkpoint directory."""
    file_path = Path(checkpoint_dir) / file_name
    try:
        with open(file_path, encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as e:
        raise MetadataReadError(f"{file_name} not found in {checkpoint_dir}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise MetadataReadError(f"Failed to read {file_name}: {e}") from e
    except json.JSONDecodeError as e:
        raise MetadataReadError(f"Invalid JSON in {file_name}: {e}") from e


def _require_object(data: Any, file_name: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise MetadataReadError(f"{file_name} must contain a JSON object")
    return data


def read_config_dump(checkpoint_dir: PathLike) -> ContainerConfig:
    """Read the container configuration from config.dump.

    Args:
        checkpoint_dir: Extracted checkpoint directory

    Returns:
        ContainerConfig object

    Raises:
        MetadataReadError: If config.dump is missing or malformed
    """
    data = _require_object(_read_json_file(checkpoint_dir, CONFIG_DUMP_FILE), CONFIG_DUMP_FILE)

    try:
        return ContainerConfig(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            rootfs_image_name=str(data.get("rootfsImageName", "")),
            oci_runtime=str(data.get("runtime", "")),
            created_time=parse_timestamp(data.get("createdTime")),
            checkpointed_time=parse_timestamp(data.get("checkpointedTime")),
            restored_time=parse_timestamp(data.get("restoredTime")),
            restored=bool(data.get("restored", False)),
        )
    except ValueError as e:
        raise MetadataReadError(f"Invalid timestamp in {CONFIG_DUMP_FILE}: {e}") from e


def _parse_mount(entry: Any) -> Mount:
    if not isinstance(entry, dict):
        raise MetadataReadError(f"Invalid mount entry in {SPEC_DUMP_FILE}: {entry!r}")

    options = entry.get("options") or []
    if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
        raise MetadataReadError(
            f"mount options in {SPEC_DUMP_FILE} must be a list of strings: {options!r}"
        )

    return Mount(
        destination=str(entry.get("destination", "")),
        type=str(entry.get("type", "")),
        source=str(entry.get("source", "")),
        options=list(options),
    )


def read_spec_dump(checkpoint_dir: PathLike) -> RuntimeSpec:
    """Read annotations and mounts from the OCI runtime spec in spec.dump.

    Raises:
        MetadataReadError: If spec.dump is missing or malformed
    """
    data = _require_object(_read_json_file(checkpoint_dir, SPEC_DUMP_FILE), SPEC_DUMP_FILE)

    annotations = data.get("annotations") or {}
    if not isinstance(annotations, dict):
        raise MetadataReadError(f"annotations in {SPEC_DUMP_FILE} must be an object")

    mounts = data.get("mounts") or []
    if not isinstance(mounts, list):
        raise MetadataReadError(f"mounts in {SPEC_DUMP_FILE} must be a list")

    return RuntimeSpec(
        annotations={str(k): str(v) for k, v in annotations.items()},
        mounts=[_parse_mount(entry) for entry in mounts],
    )


def read_status_file(checkpoint_dir: PathLike) -> Optional[ContainerdStatus]:
    """Read the containerd status file if the checkpoint has one.

    Returns:
        ContainerdStatus, or None when the status file does not exist

    Raises:
        MetadataReadError: If the status file exists but cannot be used
    """
    status_path = Path(checkpoint_dir) / STATUS_FILE
    if not status_path.exists():
        logger.debug("No %s file in %s", STATUS_FILE, checkpoint_dir)
        return None

    data = _require_object(_read_json_file(checkpoint_dir, STATUS_FILE), STATUS_FILE)
    try:
        return ContainerdStatus(
            created_at=int(data["CreatedAt"]),
            started_at=int(data.get("StartedAt", 0)),
            finished_at=int(data.get("FinishedAt", 0)),
            exit_code=int(data.get("ExitCode", 0)),
            pid=int(data.get("Pid", 0)),
            reason=str(data.get("Reason", "")),
            message=str(data.get("Message", "")),
        )
    except KeyError as e:
        raise MetadataReadError(f"{STATUS_FILE} is missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise MetadataReadError(f"Invalid value in {STATUS_FILE}: {e}") from e
