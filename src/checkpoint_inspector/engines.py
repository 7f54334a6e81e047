"""Container engine classification and identity extraction.

Each engine stores the same facts in different places:

- Podman keeps name and creation time in config.dump.
- CRI-O keeps everything in spec.dump annotations, the name inside a
  nested JSON document.
- containerd has no manager annotation; it is recognized by its status
  file, which carries the creation time in nanoseconds.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from .exceptions import ClassificationError, MetadataParseError, MetadataReadError
from .metadata.reader import STATUS_FILE
from .models import (
    ContainerConfig,
    ContainerdStatus,
    ContainerIdentity,
    Engine,
    RuntimeSpec,
)

logger = logging.getLogger(__name__)

MANAGER_ANNOTATION = "io.container.manager"
PODMAN_MANAGER = "libpod"
CRIO_MANAGER = "cri-o"

CRIO_METADATA_ANNOTATION = "io.kubernetes.cri-o.Metadata"
CRIO_IP_ANNOTATION = "io.kubernetes.cri-o.IP.0"
CRIO_CREATED_ANNOTATION = "io.kubernetes.cri-o.Created"
CRI_CONTAINER_NAME_ANNOTATION = "io.kubernetes.cri.container-name"

ZERO_TIME_RFC3339 = "0001-01-01T00:00:00Z"

StatusLoader = Callable[[], Optional[ContainerdStatus]]


def format_rfc3339(value: Optional[datetime]) -> str:
    """Format a datetime like Go's time.RFC3339 layout.

    Seconds precision; a zero UTC offset is written as "Z". A missing time
    is rendered as Go's zero time.
    """
    if value is None:
        return ZERO_TIME_RFC3339
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    formatted = value.replace(microsecond=0).isoformat()
    if formatted.endswith("+00:00"):
        formatted = formatted[: -len("+00:00")] + "Z"
    return formatted


def nanoseconds_to_rfc3339(timestamp_ns: int) -> str:
    """Convert nanoseconds since the epoch to an RFC 3339 UTC string."""
    seconds = timestamp_ns // 1_000_000_000
    return format_rfc3339(datetime.fromtimestamp(seconds, tz=timezone.utc))


def classify_engine(spec: RuntimeSpec) -> Optional[Engine]:
    """Map the manager annotation to an engine.

    Returns None when the annotation does not name a known manager; the
    checkpoint may still be a containerd one, which only its status file
    can tell.
    """
    manager = spec.annotations.get(MANAGER_ANNOTATION, "")
    if manager == PODMAN_MANAGER:
        return Engine.PODMAN
    if manager == CRIO_MANAGER:
        return Engine.CRIO
    return None


def get_podman_info(config: ContainerConfig) -> ContainerIdentity:
    return ContainerIdentity(
        name=config.name,
        created=format_rfc3339(config.created_time),
        engine=Engine.PODMAN,
    )


def get_crio_info(spec: RuntimeSpec) -> ContainerIdentity:
    """Build the identity from CRI-O annotations.

    Raises:
        MetadataParseError: If the CRI-O metadata annotation is not valid JSON
    """
    raw_metadata = spec.annotations.get(CRIO_METADATA_ANNOTATION, "")
    try:
        metadata = json.loads(raw_metadata)
    except json.JSONDecodeError as e:
        raise MetadataParseError(
            f"failed to read CRI-O metadata {CRIO_METADATA_ANNOTATION}: {e}"
        ) from e
    if not isinstance(metadata, dict):
        raise MetadataParseError(
            f"failed to read CRI-O metadata {CRIO_METADATA_ANNOTATION}: "
            f"expected an object, got {type(metadata).__name__}"
        )

    return ContainerIdentity(
        name=str(metadata.get("name") or ""),
        # already formatted by CRI-O
        created=spec.annotations.get(CRIO_CREATED_ANNOTATION, ""),
        engine=Engine.CRIO,
        ip=spec.annotations.get(CRIO_IP_ANNOTATION) or None,
    )


def get_containerd_info(status: ContainerdStatus, spec: RuntimeSpec) -> ContainerIdentity:
    """Build the identity from the containerd status file and CRI annotations.

    Raises:
        MetadataReadError: If CreatedAt is not a representable time
    """
    try:
        created = nanoseconds_to_rfc3339(status.created_at)
    except (OverflowError, OSError, ValueError) as e:
        raise MetadataReadError(
            f"Invalid CreatedAt in {STATUS_FILE}: {status.created_at}: {e}"
        ) from e

    return ContainerIdentity(
        name=spec.annotations.get(CRI_CONTAINER_NAME_ANNOTATION, ""),
        created=created,
        engine=Engine.CONTAINERD,
    )


def extract_identity(
    config: ContainerConfig,
    spec: RuntimeSpec,
    status_loader: StatusLoader,
) -> ContainerIdentity:
    """Produce the normalized identity of a checkpointed container.

    Args:
        config: Parsed config.dump
        spec: Parsed spec.dump
        status_loader: Returns the containerd status record or None; only
            called when the manager annotation is not recognized

    Returns:
        ContainerIdentity with a non-empty engine

    Raises:
        ClassificationError: If the engine cannot be determined
        MetadataParseError: If CRI-O metadata is malformed
        MetadataReadError: If a present status file cannot be read
    """
    engine = classify_engine(spec)
    if engine is Engine.PODMAN:
        identity = get_podman_info(config)
    elif engine is Engine.CRIO:
        identity = get_crio_info(spec)
    else:
        manager = spec.annotations.get(MANAGER_ANNOTATION, "")
        status = status_loader()
        if status is None:
            raise ClassificationError(manager)
        identity = get_containerd_info(status, spec)

    logger.debug("Classified checkpoint of %r as %s", identity.name, identity.engine.value)
    return identity
