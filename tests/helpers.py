"""Test helpers for building synthetic checkpoint directories."""

import json
from pathlib import Path
from typing import Any, Optional

CONTAINER_ID = "3f2a9c81d4e6b7a05c1d2e3f4a5b6c7d8e9f0a1b2c3d4e5f6a7b8c9d0e1f2a3b"


def write_checkpoint(
    base: Path,
    config: Optional[dict[str, Any]] = None,
    spec: Optional[dict[str, Any]] = None,
    status: Optional[dict[str, Any]] = None,
    checkpoint_files: Optional[dict[str, int]] = None,
    rootfs_diff_size: Optional[int] = None,
) -> Path:
    """Lay out an extracted checkpoint directory.

    checkpoint_files maps paths relative to checkpoint/ to file sizes.
    """
    base.mkdir(parents=True, exist_ok=True)
    if config is not None:
        (base / "config.dump").write_text(json.dumps(config))
    if spec is not None:
        (base / "spec.dump").write_text(json.dumps(spec))
    if status is not None:
        (base / "status").write_text(json.dumps(status))

    checkpoint_dir = base / "checkpoint"
    checkpoint_dir.mkdir(exist_ok=True)
    for rel_path, size in (checkpoint_files or {"pages-1.img": 4096}).items():
        file_path = checkpoint_dir / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(b"\0" * size)

    if rootfs_diff_size is not None:
        (base / "rootfs-diff.tar").write_bytes(b"x" * rootfs_diff_size)
    return base


def podman_config(**overrides: Any) -> dict[str, Any]:
    config = {
        "id": CONTAINER_ID,
        "name": "web",
        "rootfsImageName": "docker.io/library/nginx:latest",
        "runtime": "crun",
        "createdTime": "2024-03-05T14:07:09.123456789Z",
        "checkpointedTime": "2024-03-05T15:00:00Z",
        "restoredTime": "0001-01-01T00:00:00Z",
    }
    config.update(overrides)
    return config


def podman_spec(mounts: Optional[list[dict[str, Any]]] = None) -> dict[str, Any]:
    return {
        "annotations": {"io.container.manager": "libpod"},
        "mounts": mounts or [],
    }


def crio_spec(metadata: str = '{"name":"counter","attempt":1}') -> dict[str, Any]:
    return {
        "annotations": {
            "io.container.manager": "cri-o",
            "io.kubernetes.cri-o.Metadata": metadata,
            "io.kubernetes.cri-o.IP.0": "10.88.0.7",
            "io.kubernetes.cri-o.Created": "2024-03-05T14:07:09.5551234Z",
        },
        "mounts": [],
    }


def containerd_spec() -> dict[str, Any]:
    return {
        "annotations": {"io.kubernetes.cri.container-name": "redis"},
        "mounts": [],
    }


def containerd_status(created_at: int = 1_700_000_000_123_456_789) -> dict[str, Any]:
    return {
        "CreatedAt": created_at,
        "StartedAt": created_at + 1_000_000,
        "FinishedAt": 0,
        "ExitCode": 0,
        "Pid": 4242,
        "Reason": "",
        "Message": "",
    }
