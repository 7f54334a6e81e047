"""Show a checkpoint report for a synthetic Podman checkpoint, or a real one.

Usage:
    python examples/show_checkpoint.py                 # synthetic checkpoint
    python examples/show_checkpoint.py /tmp/ckpt-web   # extracted checkpoint
"""

import json
import logging
import sys
import tempfile
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, "src")

from checkpoint_inspector import (
    CheckpointError,
    DisplayOptions,
    show_container_checkpoint,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_synthetic_checkpoint(base: Path) -> Path:
    """Create a minimal extracted Podman checkpoint."""
    config = {
        "id": "9d1c0f3e5a7b2c4d6e8f0a1b3c5d7e9f",
        "name": "demo",
        "rootfsImageName": "docker.io/library/alpine:latest",
        "runtime": "crun",
        "createdTime": "2024-06-01T08:30:00.5Z",
    }
    spec = {
        "annotations": {"io.container.manager": "libpod"},
        "mounts": [
            {"destination": "/proc", "type": "proc", "source": "proc"},
            {
                "destination": "/etc/resolv.conf",
                "type": "bind",
                "source": "/run/containers/storage/overlay-containers/9d1c/userdata/resolv.conf",
            },
        ],
    }

    (base / "config.dump").write_text(json.dumps(config))
    (base / "spec.dump").write_text(json.dumps(spec))
    (base / "checkpoint").mkdir()
    (base / "checkpoint" / "pages-1.img").write_bytes(b"\0" * 8192)
    (base / "rootfs-diff.tar").write_bytes(b"\0" * 1536)
    return base


def main():
    options = DisplayOptions(show_mounts=True)

    try:
        if len(sys.argv) > 1:
            show_container_checkpoint(sys.argv[1], options)
            return

        with tempfile.TemporaryDirectory() as tmp:
            checkpoint = create_synthetic_checkpoint(Path(tmp))
            logger.info("Created synthetic checkpoint in %s", checkpoint)
            show_container_checkpoint(checkpoint, options)
    except CheckpointError as e:
        logger.error("Checkpoint inspection failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
