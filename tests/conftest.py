"""Test configuration and fixtures."""

import pytest

from checkpoint_inspector.models import DumpStatistics
from checkpoint_inspector.render import RecordingSink
from tests.helpers import (
    containerd_spec,
    containerd_status,
    crio_spec,
    podman_config,
    podman_spec,
    write_checkpoint,
)


@pytest.fixture
def podman_checkpoint(tmp_path):
    """Podman checkpoint with 4096 bytes of CRIU images."""
    return write_checkpoint(
        tmp_path / "podman",
        config=podman_config(),
        spec=podman_spec(),
        checkpoint_files={"pages-1.img": 4096},
    )


@pytest.fixture
def crio_checkpoint(tmp_path):
    """CRI-O checkpoint."""
    return write_checkpoint(
        tmp_path / "crio",
        config=podman_config(name="k8s_counter_pod", runtime="runc"),
        spec=crio_spec(),
    )


@pytest.fixture
def containerd_checkpoint(tmp_path):
    """containerd checkpoint recognized by its status file."""
    return write_checkpoint(
        tmp_path / "containerd",
        config=podman_config(name="", runtime="io.containerd.runc.v2"),
        spec=containerd_spec(),
        status=containerd_status(),
    )


@pytest.fixture
def sink():
    """Sink recording rendered tables."""
    return RecordingSink()


@pytest.fixture
def dump_statistics():
    return DumpStatistics(
        freezing_time=120,
        frozen_time=35000,
        memdump_time=8000,
        memwrite_time=21000,
        pages_scanned=15234,
        pages_written=9876,
        pages_skipped_parent=0,
    )


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")
