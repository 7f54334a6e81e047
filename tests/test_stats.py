"""Tests for CRIU dump statistics retrieval."""

import json
import subprocess

import pytest

from checkpoint_inspector.config import CritConfig
from checkpoint_inspector.exceptions import StatisticsError
from checkpoint_inspector.stats import (
    CritStatisticsReader,
    build_stats_table,
    get_dump_statistics,
    parse_dump_entry,
)

DECODED_STATS = {
    "magic": "STATS",
    "entries": [
        {
            "dump": {
                "freezing_time": 120,
                "frozen_time": 35000,
                "memdump_time": 8000,
                "memwrite_time": 21000,
                "pages_scanned": 15234,
                "pages_skipped_parent": 0,
                "pages_written": 9876,
                "irmap_resolve": 0,
                "pages_lazy": 0,
            }
        }
    ],
}


def test_parse_dump_entry():
    stats = parse_dump_entry(DECODED_STATS)

    assert stats.freezing_time == 120
    assert stats.frozen_time == 35000
    assert stats.memdump_time == 8000
    assert stats.memwrite_time == 21000
    assert stats.pages_scanned == 15234
    assert stats.pages_written == 9876
    assert stats.pages_skipped_parent == 0


def test_parse_dump_entry_without_dump():
    with pytest.raises(StatisticsError, match="no dump statistics"):
        parse_dump_entry({"magic": "STATS", "entries": [{"restore": {}}]})

    with pytest.raises(StatisticsError, match="no entries"):
        parse_dump_entry({"magic": "STATS", "entries": []})


def test_parse_dump_entry_missing_counter():
    decoded = json.loads(json.dumps(DECODED_STATS))
    del decoded["entries"][0]["dump"]["pages_written"]

    with pytest.raises(StatisticsError, match="pages_written"):
        parse_dump_entry(decoded)


def test_crit_reader(tmp_path, monkeypatch):
    """Test stats-dump is piped through crit decode and closed afterwards."""
    (tmp_path / "stats-dump").write_bytes(b"\x00binary image")
    seen = {}

    def fake_run(command, stdin, **kwargs):
        seen["command"] = command
        seen["stdin"] = stdin
        seen["timeout"] = kwargs["timeout"]
        assert stdin.read() == b"\x00binary image"
        return subprocess.CompletedProcess(command, 0, stdout=json.dumps(DECODED_STATS), stderr="")

    monkeypatch.setattr("checkpoint_inspector.stats.subprocess.run", fake_run)

    reader = CritStatisticsReader(CritConfig(command=("python3", "-m", "crit"), timeout=5))
    stats = reader(tmp_path)

    assert stats.pages_scanned == 15234
    assert seen["command"] == ["python3", "-m", "crit", "decode"]
    assert seen["timeout"] == 5
    assert seen["stdin"].closed


def test_crit_reader_failure_closes_image(tmp_path, monkeypatch):
    """Test the image is released when crit fails."""
    (tmp_path / "stats-dump").write_bytes(b"bad")
    seen = {}

    def fake_run(command, stdin, **kwargs):
        seen["stdin"] = stdin
        raise subprocess.CalledProcessError(1, command, output="", stderr="unknown magic\n")

    monkeypatch.setattr("checkpoint_inspector.stats.subprocess.run", fake_run)

    with pytest.raises(StatisticsError, match="unknown magic"):
        CritStatisticsReader()(tmp_path)

    assert seen["stdin"].closed


def test_crit_reader_missing_binary(tmp_path, monkeypatch):
    (tmp_path / "stats-dump").write_bytes(b"img")

    def fake_run(command, stdin, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", command[0])

    monkeypatch.setattr("checkpoint_inspector.stats.subprocess.run", fake_run)

    with pytest.raises(StatisticsError, match="crit command not found"):
        CritStatisticsReader()(tmp_path)


def test_crit_reader_timeout(tmp_path, monkeypatch):
    (tmp_path / "stats-dump").write_bytes(b"img")

    def fake_run(command, stdin, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr("checkpoint_inspector.stats.subprocess.run", fake_run)

    with pytest.raises(StatisticsError, match="timed out"):
        CritStatisticsReader(CritConfig(timeout=1))(tmp_path)


def test_crit_reader_invalid_json(tmp_path, monkeypatch):
    (tmp_path / "stats-dump").write_bytes(b"img")

    def fake_run(command, stdin, **kwargs):
        return subprocess.CompletedProcess(command, 0, stdout="not json", stderr="")

    monkeypatch.setattr("checkpoint_inspector.stats.subprocess.run", fake_run)

    with pytest.raises(StatisticsError, match="Invalid JSON"):
        CritStatisticsReader()(tmp_path)


def test_crit_reader_missing_stats_dump(tmp_path, monkeypatch):
    def fake_run(command, stdin, **kwargs):
        pytest.fail("crit must not run without stats-dump")

    monkeypatch.setattr("checkpoint_inspector.stats.subprocess.run", fake_run)

    with pytest.raises(StatisticsError, match="stats-dump not found"):
        CritStatisticsReader()(tmp_path)


def test_get_dump_statistics_wraps_errors(tmp_path):
    """Test reader failures are reported as statistics errors."""

    def broken_reader(checkpoint_dir):
        raise RuntimeError("image truncated")

    with pytest.raises(StatisticsError) as exc_info:
        get_dump_statistics(tmp_path, broken_reader)

    message = str(exc_info.value)
    assert message.startswith("unable to display checkpointing statistics")
    assert "image truncated" in message


def test_get_dump_statistics(tmp_path, dump_statistics):
    assert get_dump_statistics(tmp_path, lambda d: dump_statistics) == dump_statistics


def test_build_stats_table(dump_statistics):
    table = build_stats_table(dump_statistics)

    assert table.title == "CRIU dump statistics"
    assert table.header == (
        "Freezing Time",
        "Frozen Time",
        "Memdump Time",
        "Memwrite Time",
        "Pages Scanned",
        "Pages Written",
    )
    assert table.rows == (("120 us", "35000 us", "8000 us", "21000 us", "15234", "9876"),)
