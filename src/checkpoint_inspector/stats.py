"""CRIU dump statistics retrieval."""

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Callable, Optional, Union

from .config import CritConfig
from .exceptions import StatisticsError
from .metadata.reader import STATS_DUMP_FILE
from .models import DumpStatistics, ReportTable

logger = logging.getLogger(__name__)

STATS_TITLE = "CRIU dump statistics"
STATS_HEADER = (
    "Freezing Time",
    "Frozen Time",
    "Memdump Time",
    "Memwrite Time",
    "Pages Scanned",
    "Pages Written",
)

PathLike = Union[str, Path]
StatisticsReader = Callable[[PathLike], DumpStatistics]


def _counter(entry: dict[str, Any], key: str, required: bool = True) -> Optional[int]:
    value = entry.get(key)
    if value is None:
        if required:
            raise StatisticsError(f"dump statistics are missing {key}")
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise StatisticsError(f"Invalid value for {key}: {value!r}") from e


def parse_dump_entry(decoded: Any) -> DumpStatistics:
    """Extract dump counters from crit's JSON rendering of stats-dump.

    Args:
        decoded: Output of ``crit decode``, e.g.
            {"magic": "STATS", "entries": [{"dump": {...}}]}

    Raises:
        StatisticsError: If no dump entry is present
    """
    entries = decoded.get("entries") if isinstance(decoded, dict) else None
    if not isinstance(entries, list) or not entries or not isinstance(entries[0], dict):
        raise StatisticsError("stats-dump contains no entries")

    dump = entries[0].get("dump")
    if not isinstance(dump, dict):
        raise StatisticsError("stats-dump contains no dump statistics")

    return DumpStatistics(
        freezing_time=_counter(dump, "freezing_time"),
        frozen_time=_counter(dump, "frozen_time"),
        memdump_time=_counter(dump, "memdump_time"),
        memwrite_time=_counter(dump, "memwrite_time"),
        pages_scanned=_counter(dump, "pages_scanned"),
        pages_written=_counter(dump, "pages_written"),
        pages_skipped_parent=_counter(dump, "pages_skipped_parent", required=False),
        pages_lazy=_counter(dump, "pages_lazy", required=False),
    )


class CritStatisticsReader:
    """Reads stats-dump through the ``crit decode`` command."""

    def __init__(self, config: Optional[CritConfig] = None) -> None:
        self.config = config or CritConfig()

    def __call__(self, checkpoint_dir: PathLike) -> DumpStatistics:
        stats_path = Path(checkpoint_dir) / STATS_DUMP_FILE
        command = [*self.config.command, "decode"]
        logger.debug("Decoding %s with %s", stats_path, " ".join(command))

        try:
            with open(stats_path, "rb") as image:
                result = subprocess.run(
                    command,
                    stdin=image,
                    capture_output=True,
                    text=True,
                    timeout=self.config.timeout,
                    check=True,
                )
        except FileNotFoundError as e:
            if e.filename and Path(e.filename) == stats_path:
                raise StatisticsError(f"{STATS_DUMP_FILE} not found in {checkpoint_dir}") from e
            raise StatisticsError(f"crit command not found: {self.config.command[0]}") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise StatisticsError(
                f"crit decode failed with exit code {e.returncode}: {stderr}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise StatisticsError(f"crit decode timed out after {e.timeout}s") from e
        except OSError as e:
            raise StatisticsError(f"Failed to read {stats_path}: {e}") from e

        try:
            decoded = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise StatisticsError(f"Invalid JSON from crit decode: {e}") from e

        return parse_dump_entry(decoded)


def get_dump_statistics(
    checkpoint_dir: PathLike, reader: Optional[StatisticsReader] = None
) -> DumpStatistics:
    """Fetch dump statistics for a checkpoint directory.

    Raises:
        StatisticsError: If the statistics cannot be retrieved
    """
    reader = reader or CritStatisticsReader()
    try:
        return reader(checkpoint_dir)
    except Exception as e:
        raise StatisticsError(f"unable to display checkpointing statistics: {e}") from e


def build_stats_table(stats: DumpStatistics) -> ReportTable:
    row = (
        f"{stats.freezing_time} us",
        f"{stats.frozen_time} us",
        f"{stats.memdump_time} us",
        f"{stats.memwrite_time} us",
        str(stats.pages_scanned),
        str(stats.pages_written),
    )
    return ReportTable(header=STATS_HEADER, rows=(row,), title=STATS_TITLE)
