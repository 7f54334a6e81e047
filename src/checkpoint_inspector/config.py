"""Configuration values passed explicitly into the report pipeline.

Usage:
    from checkpoint_inspector.config import CritConfig, DisplayOptions

    options = DisplayOptions(show_mounts=True)
    crit = CritConfig.from_env()

Environment variables (read by ``CritConfig.from_env`` only):
- CHECKPOINT_INSPECTOR_CRIT: command used to run crit (default: "crit").
  Split on whitespace, e.g. "python3 -m crit".
- CHECKPOINT_INSPECTOR_CRIT_TIMEOUT: seconds to wait for crit (default: 60).
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from typing import Mapping, Optional

_DEFAULT_CRIT_COMMAND = ("crit",)
_DEFAULT_CRIT_TIMEOUT = 60.0


@dataclass(frozen=True)
class DisplayOptions:
    """Caller supplied switches for optional report sections."""

    show_mounts: bool = False
    print_stats: bool = False
    full_paths: bool = False


@dataclass(frozen=True)
class CritConfig:
    """How to invoke the crit image decoder."""

    command: tuple[str, ...] = _DEFAULT_CRIT_COMMAND
    timeout: float = _DEFAULT_CRIT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CritConfig":
        env = os.environ if environ is None else environ

        raw_command = (env.get("CHECKPOINT_INSPECTOR_CRIT") or "").strip()
        command = tuple(shlex.split(raw_command)) if raw_command else _DEFAULT_CRIT_COMMAND

        raw_timeout = (env.get("CHECKPOINT_INSPECTOR_CRIT_TIMEOUT") or "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else _DEFAULT_CRIT_TIMEOUT
        except ValueError as e:
            raise ValueError(
                f"Invalid CHECKPOINT_INSPECTOR_CRIT_TIMEOUT: {raw_timeout!r}"
            ) from e
        if timeout <= 0:
            raise ValueError(f"CHECKPOINT_INSPECTOR_CRIT_TIMEOUT must be positive: {timeout}")

        return cls(command=command, timeout=timeout)
