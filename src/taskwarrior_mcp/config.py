"""Runtime configuration for the Taskwarrior adapter."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

CONFIRMATION_OVERRIDE = "rc.confirmation=no"
_CONFIRMATION_KEY = "confirmation"
_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


@dataclass(slots=True)
class Settings:
    """Settings for invoking the external ``task`` executable."""

    task_binary: str = "task"
    data_dir: Path | None = None
    taskrc: Path | None = None
    timeout_seconds: float = 30.0
    rc_overrides: tuple[tuple[str, str], ...] = ()
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with defaults matching a stock Taskwarrior install."""

        data_dir_raw = os.getenv("TASKWARRIOR_MCP_DATA_DIR", "").strip()
        taskrc_raw = os.getenv("TASKWARRIOR_MCP_TASKRC", "").strip()
        return cls(
            task_binary=os.getenv("TASKWARRIOR_MCP_TASK_BINARY", "task").strip(),
            data_dir=Path(data_dir_raw).expanduser() if data_dir_raw else None,
            taskrc=Path(taskrc_raw).expanduser() if taskrc_raw else None,
            timeout_seconds=_env_float("TASKWARRIOR_MCP_TIMEOUT_SECONDS", default=30.0),
            rc_overrides=_parse_rc_overrides(os.getenv("TASKWARRIOR_MCP_RC_OVERRIDES", "")),
            log_level=os.getenv("TASKWARRIOR_MCP_LOG_LEVEL", "INFO").strip().upper(),
        )

    @property
    def timeout(self) -> float | None:
        """Process timeout in seconds, ``None`` when disabled."""

        return self.timeout_seconds if self.timeout_seconds > 0 else None

    def global_options(self) -> tuple[str, ...]:
        """Options placed before every argument vector."""

        options = [CONFIRMATION_OVERRIDE]
        options.extend(f"rc.{key}={value}" for key, value in self.rc_overrides)
        if self.data_dir is not None:
            options.append(f"rc.data.location={self.data_dir}")
        return tuple(options)

    def process_env(self) -> dict[str, str] | None:
        """Child environment, or ``None`` to inherit ours unchanged."""

        if self.taskrc is None:
            return None
        env = os.environ.copy()
        env["TASKRC"] = str(self.taskrc)
        return env

    def validate(self) -> None:
        """Raise configuration error for values the backend cannot use."""

        if not self.task_binary:
            raise ValueError("TASKWARRIOR_MCP_TASK_BINARY must not be empty.")
        if self.timeout_seconds < 0:
            raise ValueError("TASKWARRIOR_MCP_TIMEOUT_SECONDS must be >= 0.")
        for key, _ in self.rc_overrides:
            if key == _CONFIRMATION_KEY:
                raise ValueError("TASKWARRIOR_MCP_RC_OVERRIDES must not override confirmation.")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid TASKWARRIOR_MCP_LOG_LEVEL: {self.log_level!r}. "
                f"Expected one of {', '.join(sorted(_LOG_LEVELS))}.",
            )

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


def _parse_rc_overrides(raw: str) -> tuple[tuple[str, str], ...]:
    overrides: list[tuple[str, str]] = []
    for part in raw.split(","):
        token = part.strip()
        if not token:
            continue
        if "=" not in token:
            raise ValueError(
                "Invalid TASKWARRIOR_MCP_RC_OVERRIDES entry: "
                f"{token!r}. Expected format '<key>=<value>'.",
            )
        key, value = token.split("=", 1)
        key = key.strip().removeprefix("rc.")
        if not key:
            raise ValueError(f"Invalid TASKWARRIOR_MCP_RC_OVERRIDES entry: {token!r}. Empty key.")
        overrides.append((key, value.strip()))
    return tuple(overrides)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as error:
        raise ValueError(f"Invalid numeric value for {name}: {value!r}") from error
