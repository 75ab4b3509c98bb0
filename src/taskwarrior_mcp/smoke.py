"""Lightweight smoke check for the external ``task`` executable."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass

from taskwarrior_mcp.config import Settings


@dataclass(slots=True)
class TaskSmokeResult:
    """Smoke-check result for one configured executable."""

    executable: str
    resolved_path: str | None
    available: bool
    version_ok: bool
    store_ok: bool
    version: str | None
    error: str | None
    stderr_preview: str = ""

    @property
    def ok(self) -> bool:
        return self.available and self.version_ok and self.store_ok


def run_smoke_check(settings: Settings, *, timeout_seconds: float | None = None) -> TaskSmokeResult:
    """Resolve the executable, check its version, then run a read-only count.

    ``timeout_seconds`` bounds each command; ``None`` waits indefinitely.
    """

    env = settings.process_env()

    resolved = shutil.which(settings.task_binary)
    if resolved is None:
        return TaskSmokeResult(
            executable=settings.task_binary,
            resolved_path=None,
            available=False,
            version_ok=False,
            store_ok=False,
            version=None,
            error=f"Executable not found in PATH: {settings.task_binary}",
        )

    ok, error, stdout, stderr = _run([resolved, "--version"], timeout_seconds=timeout_seconds, env=env)
    if not ok:
        return TaskSmokeResult(
            executable=settings.task_binary,
            resolved_path=resolved,
            available=True,
            version_ok=False,
            store_ok=False,
            version=None,
            error=f"{error} (resolved executable: {resolved})",
            stderr_preview=stderr,
        )
    version = stdout or None

    ok, error, _, stderr = _run(
        [resolved, *settings.global_options(), "count"],
        timeout_seconds=timeout_seconds,
        env=env,
    )
    return TaskSmokeResult(
        executable=settings.task_binary,
        resolved_path=resolved,
        available=True,
        version_ok=True,
        store_ok=ok,
        version=version,
        error=None if ok else f"Task store check failed: {error}",
        stderr_preview=stderr,
    )


def render_smoke_lines(result: TaskSmokeResult) -> list[str]:
    lines = [
        f"executable: {result.executable}",
        f"resolved: {result.resolved_path or '-'}",
        f"available: {_yes_no(result.available)}",
        f"version: {result.version or '-'}",
        f"version_ok: {_yes_no(result.version_ok)}",
        f"store_ok: {_yes_no(result.store_ok)}",
    ]
    if result.error:
        lines.append(f"error: {result.error}")
    if result.stderr_preview:
        lines.append(f"stderr: {result.stderr_preview}")
    return lines


def _run(
    args: list[str],
    *,
    timeout_seconds: float | None,
    env: dict[str, str] | None,
) -> tuple[bool, str | None, str, str]:
    try:
        completed = subprocess.run(  # noqa: S603
            args,
            check=False,
            capture_output=True,
            text=True,
            stdin=subprocess.DEVNULL,
            env=env,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        return False, "Command timed out.", "", ""
    except OSError as error:
        return False, f"Command failed to start: {error}", "", ""

    stdout = _truncate(completed.stdout)
    stderr = _truncate(completed.stderr)
    if completed.returncode != 0:
        return False, f"exit code={completed.returncode}", stdout, stderr
    return True, None, stdout, stderr


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def _truncate(value: str, *, limit: int = 240) -> str:
    compact = value.strip().replace("\n", " ")
    if len(compact) <= limit:
        return compact
    return compact[:limit] + "..."
