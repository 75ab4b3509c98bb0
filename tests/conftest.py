"""Shared test fixtures."""

from __future__ import annotations

import os
import shutil
import stat
import sys
from collections.abc import Iterable
from pathlib import Path

import pytest

from taskwarrior_mcp.config import Settings
from taskwarrior_mcp.models import ArgumentVector, ExecutionOutcome

_SLOW_MARKER = "hanging"

_FAKE_TASK_SCRIPT = """\
#!{python}
import json
import os
import sys
import time

args = sys.argv[1:]
if "{slow_marker}" in os.path.basename(sys.argv[0]):
    time.sleep(30)
if "show-taskrc" in args:
    print(os.environ.get("TASKRC", "<unset>"))
    sys.exit(0)
if args == ["--version"]:
    print("3.1.0")
    sys.exit(0)
if "count" in args:
    print("0")
    sys.exit(0)
if "fail-empty" in args:
    print("boom from task", file=sys.stderr)
    sys.exit(2)
if "fail-silent" in args:
    sys.exit(3)
if "sleep" in args:
    time.sleep(30)
print(json.dumps(args))
print("warning on stderr", file=sys.stderr)
"""


class FakeBackend:
    """In-memory backend recording argument vectors and replaying outcomes."""

    def __init__(self, outcomes: Iterable[ExecutionOutcome] = ()) -> None:
        self.calls: list[ArgumentVector] = []
        self._outcomes = list(outcomes)
        self.error: Exception | None = None

    def queue(self, stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        self._outcomes.append(ExecutionOutcome(stdout=stdout, stderr=stderr, exit_code=exit_code))

    async def execute(self, argv: ArgumentVector) -> ExecutionOutcome:
        self.calls.append(argv)
        if self.error is not None:
            raise self.error
        if self._outcomes:
            return self._outcomes.pop(0)
        return ExecutionOutcome(stdout="", stderr="", exit_code=0)


@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def fake_task_binary(tmp_path: Path) -> Path:
    """Executable stand-in for ``task`` that echoes its argv as JSON."""

    return _write_fake_task(tmp_path / "bin" / "task")


@pytest.fixture()
def hanging_task_binary(tmp_path: Path) -> Path:
    """Stand-in for ``task`` that sleeps before answering anything, even ``--version``."""

    return _write_fake_task(tmp_path / "bin" / f"task-{_SLOW_MARKER}")


def _write_fake_task(script: Path) -> Path:
    if os.name == "nt":
        pytest.skip("shebang scripts are POSIX only")
    script.parent.mkdir(exist_ok=True)
    script.write_text(
        _FAKE_TASK_SCRIPT.format(python=sys.executable, slow_marker=_SLOW_MARKER),
        "utf-8",
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in list(os.environ):
        if name.startswith("TASKWARRIOR_MCP_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def taskwarrior(tmp_path: Path) -> Settings:
    """Settings for a real ``task`` isolated in a temporary data dir and taskrc."""

    binary = shutil.which("task")
    if binary is None:
        pytest.skip("Taskwarrior (task) is not installed")
    taskrc = tmp_path / "taskrc"
    taskrc.write_text("", "utf-8")
    data_dir = tmp_path / "task-data"
    data_dir.mkdir()
    return Settings(
        task_binary=binary,
        data_dir=data_dir,
        taskrc=taskrc,
        timeout_seconds=30.0,
        rc_overrides=(("color", "off"), ("verbose", "new-id,affected,blank,label,footnote")),
    )
