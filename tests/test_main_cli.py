from __future__ import annotations

import json
import time
from pathlib import Path

import allure
from click.testing import CliRunner

from taskwarrior_mcp import __version__
from taskwarrior_mcp.main import taskwarrior_mcp

pytestmark = [
    allure.epic("CLI"),
    allure.feature("Direct Tool Invocation"),
]


def test_version_option() -> None:
    result = CliRunner().invoke(taskwarrior_mcp, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_tool_list_dry_run_prints_scoped_command() -> None:
    result = CliRunner().invoke(
        taskwarrior_mcp,
        ["tool", "list", "--project", "alpha", "--filter", "+urgent priority:H", "--dry-run"],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "task rc.confirmation=no project:alpha +urgent priority:H next"


def test_tool_list_all_projects_dry_run_drops_scope() -> None:
    result = CliRunner().invoke(
        taskwarrior_mcp,
        ["tool", "list", "--project", "alpha", "--all-projects", "--report", "all", "--dry-run"],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "task rc.confirmation=no all"


def test_tool_add_dry_run_uses_data_dir_and_env_binary(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKWARRIOR_MCP_TASK_BINARY", "task3")
    data_dir = tmp_path / "data"

    result = CliRunner().invoke(
        taskwarrior_mcp,
        [
            "tool",
            "add",
            "Write the docs",
            "--project",
            "docs",
            "--tag",
            "a",
            "--tag",
            "b",
            "--priority",
            "M",
            "--data-dir",
            str(data_dir),
            "--dry-run",
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == (
        f"task3 rc.confirmation=no rc.data.location={data_dir} "
        "add 'Write the docs' project:docs priority:M +a +b"
    )


def test_tool_search_dry_run() -> None:
    result = CliRunner().invoke(
        taskwarrior_mcp,
        ["tool", "search", "needle", "--project", "p", "--dry-run"],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "task rc.confirmation=no project:p /needle/ list"


def test_tool_get_runs_backend(fake_task_binary: Path) -> None:
    result = CliRunner().invoke(
        taskwarrior_mcp,
        ["tool", "get", "7", "--task-binary", str(fake_task_binary)],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output.strip()) == ["rc.confirmation=no", "7", "information"]


def test_tool_failure_exits_non_zero(fake_task_binary: Path) -> None:
    result = CliRunner().invoke(
        taskwarrior_mcp,
        ["tool", "done", "fail-empty", "--task-binary", str(fake_task_binary)],
    )

    assert result.exit_code == 1
    assert "task command failed." in result.output


def test_missing_binary_exits_non_zero(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        taskwarrior_mcp,
        ["tool", "list", "--project", "p", "--task-binary", str(tmp_path / "missing")],
    )

    assert result.exit_code == 1
    assert "task command failed." in result.output


def test_invalid_config_is_reported(monkeypatch) -> None:
    monkeypatch.setenv("TASKWARRIOR_MCP_RC_OVERRIDES", "confirmation=yes")

    result = CliRunner().invoke(taskwarrior_mcp, ["tool", "get", "1", "--dry-run"])

    assert result.exit_code == 1
    assert "must not override confirmation" in result.output


def test_check_reports_missing_binary(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        taskwarrior_mcp,
        ["check", "--task-binary", str(tmp_path / "missing")],
    )

    assert result.exit_code == 1
    assert "available: no" in result.output
    assert "Taskwarrior smoke check failed." in result.output


def test_check_with_fake_binary(fake_task_binary: Path) -> None:
    result = CliRunner().invoke(
        taskwarrior_mcp,
        ["check", "--task-binary", str(fake_task_binary)],
    )

    assert result.exit_code == 0, result.output
    assert "version: 3.1.0" in result.output
    assert "store_ok: yes" in result.output


def test_check_timeout_bounds_hanging_binary(hanging_task_binary: Path) -> None:
    started = time.monotonic()
    result = CliRunner().invoke(
        taskwarrior_mcp,
        ["check", "--task-binary", str(hanging_task_binary), "--timeout", "0.5"],
    )
    elapsed = time.monotonic() - started

    assert result.exit_code == 1
    assert "version_ok: no" in result.output
    assert "Command timed out." in result.output
    assert elapsed < 10


def test_check_timeout_from_env(hanging_task_binary: Path, monkeypatch) -> None:
    monkeypatch.setenv("TASKWARRIOR_MCP_TIMEOUT_SECONDS", "0.5")
    started = time.monotonic()

    result = CliRunner().invoke(taskwarrior_mcp, ["check", "--task-binary", str(hanging_task_binary)])

    assert result.exit_code == 1
    assert time.monotonic() - started < 10


def test_tool_dry_run_accepts_taskrc(tmp_path: Path) -> None:
    taskrc = tmp_path / "taskrc"

    result = CliRunner().invoke(
        taskwarrior_mcp,
        ["tool", "get", "1", "--taskrc", str(taskrc), "--dry-run"],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "task rc.confirmation=no 1 information"
