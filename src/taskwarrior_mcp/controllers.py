"""Controllers for taskwarrior-mcp CLI commands."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path

from taskwarrior_mcp.backend import BackendRunError, TaskCliBackend
from taskwarrior_mcp.compiler import compile_request
from taskwarrior_mcp.config import Settings
from taskwarrior_mcp.models import TaskRequest
from taskwarrior_mcp.server import build_server
from taskwarrior_mcp.service import TaskwarriorService
from taskwarrior_mcp.smoke import render_smoke_lines, run_smoke_check

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BackendOptions:
    """CLI overrides for environment settings."""

    task_binary: str | None = None
    data_dir: Path | None = None
    taskrc: Path | None = None
    timeout_seconds: float | None = None


@dataclass(slots=True)
class ToolCallCommand:
    """CLI input for a direct tool invocation."""

    request: TaskRequest
    options: BackendOptions
    dry_run: bool = False


@dataclass(slots=True)
class CommandResult:
    """Lines to print plus the success flag used for the exit status."""

    lines: list[str]
    success: bool


class TaskCliController:
    """Coordinates server, smoke-check and direct tool CLI operations."""

    def load_settings(self, options: BackendOptions) -> Settings:
        settings = Settings.from_env()
        if options.task_binary is not None:
            settings = replace(settings, task_binary=options.task_binary)
        if options.data_dir is not None:
            settings = replace(settings, data_dir=options.data_dir)
        if options.taskrc is not None:
            settings = replace(settings, taskrc=options.taskrc)
        if options.timeout_seconds is not None:
            settings = replace(settings, timeout_seconds=options.timeout_seconds)
        settings.validate()
        return settings

    def configure_logging(self, settings: Settings) -> None:
        # stdout carries the MCP stdio transport; logs go to stderr only.
        logging.basicConfig(
            level=settings.log_level_number,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    def serve(self, options: BackendOptions) -> None:
        settings = self.load_settings(options)
        self.configure_logging(settings)
        backend = TaskCliBackend(settings)
        server = build_server(TaskwarriorService(backend=backend))
        logger.info(
            "Starting taskwarrior-mcp on stdio (task=%s, data_dir=%s)",
            settings.task_binary,
            settings.data_dir or "<taskrc default>",
        )
        server.run(transport="stdio")

    def check(self, options: BackendOptions) -> CommandResult:
        settings = self.load_settings(options)
        result = run_smoke_check(settings, timeout_seconds=settings.timeout)
        return CommandResult(
            lines=["Taskwarrior smoke check:", *render_smoke_lines(result)],
            success=result.ok,
        )

    def call_tool(self, command: ToolCallCommand) -> CommandResult:
        settings = self.load_settings(command.options)
        backend = TaskCliBackend(settings)
        if command.dry_run:
            argv = compile_request(command.request)
            return CommandResult(lines=[backend.render_command(argv)], success=True)

        self.configure_logging(settings)
        service = TaskwarriorService(backend=backend)
        try:
            result = asyncio.run(service.handle(command.request))
        except BackendRunError as error:
            return CommandResult(lines=[str(error)], success=False)
        return CommandResult(lines=result.text.splitlines(), success=not result.is_error)
