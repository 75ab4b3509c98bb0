"""Subprocess-based backend runner for the ``task`` executable."""

from __future__ import annotations

import asyncio
import logging
import shlex

from taskwarrior_mcp.config import Settings
from taskwarrior_mcp.models import ArgumentVector, ExecutionOutcome

logger = logging.getLogger(__name__)

_TERMINATE_GRACE_SECONDS = 2.0


class BackendRunError(RuntimeError):
    """The ``task`` process could not be started or did not finish."""

    def __init__(self, message: str, *, transient: bool) -> None:
        super().__init__(message)
        self.transient = transient


class TaskCliBackend:
    """Run ``task <global options> <argv>`` as a child process per call."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def build_command(self, argv: ArgumentVector) -> list[str]:
        return [self.settings.task_binary, *self.settings.global_options(), *argv]

    def render_command(self, argv: ArgumentVector) -> str:
        """Shell-quoted command line, for dry runs and logs."""

        return shlex.join(self.build_command(argv))

    async def execute(self, argv: ArgumentVector) -> ExecutionOutcome:
        command = self.build_command(argv)
        logger.debug("Running %s", shlex.join(command))
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self.settings.process_env(),
            )
        except FileNotFoundError as error:
            logger.warning("task executable not found: %s", self.settings.task_binary)
            raise BackendRunError(
                f"Failed to run task: executable not found: {self.settings.task_binary}",
                transient=False,
            ) from error
        except OSError as error:
            logger.warning("task failed to start: %s", error)
            raise BackendRunError(f"Failed to run task: {error}", transient=True) from error

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.settings.timeout,
            )
        except TimeoutError as error:
            await _terminate_process(process)
            logger.warning(
                "task timed out after %ss: %s",
                self.settings.timeout_seconds,
                shlex.join(command),
            )
            raise BackendRunError(
                f"task did not finish within {self.settings.timeout_seconds:g} seconds",
                transient=True,
            ) from error
        except asyncio.CancelledError:
            await _terminate_process(process)
            raise

        exit_code = process.returncode if process.returncode is not None else -1
        if exit_code != 0:
            logger.info("task exited with status %d: %s", exit_code, shlex.join(argv))
        return ExecutionOutcome.from_bytes(stdout=stdout, stderr=stderr, exit_code=exit_code)


async def _terminate_process(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.terminate()
    except ProcessLookupError:
        return
    try:
        await asyncio.wait_for(process.wait(), timeout=_TERMINATE_GRACE_SECONDS)
    except TimeoutError:
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()
