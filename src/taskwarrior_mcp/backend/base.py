"""Backend interface for running one ``task`` command."""

from __future__ import annotations

from typing import Protocol

from taskwarrior_mcp.models import ArgumentVector, ExecutionOutcome


class TaskBackend(Protocol):
    """Protocol implemented by backend runners."""

    async def execute(self, argv: ArgumentVector) -> ExecutionOutcome:
        """Run ``task`` with the given argument vector and capture its output."""
