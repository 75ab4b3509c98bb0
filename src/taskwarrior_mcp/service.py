"""Use-case service: compile a request, run it, interpret the outcome."""

from __future__ import annotations

from taskwarrior_mcp.backend import TaskBackend
from taskwarrior_mcp.compiler import compile_request
from taskwarrior_mcp.interpreter import interpret_outcome
from taskwarrior_mcp.models import TaskRequest, ToolResult


class TaskwarriorService:
    """Stateless pipeline over one backend; safe to share between concurrent calls."""

    def __init__(self, *, backend: TaskBackend) -> None:
        self.backend = backend

    async def handle(self, request: TaskRequest) -> ToolResult:
        """Run one request end to end.

        ``BackendRunError`` propagates: a process that never ran is not an
        empty report, even for list and search.
        """

        argv = compile_request(request)
        outcome = await self.backend.execute(argv)
        return interpret_outcome(request.kind, outcome)
