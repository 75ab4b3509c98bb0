"""Invocation backends for the external ``task`` executable."""

from taskwarrior_mcp.backend.base import TaskBackend
from taskwarrior_mcp.backend.cli_backend import BackendRunError, TaskCliBackend

__all__ = [
    "BackendRunError",
    "TaskBackend",
    "TaskCliBackend",
]
