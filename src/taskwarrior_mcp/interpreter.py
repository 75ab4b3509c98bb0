"""Turn captured ``task`` output into caller-facing results."""

from __future__ import annotations

import re

from taskwarrior_mcp.models import ExecutionOutcome, RequestKind, ToolResult

NO_TASKS_FOUND = "No tasks found."
NO_MATCHING_TASKS = "No matching tasks."

# Empty reports are ordinary for reads; ``task`` may still exit non-zero for them.
_EMPTY_RESULT_TEXT: dict[RequestKind, str] = {
    RequestKind.LIST: NO_TASKS_FOUND,
    RequestKind.SEARCH: NO_MATCHING_TASKS,
}

_CREATED_TASK_RE = re.compile(r"\bCreated task\s+(\S+)")


def interpret_outcome(kind: RequestKind, outcome: ExecutionOutcome) -> ToolResult:
    """Classify one outcome for the request kind that produced it."""

    result = apply_base_rule(outcome)
    empty_text = _EMPTY_RESULT_TEXT.get(kind)
    if empty_text is None:
        return result
    if result.is_error or not result.text:
        return ToolResult(text=empty_text)
    return result


def apply_base_rule(outcome: ExecutionOutcome) -> ToolResult:
    """Hard failure only when the process failed and printed nothing to stdout."""

    if not outcome.succeeded and not outcome.stdout:
        return ToolResult(
            text=outcome.stderr or f"task exited with status {outcome.exit_code}",
            is_error=True,
        )
    return ToolResult(text=outcome.stdout or outcome.stderr)


def parse_created_task_id(text: str) -> str | None:
    """Extract the new task id from ``add`` output, e.g. ``Created task 5.`` -> ``5``."""

    match = _CREATED_TASK_RE.search(text)
    if match is None:
        return None
    task_id = match.group(1).rstrip(".,;:!")
    return task_id or None
