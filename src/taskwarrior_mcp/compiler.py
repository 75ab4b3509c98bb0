"""Compile typed requests into ``task`` argument vectors.

Every function here is pure: no I/O, no process state. Token order is
significant because ``task`` reads a positional command line:

- filter tokens come before the command word (``list``, ``next``, ...);
- modification tokens come after it (``add``, ``modify``, ...).

Project scoping is mandatory for reads. ``ListTasks`` and ``SearchTasks``
start with ``project:<name>`` unless the caller explicitly asks for
``all_projects``; ``AddTask`` always attaches the project.
"""

from __future__ import annotations

import logging

from taskwarrior_mcp.models import (
    AddTask,
    AnnotateTask,
    ArgumentVector,
    CompleteTask,
    DeleteTask,
    GetTask,
    ListTasks,
    ModifyTask,
    SearchTasks,
    TaskRequest,
)

logger = logging.getLogger(__name__)

DEFAULT_REPORT = "next"
SEARCH_REPORT = "list"


def compile_request(request: TaskRequest) -> ArgumentVector:
    """Return the argument vector for one request."""

    match request:
        case AddTask():
            argv = _compile_add(request)
        case ListTasks():
            argv = _compile_list(request)
        case SearchTasks():
            argv = _compile_search(request)
        case GetTask(id=task_id):
            argv = (task_id, "information")
        case ModifyTask(id=task_id, modifications=modifications):
            argv = (task_id, "modify", *split_free_form(modifications))
        case CompleteTask(id=task_id):
            argv = (task_id, "done")
        case DeleteTask(id=task_id):
            argv = (task_id, "delete")
        case AnnotateTask(id=task_id, note=note):
            argv = (task_id, "annotate", note)
        case _:
            raise TypeError(f"Unsupported task request: {type(request).__name__}")

    logger.debug("Compiled %s request: %r", request.kind.value, argv)
    return argv


def project_scope(project: str, *, all_projects: bool = False) -> ArgumentVector:
    """Scoping prefix for read requests; empty only for explicit cross-project reads."""

    if all_projects:
        return ()
    return (f"project:{project}",)


def split_free_form(value: str | None) -> ArgumentVector:
    """Split a caller filter/modification string on whitespace.

    There is no quoting or escaping: a token containing whitespace cannot be
    expressed. Tokens are passed through unvalidated, so ``due:`` clears a field.
    """

    if not value:
        return ()
    return tuple(value.split())


def search_token(pattern: str) -> str:
    # Embedded "/" is not escaped; ``task`` will mis-split such patterns.
    return f"/{pattern}/"


def _compile_add(request: AddTask) -> ArgumentVector:
    argv = ["add", request.description, f"project:{request.project}"]
    for name, value in (
        ("due", request.due),
        ("priority", request.priority),
        ("wait", request.wait),
        ("scheduled", request.scheduled),
    ):
        if value is not None:
            argv.append(f"{name}:{value}")
    argv.extend(f"+{tag}" for tag in request.tags)
    return tuple(argv)


def _compile_list(request: ListTasks) -> ArgumentVector:
    return (
        *project_scope(request.project, all_projects=request.all_projects),
        *split_free_form(request.filter),
        request.report or DEFAULT_REPORT,
    )


def _compile_search(request: SearchTasks) -> ArgumentVector:
    return (
        *project_scope(request.project, all_projects=request.all_projects),
        *split_free_form(request.filter),
        search_token(request.pattern),
        SEARCH_REPORT,
    )
