"""MCP tool surface over :class:`TaskwarriorService`."""

from __future__ import annotations

import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from taskwarrior_mcp import __version__
from taskwarrior_mcp.backend import BackendRunError
from taskwarrior_mcp.models import (
    AddTask,
    AnnotateTask,
    CompleteTask,
    DeleteTask,
    GetTask,
    ListTasks,
    ModifyTask,
    SearchTasks,
    TaskRequest,
)
from taskwarrior_mcp.service import TaskwarriorService

logger = logging.getLogger(__name__)

SERVER_NAME = "taskwarrior-mcp"

SERVER_INSTRUCTIONS = (
    "Taskwarrior MCP server. PROJECT SCOPING IS MANDATORY: "
    "add_task requires `project`, list_tasks and search_tasks require `project` and "
    "automatically prepend it as a filter, so thousands of unrelated tasks never "
    "flood the context. Only pass all_projects=true when the user explicitly asks "
    "for a cross-project view. "
    "Tools: add_task · list_tasks · search_tasks · get_task · modify_task · "
    "complete_task · delete_task · annotate_task. "
    "Date syntax: today · tomorrow · eow · eom · friday · 2025-06-15 · 2025-06-15T14:30. "
    "Virtual filter tags: +OVERDUE · +DUE · +READY · +BLOCKED · +BLOCKING · +ACTIVE · "
    "+WAITING · +TODAY."
)

TaskId = Annotated[str, Field(description="Task ID (numeric) or UUID")]
Project = Annotated[
    str,
    Field(
        description=(
            "Project to scope to (REQUIRED). Use dot-notation for subprojects, "
            'e.g. "Work" or "Work.Backend".'
        ),
    ),
]
AllProjects = Annotated[
    bool,
    Field(
        description=(
            "Override project scoping and query ALL projects. Only use when the request "
            "is explicitly cross-project."
        ),
    ),
]


class TaskwarriorTools:
    """One coroutine per MCP tool; error-flagged results become tool errors."""

    def __init__(self, service: TaskwarriorService) -> None:
        self.service = service

    async def add_task(
        self,
        description: Annotated[str, Field(description="Task description")],
        project: Project,
        due: Annotated[
            str | None,
            Field(description='Due date/time: "today", "tomorrow", "eow", "eom", "friday", "2025-06-15"'),
        ] = None,
        tags: Annotated[
            list[str] | None,
            Field(description='Tags to apply, without the + prefix (e.g. ["urgent", "blocked"])'),
        ] = None,
        priority: Annotated[str | None, Field(description="Priority: H, M or L")] = None,
        wait: Annotated[
            str | None,
            Field(description="Wait date; the task is hidden from reports until then"),
        ] = None,
        scheduled: Annotated[
            str | None,
            Field(description="Scheduled date; when you plan to start (due is when it must finish)"),
        ] = None,
    ) -> str:
        return await self._run(
            AddTask(
                description=description,
                project=project,
                due=due,
                tags=tuple(tags or ()),
                priority=priority,
                wait=wait,
                scheduled=scheduled,
            ),
        )

    async def list_tasks(
        self,
        project: Project,
        filter: Annotated[
            str | None,
            Field(description='Extra filter tokens, e.g. "+urgent priority:H +OVERDUE"'),
        ] = None,
        report: Annotated[
            str | None,
            Field(description="Report: next (default, urgency-sorted), list, all, completed, waiting, blocked"),
        ] = None,
        all_projects: AllProjects = False,
    ) -> str:
        return await self._run(
            ListTasks(project=project, filter=filter, report=report, all_projects=all_projects),
        )

    async def search_tasks(
        self,
        pattern: Annotated[
            str,
            Field(description="Regex pattern matched against descriptions and annotations"),
        ],
        project: Project,
        filter: Annotated[
            str | None,
            Field(description='Extra filter tokens to narrow results, e.g. "priority:H"'),
        ] = None,
        all_projects: AllProjects = False,
    ) -> str:
        return await self._run(
            SearchTasks(pattern=pattern, project=project, filter=filter, all_projects=all_projects),
        )

    async def get_task(self, id: TaskId) -> str:  # noqa: A002
        return await self._run(GetTask(id=id))

    async def modify_task(
        self,
        id: TaskId,  # noqa: A002
        modifications: Annotated[
            str,
            Field(
                description=(
                    'Space-separated tokens, e.g. "due:friday priority:H +urgent -old project:Work". '
                    'Clear a field by omitting its value: "due: priority:"'
                ),
            ),
        ],
    ) -> str:
        return await self._run(ModifyTask(id=id, modifications=modifications))

    async def complete_task(self, id: TaskId) -> str:  # noqa: A002
        return await self._run(CompleteTask(id=id))

    async def delete_task(self, id: TaskId) -> str:  # noqa: A002
        return await self._run(DeleteTask(id=id))

    async def annotate_task(
        self,
        id: TaskId,  # noqa: A002
        note: Annotated[str, Field(description="Note text; Taskwarrior timestamps it")],
    ) -> str:
        return await self._run(AnnotateTask(id=id, note=note))

    async def _run(self, request: TaskRequest) -> str:
        try:
            result = await self.service.handle(request)
        except BackendRunError as error:
            raise ToolError(str(error)) from error
        if result.is_error:
            raise ToolError(result.text)
        return result.text


TOOL_DESCRIPTIONS: dict[str, str] = {
    "add_task": (
        "Add a new task. `project` is REQUIRED; every task must belong to a project. "
        "Supports due dates (today/tomorrow/eow/eom/friday/ISO datetime), tags, "
        "dot-notation subprojects (e.g. Work.Backend), priorities (H/M/L), "
        "wait dates (hide until actionable), and scheduled dates (when you plan to start)."
    ),
    "list_tasks": (
        "List tasks sorted by urgency. `project` is REQUIRED and is automatically prepended "
        "as a filter to prevent loading thousands of unrelated tasks into context. "
        "Use `filter` for additional narrowing (+urgent, priority:H, +OVERDUE, +DUE, +READY, "
        "+BLOCKED). Use `report` to switch views: next (default), list, all, completed, "
        "waiting, blocked. Only set `all_projects=true` for explicit cross-project requests."
    ),
    "search_tasks": (
        "Search tasks by regex pattern across descriptions and annotations. "
        "`project` is REQUIRED and automatically scopes the search. "
        "Only set `all_projects=true` for explicit cross-project searches."
    ),
    "get_task": (
        "Get full details of a task by ID or UUID: all attributes, annotations, "
        "urgency score, dependencies, and timestamps."
    ),
    "modify_task": (
        "Modify a task's attributes. Pass modifications as a space-separated string: "
        "'due:friday priority:H +newtag -oldtag project:Work'. "
        "Clear a field by omitting its value: 'due: priority:'."
    ),
    "complete_task": "Mark a task as completed.",
    "delete_task": "Permanently delete a task.",
    "annotate_task": (
        "Attach a timestamped annotation (note) to a task. "
        "Use for progress updates, links, or context that shouldn't be lost."
    ),
}


def build_server(service: TaskwarriorService) -> FastMCP:
    """Create the FastMCP server with every task tool registered."""

    server = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)
    tools = TaskwarriorTools(service)
    for name, description in TOOL_DESCRIPTIONS.items():
        server.add_tool(getattr(tools, name), name=name, description=description)
    logger.info("Registered %d tools on %s %s", len(TOOL_DESCRIPTIONS), SERVER_NAME, __version__)
    return server
