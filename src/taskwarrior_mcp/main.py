"""CLI entrypoint for taskwarrior-mcp."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import rich_click as click

from taskwarrior_mcp import __version__
from taskwarrior_mcp.controllers import (
    BackendOptions,
    CommandResult,
    TaskCliController,
    ToolCallCommand,
)
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

click.rich_click.USE_MARKDOWN = True
CONTROLLER = TaskCliController()


def backend_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach --task-binary/--data-dir/--taskrc/--timeout to a command."""

    func = click.option(
        "--timeout",
        "timeout_seconds",
        type=click.FloatRange(min=0),
        default=None,
        help="Seconds before a task process is killed (0 disables). "
        "Defaults to TASKWARRIOR_MCP_TIMEOUT_SECONDS or 30.",
    )(func)
    func = click.option(
        "--taskrc",
        type=click.Path(path_type=Path, dir_okay=False),
        default=None,
        help="Taskwarrior config file passed as TASKRC. Defaults to TASKWARRIOR_MCP_TASKRC.",
    )(func)
    func = click.option(
        "--data-dir",
        type=click.Path(path_type=Path, file_okay=False),
        default=None,
        help="Taskwarrior data directory (rc.data.location). "
        "Defaults to TASKWARRIOR_MCP_DATA_DIR or the taskrc setting.",
    )(func)
    return click.option(
        "--task-binary",
        default=None,
        help="Taskwarrior executable. Defaults to TASKWARRIOR_MCP_TASK_BINARY or `task`.",
    )(func)


def dry_run_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--dry-run",
        is_flag=True,
        default=False,
        help="Print the task command line instead of running it.",
    )(func)


@click.group()
@click.version_option(version=__version__, prog_name="taskwarrior-mcp")
def taskwarrior_mcp() -> None:
    """Taskwarrior MCP server CLI."""


@taskwarrior_mcp.command("serve")
@backend_options
def serve(**backend: Any) -> None:
    """Run the MCP server over stdio."""

    try:
        CONTROLLER.serve(BackendOptions(**backend))
    except ValueError as error:
        raise click.ClickException(str(error)) from error


@taskwarrior_mcp.command("check")
@backend_options
def check(**backend: Any) -> None:
    """Check that the task executable is installed and its data store is readable."""

    try:
        result = CONTROLLER.check(BackendOptions(**backend))
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("Taskwarrior smoke check failed.")


@taskwarrior_mcp.group()
def tool() -> None:
    """Invoke one MCP tool directly, without a client."""


@tool.command("add")
@click.argument("description")
@click.option("--project", required=True, help="Project (dot-notation for subprojects).")
@click.option("--due", default=None, help="Due date, e.g. tomorrow, eow, 2025-06-15.")
@click.option("--tag", "tags", multiple=True, help="Tag without the + prefix. Can be repeated.")
@click.option("--priority", type=click.Choice(["H", "M", "L"]), default=None, help="Priority.")
@click.option("--wait", default=None, help="Hide the task from reports until this date.")
@click.option("--scheduled", default=None, help="When you plan to start.")
@dry_run_option
@backend_options
def tool_add(  # noqa: PLR0913
    description: str,
    project: str,
    due: str | None,
    tags: tuple[str, ...],
    priority: str | None,
    wait: str | None,
    scheduled: str | None,
    dry_run: bool,
    **backend: Any,
) -> None:
    """Add a task to a project."""

    _call(
        AddTask(
            description=description,
            project=project,
            due=due,
            tags=tags,
            priority=priority,
            wait=wait,
            scheduled=scheduled,
        ),
        dry_run=dry_run,
        backend=backend,
    )


@tool.command("list")
@click.option("--project", required=True, help="Project to scope the report to.")
@click.option("--filter", "filter_", default=None, help='Extra filter tokens, e.g. "+urgent".')
@click.option("--report", default=None, help="Report name (default: next).")
@click.option(
    "--all-projects",
    is_flag=True,
    default=False,
    help="Drop the project scope. Only for explicit cross-project views.",
)
@dry_run_option
@backend_options
def tool_list(  # noqa: PLR0913
    project: str,
    filter_: str | None,
    report: str | None,
    all_projects: bool,
    dry_run: bool,
    **backend: Any,
) -> None:
    """List tasks in a project."""

    _call(
        ListTasks(project=project, filter=filter_, report=report, all_projects=all_projects),
        dry_run=dry_run,
        backend=backend,
    )


@tool.command("search")
@click.argument("pattern")
@click.option("--project", required=True, help="Project to scope the search to.")
@click.option("--filter", "filter_", default=None, help="Extra filter tokens.")
@click.option("--all-projects", is_flag=True, default=False, help="Search every project.")
@dry_run_option
@backend_options
def tool_search(  # noqa: PLR0913
    pattern: str,
    project: str,
    filter_: str | None,
    all_projects: bool,
    dry_run: bool,
    **backend: Any,
) -> None:
    """Search descriptions and annotations by regex."""

    _call(
        SearchTasks(pattern=pattern, project=project, filter=filter_, all_projects=all_projects),
        dry_run=dry_run,
        backend=backend,
    )


@tool.command("get")
@click.argument("task_id")
@dry_run_option
@backend_options
def tool_get(task_id: str, dry_run: bool, **backend: Any) -> None:
    """Show full task details."""

    _call(GetTask(id=task_id), dry_run=dry_run, backend=backend)


@tool.command("modify")
@click.argument("task_id")
@click.argument("modifications")
@dry_run_option
@backend_options
def tool_modify(task_id: str, modifications: str, dry_run: bool, **backend: Any) -> None:
    """Modify a task, e.g. `tool modify 3 "due:friday +urgent"`."""

    _call(ModifyTask(id=task_id, modifications=modifications), dry_run=dry_run, backend=backend)


@tool.command("done")
@click.argument("task_id")
@dry_run_option
@backend_options
def tool_done(task_id: str, dry_run: bool, **backend: Any) -> None:
    """Mark a task as completed."""

    _call(CompleteTask(id=task_id), dry_run=dry_run, backend=backend)


@tool.command("delete")
@click.argument("task_id")
@dry_run_option
@backend_options
def tool_delete(task_id: str, dry_run: bool, **backend: Any) -> None:
    """Permanently delete a task."""

    _call(DeleteTask(id=task_id), dry_run=dry_run, backend=backend)


@tool.command("annotate")
@click.argument("task_id")
@click.argument("note")
@dry_run_option
@backend_options
def tool_annotate(task_id: str, note: str, dry_run: bool, **backend: Any) -> None:
    """Attach a note to a task."""

    _call(AnnotateTask(id=task_id, note=note), dry_run=dry_run, backend=backend)


def _call(request: TaskRequest, *, dry_run: bool, backend: dict[str, Any]) -> None:
    try:
        result = CONTROLLER.call_tool(
            ToolCallCommand(
                request=request,
                options=BackendOptions(**backend),
                dry_run=dry_run,
            ),
        )
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _emit_result(result)


def _emit_result(result: CommandResult) -> None:
    if result.success:
        _emit_lines(result.lines)
        return
    for line in result.lines:
        click.echo(line, err=True)
    raise click.ClickException("task command failed.")


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    taskwarrior_mcp()
