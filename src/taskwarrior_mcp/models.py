"""Request, outcome and result models shared by compiler, backend and server."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, TypeAlias


class RequestKind(str, Enum):
    """Operations exposed to the caller, one per tool."""

    ADD = "add"
    LIST = "list"
    SEARCH = "search"
    GET = "get"
    MODIFY = "modify"
    COMPLETE = "complete"
    DELETE = "delete"
    ANNOTATE = "annotate"


@dataclass(frozen=True, slots=True)
class AddTask:
    """Create a task; the project is mandatory."""

    kind: ClassVar[RequestKind] = RequestKind.ADD

    description: str
    project: str
    due: str | None = None
    tags: tuple[str, ...] = ()
    priority: str | None = None
    wait: str | None = None
    scheduled: str | None = None


@dataclass(frozen=True, slots=True)
class ListTasks:
    """Run a report, scoped to one project unless ``all_projects`` is set."""

    kind: ClassVar[RequestKind] = RequestKind.LIST

    project: str
    filter: str | None = None
    report: str | None = None
    all_projects: bool = False


@dataclass(frozen=True, slots=True)
class SearchTasks:
    """Regex search over descriptions and annotations."""

    kind: ClassVar[RequestKind] = RequestKind.SEARCH

    pattern: str
    project: str
    filter: str | None = None
    all_projects: bool = False


@dataclass(frozen=True, slots=True)
class GetTask:
    kind: ClassVar[RequestKind] = RequestKind.GET

    id: str


@dataclass(frozen=True, slots=True)
class ModifyTask:
    """Apply space-separated modification tokens, e.g. ``due:friday +urgent``."""

    kind: ClassVar[RequestKind] = RequestKind.MODIFY

    id: str
    modifications: str


@dataclass(frozen=True, slots=True)
class CompleteTask:
    kind: ClassVar[RequestKind] = RequestKind.COMPLETE

    id: str


@dataclass(frozen=True, slots=True)
class DeleteTask:
    kind: ClassVar[RequestKind] = RequestKind.DELETE

    id: str


@dataclass(frozen=True, slots=True)
class AnnotateTask:
    kind: ClassVar[RequestKind] = RequestKind.ANNOTATE

    id: str
    note: str


TaskRequest: TypeAlias = (
    AddTask | ListTasks | SearchTasks | GetTask | ModifyTask | CompleteTask | DeleteTask | AnnotateTask
)

ArgumentVector: TypeAlias = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """Captured output of one ``task`` process run."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @classmethod
    def from_bytes(cls, *, stdout: bytes, stderr: bytes, exit_code: int) -> ExecutionOutcome:
        """Decode raw process streams, replacing invalid UTF-8 and trimming whitespace."""

        return cls(
            stdout=stdout.decode("utf-8", errors="replace").strip(),
            stderr=stderr.decode("utf-8", errors="replace").strip(),
            exit_code=exit_code,
        )


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Caller-facing text plus error flag."""

    text: str
    is_error: bool = False
