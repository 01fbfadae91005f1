"""Board Graph: the in-memory aggregate reconstructed from the six tables.

Invariants:
    - Board owns columns, tasks, meetings and authors; tasks own checklist and comments
    - Task.column_id, Task.assignees and Meeting.participants are weak references
      (plain strings, never checked against columns or authors)
    - Task.created_at is ISO-8601 text that parses (guaranteed by the codec and the store)
    - frozen_rows holds raw rows hidden by the retention filter, keyed by table

Design Decisions:
    - Plain dataclasses, no IO: the graph is mutated synchronously by BoardStore
    - Timestamps kept as the stored text so an unmodified graph re-encodes byte-identical
"""

from dataclasses import dataclass, field, fields

from boardsync.core.domain_types import (
    DEFAULT_BOARD_ID, DEFAULT_BOARD_TITLE, DEFAULT_PRIORITY,
    Priority, Row, TableName,
)


@dataclass
class ChecklistItem:
    id: str
    text: str = ""
    completed: bool = False


@dataclass
class Comment:
    id: str
    author: str = ""
    content: str = ""
    created_at: str = ""


@dataclass
class Task:
    id: str
    column_id: str
    title: str = ""
    description: str = ""
    priority: Priority = DEFAULT_PRIORITY
    tags: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    due_date: str | None = None
    created_at: str = ""
    strategic_dimension: str | None = None
    strategic_objective: str | None = None
    checklist: list[ChecklistItem] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)


@dataclass
class Column:
    id: str
    title: str = ""
    order: int = 0
    color: str | None = None


@dataclass
class Meeting:
    id: str
    title: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    agenda: str = ""
    participants: list[str] = field(default_factory=list)
    notes: str = ""
    created_at: str = ""


@dataclass
class Author:
    id: str
    name: str = ""
    email: str | None = None
    role: str | None = None
    avatar: str | None = None


@dataclass
class Board:
    """Root aggregate of the active workspace."""

    id: str = DEFAULT_BOARD_ID
    title: str = DEFAULT_BOARD_TITLE
    columns: list[Column] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    meetings: list[Meeting] = field(default_factory=list)
    authors: list[Author] = field(default_factory=list)

    # Raw rows of tasks outside the retention window (and their children).
    # Re-emitted verbatim by the encoder so a save never erases them.
    frozen_rows: dict[TableName, list[Row]] = field(default_factory=dict)

    def find_task(self, task_id: str) -> Task | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    def find_column(self, column_id: str) -> Column | None:
        return next((c for c in self.columns if c.id == column_id), None)

    def find_meeting(self, meeting_id: str) -> Meeting | None:
        return next((m for m in self.meetings if m.id == meeting_id), None)

    def find_author(self, author_id: str) -> Author | None:
        return next((a for a in self.authors if a.id == author_id), None)

    def tasks_in_column(self, column_id: str) -> list[Task]:
        return [t for t in self.tasks if t.column_id == column_id]


def field_names(entity_type: type) -> frozenset[str]:
    """Names of the dataclass fields of a graph entity type."""
    return frozenset(f.name for f in fields(entity_type))
