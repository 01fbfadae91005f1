"""Board Store: synchronous, optimistic mutators over the active Board.

Invariants:
    - Every mutator applies its change before returning and then notifies every
      listener, unconditionally (no batching, debouncing or dirty tracking)
    - Patches are shallow: list fields (checklist, comments, tags, assignees,
      participants) are replaced wholesale, never merged
    - Validation happens before mutation: an invalid patch or unknown id changes
      nothing and notifies nobody
    - delete_column cascades to every task in the column (and their children),
      including tasks hidden by the retention filter;
      callers wanting "only empty columns" must check first
    - delete_author never touches assignees/participants (names may dangle)
    - replace() swaps the Board wholesale without notifying (used by load)

Design Decisions:
    - Listener callbacks instead of a direct coordinator reference: the store
      stays pure and the sync layer subscribes from the outside
    - uuid4 ids, created_at stamped with the codec's timestamp format
"""

import logging
import uuid
from collections.abc import Callable, Mapping
from typing import Any

from boardsync.core.board import (
    Author, Board, ChecklistItem, Column, Comment, Meeting, Task, field_names,
)
from boardsync.core.domain_types import (
    DEFAULT_AUTHOR_NAME, DEFAULT_COLUMN_COLOR, DEFAULT_MEETING_TIME,
    DEFAULT_MEETING_TITLE, DEFAULT_PRIORITY, DEFAULT_TASK_TITLE, Priority,
)
from boardsync.core.errors import BoardValidationError, ResourceNotFoundError
from boardsync.core.table_codec import drop_frozen_column
from boardsync.core.timestamps import format_date, format_timestamp, parse_timestamp, utc_now

logger = logging.getLogger(__name__)

Listener = Callable[[Board], None]

_LIST_FIELDS = frozenset({"tags", "assignees", "participants", "checklist", "comments"})


class BoardStore:
    """Holds the canonical in-memory Board for the active workspace."""

    def __init__(self, board: Board | None = None):
        self._board = board or Board()
        self._listeners: list[Listener] = []

    @property
    def board(self) -> Board:
        return self._board

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def replace(self, board: Board) -> None:
        """Swap in a freshly loaded Board. Listeners are not notified."""
        self._board = board

    # --- Tasks ----------------------------------------------------------------

    def add_task(self, column_id: str, **values: Any) -> Task:
        _check_fields(Task, values, forbidden={"id", "column_id"})
        task = Task(
            id=_new_id(),
            column_id=column_id,
            title=DEFAULT_TASK_TITLE,
            priority=DEFAULT_PRIORITY,
            created_at=format_timestamp(utc_now()),
        )
        _assign(task, _coerce(values))
        self._board.tasks.append(task)
        self._changed("add_task", task.id)
        return task

    def update_task(self, task_id: str, patch: Mapping[str, Any]) -> Task:
        task = self._require_task(task_id)
        _check_fields(Task, patch, forbidden={"id"})
        _assign(task, _coerce(patch))
        self._changed("update_task", task_id)
        return task

    def move_task(self, task_id: str, target_column_id: str) -> Task:
        """Re-parent a task. Only column_id changes."""
        task = self._require_task(task_id)
        task.column_id = target_column_id
        self._changed("move_task", task_id)
        return task

    def delete_task(self, task_id: str) -> None:
        task = self._require_task(task_id)
        self._board.tasks = [t for t in self._board.tasks if t is not task]
        self._changed("delete_task", task_id)

    # --- Columns --------------------------------------------------------------

    def add_column(self, title: str, color: str | None = DEFAULT_COLUMN_COLOR) -> Column:
        column = Column(
            id=_new_id(), title=title,
            order=len(self._board.columns), color=color,
        )
        self._board.columns.append(column)
        self._changed("add_column", column.id)
        return column

    def update_column(self, column_id: str, patch: Mapping[str, Any]) -> Column:
        column = self._require(self._board.find_column(column_id), "Column", column_id)
        _check_fields(Column, patch, forbidden={"id"})
        _assign(column, dict(patch))
        self._changed("update_column", column_id)
        return column

    def delete_column(self, column_id: str) -> None:
        """Remove the column and, silently, every task it holds."""
        column = self._require(self._board.find_column(column_id), "Column", column_id)
        hidden = drop_frozen_column(self._board, column_id)
        logger.debug(
            "Deleting column with %d task(s), %d hidden",
            len(self._board.tasks_in_column(column_id)), hidden,
            extra={"entity_id": column_id},
        )
        self._board.columns = [c for c in self._board.columns if c is not column]
        self._board.tasks = [t for t in self._board.tasks if t.column_id != column_id]
        self._changed("delete_column", column_id)

    # --- Meetings -------------------------------------------------------------

    def add_meeting(self, **values: Any) -> Meeting:
        _check_fields(Meeting, values, forbidden={"id"})
        now = utc_now()
        meeting = Meeting(
            id=_new_id(),
            title=DEFAULT_MEETING_TITLE,
            date=format_date(now),
            time=DEFAULT_MEETING_TIME,
            created_at=format_timestamp(now),
        )
        _assign(meeting, _coerce(values))
        self._board.meetings.append(meeting)
        self._changed("add_meeting", meeting.id)
        return meeting

    def update_meeting(self, meeting_id: str, patch: Mapping[str, Any]) -> Meeting:
        meeting = self._require(self._board.find_meeting(meeting_id), "Meeting", meeting_id)
        _check_fields(Meeting, patch, forbidden={"id"})
        _assign(meeting, _coerce(patch))
        self._changed("update_meeting", meeting_id)
        return meeting

    def delete_meeting(self, meeting_id: str) -> None:
        meeting = self._require(self._board.find_meeting(meeting_id), "Meeting", meeting_id)
        self._board.meetings = [m for m in self._board.meetings if m is not meeting]
        self._changed("delete_meeting", meeting_id)

    # --- Authors --------------------------------------------------------------

    def add_author(self, **values: Any) -> Author:
        _check_fields(Author, values, forbidden={"id"})
        author = Author(
            id=_new_id(), name=DEFAULT_AUTHOR_NAME, email="", role="", avatar="",
        )
        _assign(author, dict(values))
        self._board.authors.append(author)
        self._changed("add_author", author.id)
        return author

    def update_author(self, author_id: str, patch: Mapping[str, Any]) -> Author:
        author = self._require(self._board.find_author(author_id), "Author", author_id)
        _check_fields(Author, patch, forbidden={"id"})
        _assign(author, dict(patch))
        self._changed("update_author", author_id)
        return author

    def delete_author(self, author_id: str) -> None:
        """Remove only the author record; names in tasks and meetings are left as-is."""
        author = self._require(self._board.find_author(author_id), "Author", author_id)
        self._board.authors = [a for a in self._board.authors if a is not author]
        self._changed("delete_author", author_id)

    # --- Internals ------------------------------------------------------------

    def _require_task(self, task_id: str) -> Task:
        return self._require(self._board.find_task(task_id), "Task", task_id)

    @staticmethod
    def _require(entity, resource_type: str, entity_id: str):
        if entity is None:
            raise ResourceNotFoundError(resource_type, entity_id)
        return entity

    def _changed(self, operation: str, entity_id: str) -> None:
        logger.debug(
            "Board mutated: %s", operation,
            extra={"operation": operation, "entity_id": entity_id},
        )
        for listener in list(self._listeners):
            listener(self._board)


# === Patch helpers ============================================================

def _new_id() -> str:
    return str(uuid.uuid4())


def _check_fields(
    entity_type: type, values: Mapping[str, Any], *, forbidden: set[str],
) -> None:
    allowed = field_names(entity_type) - forbidden
    for key in values:
        if key not in allowed:
            raise BoardValidationError(
                f"{entity_type.__name__} has no writable field '{key}'", key,
            )
    if "priority" in values:
        _coerce_priority(values["priority"])
    if "created_at" in values and parse_timestamp(values["created_at"]) is None:
        raise BoardValidationError(
            f"created_at is not a recognized timestamp: {values['created_at']!r}",
            "created_at",
        )


def _coerce(values: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize priority labels and child records; copy list values."""
    result = dict(values)
    if "priority" in result:
        result["priority"] = _coerce_priority(result["priority"])
    if "checklist" in result:
        result["checklist"] = [_as(ChecklistItem, c) for c in result["checklist"]]
    if "comments" in result:
        result["comments"] = [_as(Comment, c) for c in result["comments"]]
    return result


def _assign(entity: object, values: Mapping[str, Any]) -> None:
    for key, value in values.items():
        if key in _LIST_FIELDS:
            value = list(value or [])
        setattr(entity, key, value)


def _coerce_priority(value: Any) -> Priority:
    try:
        return Priority(value)
    except ValueError:
        raise BoardValidationError(
            f"priority must be one of {[p.value for p in Priority]}, got {value!r}",
            "priority",
        )


def _as(entity_type: type, value: Any):
    """Accept a child dataclass or a mapping of its fields."""
    if isinstance(value, entity_type):
        return value
    if isinstance(value, Mapping):
        unknown = set(value) - field_names(entity_type)
        if unknown:
            raise BoardValidationError(
                f"{entity_type.__name__} has no field(s) {sorted(unknown)}",
                sorted(unknown)[0],
            )
        value = {k: v for k, v in value.items() if v is not None}
        value.setdefault("id", _new_id())
        if entity_type is Comment:
            value.setdefault("created_at", format_timestamp(utc_now()))
        return entity_type(**value)
    raise BoardValidationError(
        f"Expected {entity_type.__name__}, got {type(value).__name__}",
        entity_type.__name__,
    )
