"""Table Schema: the enumerated column layout of each backing-store table.

Invariants:
    - Every table is an ordered tuple of ColumnSpec; position in the tuple is the
      cell position in a row, header is the text of the header row
    - decode functions never raise: missing or malformed cells resolve to defaults
    - encode functions always return str (RAW cell values)
    - List cells are comma-joined without escaping (an element containing a
      comma does not survive a round trip)

Design Decisions:
    - Named columns over positional indexing: codec code reads `values["column_id"]`,
      never `row[1]`
    - One coercion function per cell kind, shared across tables
"""

import re
from dataclasses import dataclass
from typing import Any, Callable

from boardsync.core.domain_types import (
    CELL_FALSE, CELL_TRUE, DEFAULT_PRIORITY, LIST_SEPARATOR,
    Priority, Row, TableName,
)
from boardsync.core.timestamps import parse_timestamp

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# ─── Cell coercions ──────────────────────────────────────────────

def decode_text(cell: str) -> str:
    return cell


def encode_text(value: Any) -> str:
    return "" if value is None else str(value)


def decode_optional_text(cell: str) -> str | None:
    """Empty cell means the field is absent."""
    return cell or None


def encode_optional_text(value: str | None) -> str:
    return value or ""


def decode_int(cell: str) -> int:
    """Leading-integer parse with a zero fallback ("2.9" -> 2, "abc" -> 0)."""
    match = _LEADING_INT.match(cell)
    return int(match.group(1)) if match else 0


def encode_int(value: int) -> str:
    return str(int(value))


def decode_bool(cell: str) -> bool:
    """Only the literal TRUE is true."""
    return cell == CELL_TRUE


def encode_bool(value: bool) -> str:
    return CELL_TRUE if value else CELL_FALSE


def decode_list(cell: str) -> list[str]:
    """Unconditional comma split; empty cell is an empty list."""
    return cell.split(LIST_SEPARATOR) if cell else []


def encode_list(values: list[str] | None) -> str:
    return LIST_SEPARATOR.join(values or [])


def decode_priority(cell: str) -> Priority:
    """Case-insensitive label match, anything else is medium."""
    try:
        return Priority(cell.strip().lower())
    except ValueError:
        return DEFAULT_PRIORITY


def encode_priority(value: Priority | str | None) -> str:
    if isinstance(value, Priority):
        return value.value
    return value or DEFAULT_PRIORITY.value


def decode_timestamp_text(cell: str) -> str | None:
    """Keep parseable timestamps verbatim; None signals "replace with now"."""
    return cell if parse_timestamp(cell) is not None else None


# ─── Schema ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class ColumnSpec:
    header: str
    attr: str
    decode: Callable[[str], Any] = decode_text
    encode: Callable[[Any], str] = encode_text


@dataclass(frozen=True)
class TableSchema:
    table: TableName
    columns: tuple[ColumnSpec, ...]

    @property
    def headers(self) -> list[str]:
        return [c.header for c in self.columns]

    @property
    def width(self) -> int:
        return len(self.columns)

    def decode_row(self, row: Row) -> dict[str, Any]:
        """Map a raw row to attribute values. Short rows read as blank-padded."""
        return {
            column.attr: column.decode(_cell(row, i))
            for i, column in enumerate(self.columns)
        }

    def encode_row(self, values: dict[str, Any]) -> Row:
        return [column.encode(values.get(column.attr)) for column in self.columns]


def _cell(row: Row, index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    return str(row[index])


TASKS = TableSchema(TableName.TASKS, (
    ColumnSpec("id", "id"),
    ColumnSpec("columnId", "column_id"),
    ColumnSpec("title", "title"),
    ColumnSpec("description", "description"),
    ColumnSpec("priority", "priority", decode_priority, encode_priority),
    ColumnSpec("tags", "tags", decode_list, encode_list),
    ColumnSpec("assignees", "assignees", decode_list, encode_list),
    ColumnSpec("dueDate", "due_date", decode_optional_text, encode_optional_text),
    ColumnSpec("createdAt", "created_at", decode_timestamp_text),
    ColumnSpec("strategicDimension", "strategic_dimension",
               decode_optional_text, encode_optional_text),
    ColumnSpec("strategicObjective", "strategic_objective",
               decode_optional_text, encode_optional_text),
))

COLUMNS = TableSchema(TableName.COLUMNS, (
    ColumnSpec("id", "id"),
    ColumnSpec("title", "title"),
    ColumnSpec("order", "order", decode_int, encode_int),
    ColumnSpec("color", "color", decode_optional_text, encode_optional_text),
))

CHECKLISTS = TableSchema(TableName.CHECKLISTS, (
    ColumnSpec("id", "id"),
    ColumnSpec("taskId", "task_id"),
    ColumnSpec("text", "text"),
    ColumnSpec("completed", "completed", decode_bool, encode_bool),
))

COMMENTS = TableSchema(TableName.COMMENTS, (
    ColumnSpec("id", "id"),
    ColumnSpec("taskId", "task_id"),
    ColumnSpec("author", "author"),
    ColumnSpec("content", "content"),
    ColumnSpec("createdAt", "created_at"),
))

MEETINGS = TableSchema(TableName.MEETINGS, (
    ColumnSpec("id", "id"),
    ColumnSpec("title", "title"),
    ColumnSpec("date", "date"),
    ColumnSpec("time", "time"),
    ColumnSpec("location", "location"),
    ColumnSpec("agenda", "agenda"),
    ColumnSpec("participants", "participants", decode_list, encode_list),
    ColumnSpec("notes", "notes"),
    ColumnSpec("createdAt", "created_at"),
))

AUTHORS = TableSchema(TableName.AUTHORS, (
    ColumnSpec("id", "id"),
    ColumnSpec("name", "name"),
    ColumnSpec("email", "email", decode_optional_text, encode_optional_text),
    ColumnSpec("role", "role", decode_optional_text, encode_optional_text),
    ColumnSpec("avatar", "avatar", decode_optional_text, encode_optional_text),
))

SCHEMAS: dict[TableName, TableSchema] = {
    s.table: s for s in (TASKS, COLUMNS, CHECKLISTS, COMMENTS, MEETINGS, AUTHORS)
}
