"""Domain Types: enums, identity aliases and constants shared across the board engine.

Invariants:
    - Priority has exactly four members; DEFAULT_PRIORITY is MEDIUM
    - TableName values are the backing-store sheet names (case-sensitive)
    - TABLE_ORDER lists every table exactly once; read/write fan-out iterates it
    - RETENTION_DAYS is the single source of truth for the visibility window

Design Decisions:
    - NewType over wrapper classes: ids stay plain str on the wire and in rows
    - str Enums: labels go straight into cells and JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

BoardId = NewType("BoardId", str)
ColumnId = NewType("ColumnId", str)
TaskId = NewType("TaskId", str)
ChecklistItemId = NewType("ChecklistItemId", str)
CommentId = NewType("CommentId", str)
MeetingId = NewType("MeetingId", str)
AuthorId = NewType("AuthorId", str)

# A row is the ordered list of cell values below the header of one table.
Row = list[str]


# ─── Enums ───────────────────────────────────────────────────────

class Priority(str, Enum):
    """Task urgency label, stored lowercase in the Tasks table."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TableName(str, Enum):
    """The six sheets of the backing store."""
    TASKS = "Tasks"
    COLUMNS = "Columns"
    CHECKLISTS = "Checklists"
    COMMENTS = "Comments"
    MEETINGS = "Meetings"
    AUTHORS = "Authors"


class SyncState(str, Enum):
    """Coordinator state. SYNCING while at least one cycle is in flight."""
    IDLE = "idle"
    SYNCING = "syncing"


class StoreBackend(str, Enum):
    """Which tabular store the persistence adapter talks to."""
    SHEETS = "sheets"
    SQL = "sql"
    MEMORY = "memory"


# ─── Constants ───────────────────────────────────────────────────

TABLE_ORDER: tuple[TableName, ...] = (
    TableName.TASKS,
    TableName.COLUMNS,
    TableName.CHECKLISTS,
    TableName.COMMENTS,
    TableName.MEETINGS,
    TableName.AUTHORS,
)

DEFAULT_PRIORITY = Priority.MEDIUM
RETENTION_DAYS: int = 60

LIST_SEPARATOR = ","
CELL_TRUE = "TRUE"
CELL_FALSE = "FALSE"

DEFAULT_BOARD_ID = BoardId("board-1")
DEFAULT_BOARD_TITLE = "Board"
DEFAULT_COLUMN_COLOR = "bg-slate-100/50"
DEFAULT_TASK_TITLE = "New Task"
DEFAULT_MEETING_TITLE = "New Meeting"
DEFAULT_MEETING_TIME = "09:00"
DEFAULT_AUTHOR_NAME = "New Member"
