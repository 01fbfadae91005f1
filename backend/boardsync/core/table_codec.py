"""Table Codec: pure bidirectional transform between the Board graph and six row sets.

Invariants:
    - decode_board never raises on cell content; defaults resolve every ambiguity
    - Columns come out sorted by order (stable: ties keep row order)
    - Tasks are joined to checklist/comment rows by a linear scan on taskId
    - The retention filter runs last, after joins: a stale task and its children's
      rows move to Board.frozen_rows untouched
    - Child rows whose taskId matches no task row are dropped from the graph
    - encode_board is deterministic: the same Board always yields identical rows
    - encode_board re-stamps every child row with its owning task's id and
      appends frozen rows after the live rows
    - drop_frozen_column removes hidden tasks of a deleted column with their
      checklist and comment rows, so no encoded row references that column

Design Decisions:
    - Every row goes through TableSchema.decode_row/encode_row (named columns)
    - `now` is a parameter so retention and createdAt defaulting are testable
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta

from boardsync.core.board import (
    Author, Board, ChecklistItem, Column, Comment, Meeting, Task,
)
from boardsync.core.domain_types import (
    DEFAULT_BOARD_ID, DEFAULT_BOARD_TITLE, RETENTION_DAYS,
    TABLE_ORDER, Row, TableName,
)
from boardsync.core.table_schema import (
    AUTHORS, CHECKLISTS, COLUMNS, COMMENTS, MEETINGS, TASKS,
)
from boardsync.core.timestamps import format_timestamp, parse_timestamp, utc_now

logger = logging.getLogger(__name__)

TableRows = Mapping[TableName, list[Row]]


# === Public API ===============================================================

def decode_board(
    tables: TableRows,
    *,
    now: datetime | None = None,
    retention: timedelta = timedelta(days=RETENTION_DAYS),
    board_id: str = DEFAULT_BOARD_ID,
    board_title: str = DEFAULT_BOARD_TITLE,
) -> Board:
    """Rebuild the Board graph from raw table bodies (header row excluded)."""
    now = now or utc_now()
    task_rows = tables.get(TableName.TASKS, [])
    checklist_rows = tables.get(TableName.CHECKLISTS, [])
    comment_rows = tables.get(TableName.COMMENTS, [])

    authors = [_decode_author(r) for r in tables.get(TableName.AUTHORS, [])]
    columns = sorted(
        (_decode_column(r) for r in tables.get(TableName.COLUMNS, [])),
        key=lambda c: c.order,
    )
    meetings = [_decode_meeting(r) for r in tables.get(TableName.MEETINGS, [])]
    checklist = [(CHECKLISTS.decode_row(r), r) for r in checklist_rows]
    comments = [(COMMENTS.decode_row(r), r) for r in comment_rows]

    tasks = [_decode_task(r, now) for r in task_rows]
    for task in tasks:
        task.checklist = [
            _checklist_item(values) for values, _ in checklist
            if values["task_id"] == task.id
        ]
        task.comments = [
            _comment(values) for values, _ in comments
            if values["task_id"] == task.id
        ]

    live, frozen = _apply_retention(
        tasks, task_rows, checklist, comments, cutoff=now - retention,
    )
    _log_orphans(tasks, checklist, comments)

    return Board(
        id=board_id,
        title=board_title,
        columns=columns,
        tasks=live,
        meetings=meetings,
        authors=authors,
        frozen_rows=frozen,
    )


def encode_board(board: Board) -> dict[TableName, list[Row]]:
    """Flatten the Board into the six table bodies, in TABLE_ORDER."""
    tables: dict[TableName, list[Row]] = {
        TableName.TASKS: [TASKS.encode_row(vars(t)) for t in board.tasks],
        TableName.COLUMNS: [
            COLUMNS.encode_row(vars(c)) for c in board.columns
        ],
        TableName.CHECKLISTS: [
            CHECKLISTS.encode_row({**vars(item), "task_id": t.id})
            for t in board.tasks for item in t.checklist
        ],
        TableName.COMMENTS: [
            COMMENTS.encode_row({**vars(comment), "task_id": t.id})
            for t in board.tasks for comment in t.comments
        ],
        TableName.MEETINGS: [
            MEETINGS.encode_row(vars(m)) for m in board.meetings
        ],
        TableName.AUTHORS: [
            AUTHORS.encode_row(vars(a)) for a in board.authors
        ],
    }
    for table, rows in board.frozen_rows.items():
        tables[table] = tables[table] + [list(r) for r in rows]
    return {table: tables[table] for table in TABLE_ORDER}


def drop_frozen_column(board: Board, column_id: str) -> int:
    """Forget the hidden tasks of a column and their children. Returns the task count."""
    task_rows = board.frozen_rows.get(TableName.TASKS, [])
    doomed = {
        values["id"] for values in map(TASKS.decode_row, task_rows)
        if values["column_id"] == column_id
    }
    if not doomed:
        return 0
    board.frozen_rows[TableName.TASKS] = [
        r for r in task_rows
        if TASKS.decode_row(r)["column_id"] != column_id
    ]
    for table, schema in (
        (TableName.CHECKLISTS, CHECKLISTS), (TableName.COMMENTS, COMMENTS),
    ):
        board.frozen_rows[table] = [
            r for r in board.frozen_rows.get(table, [])
            if schema.decode_row(r)["task_id"] not in doomed
        ]
    return len(doomed)


def is_within_retention(created_at: str, cutoff: datetime) -> bool:
    """True if the timestamp is not older than the cutoff. Unparsable counts as fresh."""
    moment = parse_timestamp(created_at)
    return moment is None or moment >= cutoff


# === Decoding helpers =========================================================

def _decode_task(row: Row, now: datetime) -> Task:
    values = TASKS.decode_row(row)
    if values["created_at"] is None:
        values["created_at"] = format_timestamp(now)
    return Task(**values)


def _decode_column(row: Row) -> Column:
    return Column(**COLUMNS.decode_row(row))


def _decode_meeting(row: Row) -> Meeting:
    return Meeting(**MEETINGS.decode_row(row))


def _decode_author(row: Row) -> Author:
    return Author(**AUTHORS.decode_row(row))


def _checklist_item(values: dict) -> ChecklistItem:
    return ChecklistItem(
        id=values["id"], text=values["text"], completed=values["completed"],
    )


def _comment(values: dict) -> Comment:
    return Comment(
        id=values["id"], author=values["author"],
        content=values["content"], created_at=values["created_at"],
    )


def _apply_retention(
    tasks: list[Task],
    task_rows: list[Row],
    checklist: list[tuple[dict, Row]],
    comments: list[tuple[dict, Row]],
    *,
    cutoff: datetime,
) -> tuple[list[Task], dict[TableName, list[Row]]]:
    """Split decoded tasks into live tasks and the raw rows of stale ones."""
    live: list[Task] = []
    stale_ids: set[str] = set()
    frozen_tasks: list[Row] = []
    for task, row in zip(tasks, task_rows):
        if is_within_retention(task.created_at, cutoff):
            live.append(task)
        else:
            stale_ids.add(task.id)
            frozen_tasks.append(list(row))

    if not stale_ids:
        return live, {}

    # A live task sharing an id with a stale one keeps the children attached.
    live_ids = {t.id for t in live}
    frozen_ids = stale_ids - live_ids
    frozen = {
        TableName.TASKS: frozen_tasks,
        TableName.CHECKLISTS: [
            list(r) for values, r in checklist if values["task_id"] in frozen_ids
        ],
        TableName.COMMENTS: [
            list(r) for values, r in comments if values["task_id"] in frozen_ids
        ],
    }
    logger.debug(
        "Retention filter hid %d task(s)", len(frozen_tasks),
        extra={"rows": len(frozen_tasks)},
    )
    return live, frozen


def _log_orphans(
    tasks: list[Task],
    checklist: list[tuple[dict, Row]],
    comments: list[tuple[dict, Row]],
) -> None:
    known = {t.id for t in tasks}
    for table, children in (
        (TableName.CHECKLISTS, checklist), (TableName.COMMENTS, comments),
    ):
        orphans = sum(1 for values, _ in children if values["task_id"] not in known)
        if orphans:
            logger.debug(
                "Dropping %d orphan row(s) from %s", orphans, table.value,
                extra={"table": table.value, "rows": orphans},
            )
