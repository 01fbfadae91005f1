"""Table Codec: verifies decoding of the six tables into a Board and back.

Invariants:
    - Unknown/blank priority decodes to medium; labels match case-insensitively
    - Columns sorted by order, ties keep row order
    - Retention: 59-day-old tasks visible, 61-day-old hidden, missing createdAt visible
    - Hidden tasks and their children are re-emitted by encode (view-only filter)
    - Orphan checklist/comment rows are dropped
    - encode(decode(T)) == T for canonical tables; encode(decode(encode(B))) == encode(B)
"""

from datetime import timedelta

from boardsync.core.board import Board, ChecklistItem, Column, Comment, Task
from boardsync.core.domain_types import TABLE_ORDER, Priority, TableName
from boardsync.core.table_codec import decode_board, encode_board, is_within_retention
from boardsync.core.timestamps import format_timestamp, parse_timestamp

from tests.support.table_rows import (
    NOW, checklist_row, column_row, comment_row, days_ago, sample_tables, task_row,
)


def _tables(raw: dict) -> dict[TableName, list[list[str]]]:
    return {TableName(name): rows for name, rows in raw.items()}


def _decode(raw: dict) -> Board:
    return decode_board(_tables(raw), now=NOW)


# -- Priorities ----------------------------------------------------------------

def test_priority_labels_decode_case_insensitively():
    board = _decode({"Tasks": [
        task_row("t-1", priority="HIGH"),
        task_row("t-2", priority="Urgent"),
        task_row("t-3", priority="low"),
    ]})
    assert [t.priority for t in board.tasks] == [
        Priority.HIGH, Priority.URGENT, Priority.LOW,
    ]


def test_unknown_or_blank_priority_defaults_to_medium():
    board = _decode({"Tasks": [
        task_row("t-1", priority="critical"),
        task_row("t-2", priority=""),
    ]})
    assert {t.priority for t in board.tasks} == {Priority.MEDIUM}


# -- Columns -------------------------------------------------------------------

def test_columns_sorted_by_order_with_stable_ties():
    board = _decode({"Columns": [
        column_row("c", "Third", "2"),
        column_row("a", "First", "0"),
        column_row("b1", "Tie one", "1"),
        column_row("b2", "Tie two", "1"),
    ]})
    assert [c.id for c in board.columns] == ["a", "b1", "b2", "c"]


def test_column_order_parses_leading_integer():
    board = _decode({"Columns": [
        column_row("x", "Broken", "abc"),
        column_row("y", "Fraction", "2.9"),
    ]})
    assert {c.id: c.order for c in board.columns} == {"x": 0, "y": 2}


def test_empty_color_cell_decodes_to_none():
    board = _decode({"Columns": [column_row("a", "Todo", "0", "")]})
    assert board.columns[0].color is None


# -- Tasks ---------------------------------------------------------------------

def test_list_cells_split_on_comma_and_empty_cell_is_empty_list():
    board = _decode({"Tasks": [
        task_row("t-1", tags="ops,q3", assignees=""),
    ]})
    assert board.tasks[0].tags == ["ops", "q3"]
    assert board.tasks[0].assignees == []


def test_optional_task_fields_absent_when_cells_empty():
    task = _decode({"Tasks": [task_row("t-1")]}).tasks[0]
    assert task.due_date is None
    assert task.strategic_dimension is None
    assert task.strategic_objective is None


def test_short_rows_read_as_blank_padded():
    board = _decode({"Tasks": [["t-1", "col-1", "Only three cells"]]})
    task = board.tasks[0]
    assert task.title == "Only three cells"
    assert task.priority is Priority.MEDIUM
    assert task.tags == []


def test_missing_created_at_defaults_to_now():
    board = _decode({"Tasks": [task_row("t-1", created_at="")]})
    assert board.tasks[0].created_at == format_timestamp(NOW)


def test_unparsable_created_at_defaults_to_now():
    board = _decode({"Tasks": [task_row("t-1", created_at="last tuesday")]})
    assert parse_timestamp(board.tasks[0].created_at) == NOW


# -- Children ------------------------------------------------------------------

def test_checklist_and_comments_attach_to_their_task_in_row_order():
    board = _decode(sample_tables())
    first = board.find_task("t-1")
    assert [c.id for c in first.checklist] == ["c-1", "c-2"]
    assert [c.completed for c in first.checklist] == [True, False]
    assert board.find_task("t-2").comments[0].content == "Looks good"


def test_only_literal_true_is_completed():
    board = _decode({
        "Tasks": [task_row("t-1")],
        "Checklists": [
            checklist_row("c-1", "t-1", "a", "true"),
            checklist_row("c-2", "t-1", "b", "TRUE"),
            checklist_row("c-3", "t-1", "c", ""),
        ],
    })
    assert [c.completed for c in board.tasks[0].checklist] == [False, True, False]


def test_orphan_children_are_dropped():
    board = _decode({
        "Tasks": [task_row("t-1")],
        "Checklists": [checklist_row("c-1", "ghost", "orphan")],
        "Comments": [comment_row("m-1", "ghost", "Ana", "orphan")],
    })
    assert board.tasks[0].checklist == []
    assert board.tasks[0].comments == []
    assert encode_board(board)[TableName.CHECKLISTS] == []


# -- Retention -----------------------------------------------------------------

def test_task_created_59_days_ago_is_visible():
    board = _decode({"Tasks": [task_row("t-1", created_at=days_ago(59))]})
    assert [t.id for t in board.tasks] == ["t-1"]


def test_task_created_61_days_ago_is_hidden():
    board = _decode({"Tasks": [task_row("t-1", created_at=days_ago(61))]})
    assert board.tasks == []


def test_retention_window_is_configurable():
    board = decode_board(
        _tables({"Tasks": [task_row("t-1", created_at=days_ago(10))]}),
        now=NOW, retention=timedelta(days=7),
    )
    assert board.tasks == []


def test_hidden_tasks_and_children_are_reemitted_by_encode():
    stale = task_row("old", created_at=days_ago(90))
    stale_item = checklist_row("c-old", "old", "forgotten")
    stale_comment = comment_row("m-old", "old", "Ana", "still here")
    board = _decode({
        "Tasks": [task_row("t-1"), stale],
        "Checklists": [stale_item],
        "Comments": [stale_comment],
    })

    tables = encode_board(board)

    assert [t.id for t in board.tasks] == ["t-1"]
    assert stale in tables[TableName.TASKS]
    assert tables[TableName.CHECKLISTS] == [stale_item]
    assert tables[TableName.COMMENTS] == [stale_comment]


def test_typed_sheet_date_is_kept_verbatim_and_filtered():
    board = _decode({"Tasks": [
        task_row("recent", created_at="5/20/2025"),
        task_row("old", created_at="1/15/2024"),
    ]})
    assert [(t.id, t.created_at) for t in board.tasks] == [("recent", "5/20/2025")]
    assert board.frozen_rows[TableName.TASKS][0][8] == "1/15/2024"


def test_is_within_retention_treats_unparsable_as_fresh():
    cutoff = NOW - timedelta(days=60)
    assert is_within_retention("not a date", cutoff)
    assert is_within_retention(days_ago(60), cutoff)
    assert not is_within_retention(days_ago(60.01), cutoff)


# -- Encoding ------------------------------------------------------------------

def test_canonical_tables_round_trip_exactly():
    raw = sample_tables()
    assert encode_board(_decode(raw)) == _tables(raw)


def test_encode_is_idempotent_through_decode():
    board = Board(
        columns=[Column(id="col-1", title="Todo", order=0, color=None)],
        tasks=[Task(
            id="t-1", column_id="col-1", title="Ship", priority=Priority.URGENT,
            tags=["a"], created_at=days_ago(2),
            checklist=[ChecklistItem(id="c-1", text="step", completed=True)],
            comments=[Comment(id="m-1", author="Ana", content="ok", created_at=days_ago(1))],
        )],
    )
    once = encode_board(board)
    assert encode_board(decode_board(once, now=NOW)) == once


def test_encode_emits_tables_in_fixed_order():
    assert tuple(encode_board(Board())) == TABLE_ORDER


def test_encode_stamps_children_with_owning_task_id():
    board = Board(tasks=[Task(
        id="t-9", column_id="col-1", created_at=days_ago(1),
        checklist=[ChecklistItem(id="c-1", text="x")],
    )])
    assert encode_board(board)[TableName.CHECKLISTS] == [["c-1", "t-9", "x", "FALSE"]]


def test_encode_writes_priority_lowercase_and_lists_comma_joined():
    board = Board(tasks=[Task(
        id="t-1", column_id="col-1", priority=Priority.HIGH,
        assignees=["Ana", "Bruno"], created_at=days_ago(1),
    )])
    row = encode_board(board)[TableName.TASKS][0]
    assert row[4] == "high"
    assert row[6] == "Ana,Bruno"


def test_decode_uses_given_board_identity():
    board = decode_board({}, now=NOW, board_id="b-7", board_title="Ops")
    assert (board.id, board.title) == ("b-7", "Ops")
    assert board.columns == [] and board.tasks == []
