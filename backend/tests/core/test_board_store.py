"""Board Store: verifies the synchronous optimistic mutators.

Invariants:
    - Every successful mutator notifies each listener exactly once
    - Invalid patches and unknown ids change nothing and notify nobody
    - Patches are shallow: list fields are replaced, never merged
    - delete_column cascades to its tasks, hidden ones included; delete_author
      leaves names dangling
    - replace() swaps the board without notifying
"""

import pytest

from boardsync.core.board import Board, ChecklistItem, Column, Task
from boardsync.core.board_store import BoardStore
from boardsync.core.domain_types import Priority, TableName
from boardsync.core.errors import BoardValidationError, ResourceNotFoundError
from boardsync.core.table_codec import decode_board, encode_board
from boardsync.core.timestamps import parse_timestamp

from tests.support.table_rows import (
    NOW, checklist_row, column_row, comment_row, days_ago, task_row,
)


@pytest.fixture
def store():
    board = Board(
        columns=[
            Column(id="col-1", title="To Do", order=0),
            Column(id="col-2", title="Done", order=1),
        ],
        tasks=[
            Task(id="t-1", column_id="col-1", title="One", assignees=["Ana"],
                 created_at="2025-05-01T00:00:00.000Z",
                 checklist=[ChecklistItem(id="c-1", text="a"),
                            ChecklistItem(id="c-2", text="b")]),
            Task(id="t-2", column_id="col-2", title="Two",
                 created_at="2025-05-01T00:00:00.000Z"),
        ],
    )
    return BoardStore(board)


@pytest.fixture
def notifications(store):
    seen = []
    store.subscribe(seen.append)
    return seen


# -- Tasks ---------------------------------------------------------------------

def test_add_task_applies_defaults(store, notifications):
    task = store.add_task("col-1")
    assert task.title == "New Task"
    assert task.priority is Priority.MEDIUM
    assert task.checklist == [] and task.comments == []
    assert parse_timestamp(task.created_at) is not None
    assert store.board.tasks[-1] is task
    assert notifications == [store.board]


def test_add_task_accepts_values(store):
    task = store.add_task(
        "col-2", title="Plan", priority="urgent", tags=["q3"],
        checklist=[{"text": "first"}],
    )
    assert task.column_id == "col-2"
    assert task.priority is Priority.URGENT
    assert task.checklist[0].text == "first"
    assert task.checklist[0].id


def test_add_task_rejects_unknown_field(store, notifications):
    with pytest.raises(BoardValidationError) as exc:
        store.add_task("col-1", colour="red")
    assert exc.value.field == "colour"
    assert len(store.board.tasks) == 2
    assert notifications == []


def test_add_task_rejects_invalid_priority(store, notifications):
    with pytest.raises(BoardValidationError):
        store.add_task("col-1", priority="critical")
    assert notifications == []


def test_update_task_replaces_checklist_wholesale(store, notifications):
    store.update_task("t-1", {"checklist": [
        {"id": "c-1", "text": "a", "completed": True},
        {"id": "c-2", "text": "b", "completed": False},
    ]})
    task = store.board.find_task("t-1")
    assert [(c.id, c.completed) for c in task.checklist] == [("c-1", True), ("c-2", False)]
    assert len(notifications) == 1


def test_update_task_with_empty_list_removes_all_items(store):
    store.update_task("t-1", {"checklist": []})
    assert store.board.find_task("t-1").checklist == []


def test_update_task_copies_list_values(store):
    tags = ["ops"]
    store.update_task("t-1", {"tags": tags})
    tags.append("later")
    assert store.board.find_task("t-1").tags == ["ops"]


def test_update_task_clears_optional_field_with_none(store):
    store.update_task("t-1", {"due_date": "2025-07-01"})
    store.update_task("t-1", {"due_date": None})
    assert store.board.find_task("t-1").due_date is None


def test_update_unknown_task_raises_and_notifies_nobody(store, notifications):
    with pytest.raises(ResourceNotFoundError):
        store.update_task("missing", {"title": "x"})
    assert notifications == []


def test_update_task_cannot_change_id(store, notifications):
    with pytest.raises(BoardValidationError):
        store.update_task("t-1", {"id": "t-9"})
    assert store.board.find_task("t-1") is not None
    assert notifications == []


def test_update_task_rejects_unparsable_created_at(store):
    with pytest.raises(BoardValidationError) as exc:
        store.update_task("t-1", {"created_at": "soon"})
    assert exc.value.field == "created_at"


def test_move_task_changes_only_column(store, notifications):
    before = store.board.find_task("t-1")
    title, checklist = before.title, list(before.checklist)
    moved = store.move_task("t-1", "col-2")
    assert moved.column_id == "col-2"
    assert moved.title == title and moved.checklist == checklist
    assert len(notifications) == 1


def test_move_task_to_unknown_column_is_allowed(store):
    assert store.move_task("t-1", "nowhere").column_id == "nowhere"


def test_delete_task(store, notifications):
    store.delete_task("t-2")
    assert [t.id for t in store.board.tasks] == ["t-1"]
    assert len(notifications) == 1


def test_delete_unknown_task_raises(store):
    with pytest.raises(ResourceNotFoundError):
        store.delete_task("missing")


# -- Columns -------------------------------------------------------------------

def test_add_column_appends_with_next_order_and_default_color(store):
    column = store.add_column("Review")
    assert column.order == 2
    assert column.color == "bg-slate-100/50"


def test_update_column(store):
    column = store.update_column("col-1", {"title": "Backlog", "color": None})
    assert column.title == "Backlog"
    assert column.color is None


def test_delete_column_cascades_to_its_tasks(store, notifications):
    store.delete_column("col-1")
    assert [c.id for c in store.board.columns] == ["col-2"]
    assert [t.id for t in store.board.tasks] == ["t-2"]
    assert len(notifications) == 1


def test_delete_column_drops_hidden_tasks_and_their_children():
    tables = {
        TableName.COLUMNS: [column_row("C", "Doing", "0"), column_row("K", "Done", "1")],
        TableName.TASKS: [
            task_row("T1", "C"),
            task_row("OLD", "C", created_at=days_ago(90)),
            task_row("KEEP", "K", created_at=days_ago(90)),
        ],
        TableName.CHECKLISTS: [
            checklist_row("x1", "T1", "live"),
            checklist_row("x2", "OLD", "hidden"),
            checklist_row("x3", "KEEP", "other column"),
        ],
        TableName.COMMENTS: [comment_row("m1", "OLD", "Ana", "hidden")],
    }
    store = BoardStore(decode_board(tables, now=NOW))

    store.delete_column("C")
    encoded = encode_board(store.board)

    assert [r[0] for r in encoded[TableName.TASKS]] == ["KEEP"]
    assert encoded[TableName.CHECKLISTS] == [checklist_row("x3", "KEEP", "other column")]
    assert encoded[TableName.COMMENTS] == []
    for rows in encoded.values():
        assert not [r for r in rows if {"C", "T1", "OLD"} & set(r[:2])]


# -- Meetings ------------------------------------------------------------------

def test_add_meeting_defaults(store):
    meeting = store.add_meeting()
    assert meeting.title == "New Meeting"
    assert meeting.time == "09:00"
    assert len(meeting.date) == 10
    assert meeting.participants == []


def test_update_and_delete_meeting(store):
    meeting = store.add_meeting(title="Sync", participants=["Ana"])
    store.update_meeting(meeting.id, {"participants": ["Bruno"]})
    assert store.board.find_meeting(meeting.id).participants == ["Bruno"]
    store.delete_meeting(meeting.id)
    assert store.board.meetings == []


# -- Authors -------------------------------------------------------------------

def test_add_author_defaults(store):
    author = store.add_author()
    assert author.name == "New Member"


def test_delete_author_leaves_assignee_names(store):
    author = store.add_author(name="Ana")
    store.delete_author(author.id)
    assert store.board.authors == []
    assert store.board.find_task("t-1").assignees == ["Ana"]


def test_update_unknown_author_raises(store):
    with pytest.raises(ResourceNotFoundError) as exc:
        store.update_author("missing", {"name": "x"})
    assert exc.value.http_status == 404


# -- Listeners -----------------------------------------------------------------

def test_unsubscribe_stops_notifications(store):
    seen = []
    unsubscribe = store.subscribe(seen.append)
    unsubscribe()
    store.add_column("Later")
    assert seen == []


def test_replace_does_not_notify(store, notifications):
    fresh = Board(id="b-2")
    store.replace(fresh)
    assert store.board is fresh
    assert notifications == []
