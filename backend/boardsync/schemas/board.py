"""Board Schemas: Pydantic response models for the board graph and sync status.

Invariants:
    - Responses mirror the in-memory graph field for field (snake_case)
    - frozen_rows is never exposed: retention-hidden tasks stay hidden
    - SyncStatusResponse is observability only

Design Decisions:
    - from_attributes validation straight from the core dataclasses (no hand mapping)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from boardsync.core.domain_types import Priority, SyncState


class _FromCore(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ChecklistItemResponse(_FromCore):
    id: str
    text: str
    completed: bool


class CommentResponse(_FromCore):
    id: str
    author: str
    content: str
    created_at: str


class TaskResponse(_FromCore):
    id: str
    column_id: str
    title: str
    description: str
    priority: Priority
    tags: list[str]
    assignees: list[str]
    due_date: str | None
    created_at: str
    strategic_dimension: str | None
    strategic_objective: str | None
    checklist: list[ChecklistItemResponse]
    comments: list[CommentResponse]


class ColumnResponse(_FromCore):
    id: str
    title: str
    order: int
    color: str | None


class MeetingResponse(_FromCore):
    id: str
    title: str
    date: str
    time: str
    location: str
    agenda: str
    participants: list[str]
    notes: str
    created_at: str


class AuthorResponse(_FromCore):
    id: str
    name: str
    email: str | None
    role: str | None
    avatar: str | None


class BoardResponse(_FromCore):
    """The active board as currently held in memory."""
    id: str
    title: str
    columns: list[ColumnResponse]
    tasks: list[TaskResponse]
    meetings: list[MeetingResponse]
    authors: list[AuthorResponse]


class SyncErrorResponse(BaseModel):
    code: str
    message: str
    table: str | None = None
    operation: str | None = None


class SyncStatusResponse(BaseModel):
    """Coordinator status snapshot."""
    state: SyncState
    is_syncing: bool
    in_flight: int
    last_successful_sync_at: datetime | None = None
    last_error: SyncErrorResponse | None = None
