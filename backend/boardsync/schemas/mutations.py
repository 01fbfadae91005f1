"""Mutation Schemas: Pydantic request bodies for the board mutators.

Invariants:
    - Create bodies may omit everything the store defaults
    - Update bodies are partial: only fields present in the request reach the patch
    - Explicit null clears a nullable field; null on any other field is ignored
    - List fields in an update replace the stored list wholesale

Design Decisions:
    - to_patch() builds the store patch (exclude_unset) so routes stay logic-free
    - Child records (checklist, comments) may omit id; the store assigns one
"""

from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from boardsync.core.domain_types import Priority


class PatchModel(BaseModel):
    """Partial update body."""

    nullable: ClassVar[frozenset[str]] = frozenset()

    def to_patch(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in self.nullable
        }


class ChecklistItemIn(BaseModel):
    id: str | None = None
    text: str = ""
    completed: bool = False


class CommentIn(BaseModel):
    id: str | None = None
    author: str = ""
    content: str = ""
    created_at: str | None = None


# --- Tasks --------------------------------------------------------------------

class TaskCreate(BaseModel):
    column_id: str = Field(min_length=1)
    title: str | None = Field(None, max_length=500)
    description: str | None = None
    priority: Priority | None = None
    tags: list[str] | None = None
    assignees: list[str] | None = None
    due_date: str | None = None
    strategic_dimension: str | None = None
    strategic_objective: str | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def lowercase_priority(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude={"column_id"}, exclude_none=True)


class TaskUpdate(PatchModel):
    nullable: ClassVar[frozenset[str]] = frozenset(
        {"due_date", "strategic_dimension", "strategic_objective"},
    )

    column_id: str | None = None
    title: str | None = Field(None, max_length=500)
    description: str | None = None
    priority: Priority | None = None
    tags: list[str] | None = None
    assignees: list[str] | None = None
    due_date: str | None = None
    strategic_dimension: str | None = None
    strategic_objective: str | None = None
    checklist: list[ChecklistItemIn] | None = None
    comments: list[CommentIn] | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def lowercase_priority(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v


class TaskMove(BaseModel):
    column_id: str = Field(min_length=1)


# --- Columns ------------------------------------------------------------------

class ColumnCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    color: str | None = None


class ColumnUpdate(PatchModel):
    nullable: ClassVar[frozenset[str]] = frozenset({"color"})

    title: str | None = Field(None, max_length=200)
    order: int | None = None
    color: str | None = None


# --- Meetings -----------------------------------------------------------------

class MeetingCreate(BaseModel):
    title: str | None = None
    date: str | None = None
    time: str | None = None
    location: str | None = None
    agenda: str | None = None
    participants: list[str] | None = None
    notes: str | None = None

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class MeetingUpdate(PatchModel):
    title: str | None = None
    date: str | None = None
    time: str | None = None
    location: str | None = None
    agenda: str | None = None
    participants: list[str] | None = None
    notes: str | None = None


# --- Authors ------------------------------------------------------------------

class AuthorCreate(BaseModel):
    name: str | None = Field(None, max_length=200)
    email: str | None = None
    role: str | None = None
    avatar: str | None = None

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class AuthorUpdate(PatchModel):
    nullable: ClassVar[frozenset[str]] = frozenset({"email", "role", "avatar"})

    name: str | None = Field(None, max_length=200)
    email: str | None = None
    role: str | None = None
    avatar: str | None = None
