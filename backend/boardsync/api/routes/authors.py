"""Author Routes: create, patch and delete team members.

Invariants:
    - DELETE removes only the author; task assignees and meeting participants
      naming them are left unchanged
"""

from fastapi import APIRouter, Depends, Response, status

from boardsync.api.dependencies import get_board_store
from boardsync.core.board_store import BoardStore
from boardsync.schemas.board import AuthorResponse
from boardsync.schemas.mutations import AuthorCreate, AuthorUpdate

router = APIRouter(prefix="/api/v1/authors", tags=["authors"])


@router.post("", response_model=AuthorResponse, status_code=status.HTTP_201_CREATED)
async def create_author(body: AuthorCreate, store: BoardStore = Depends(get_board_store)):
    author = store.add_author(**body.to_fields())
    return AuthorResponse.model_validate(author)


@router.patch("/{author_id}", response_model=AuthorResponse)
async def update_author(
    author_id: str, body: AuthorUpdate, store: BoardStore = Depends(get_board_store),
):
    author = store.update_author(author_id, body.to_patch())
    return AuthorResponse.model_validate(author)


@router.delete("/{author_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_author(author_id: str, store: BoardStore = Depends(get_board_store)):
    store.delete_author(author_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
