"""Task Routes: create, patch, move and delete tasks on the active board.

Invariants:
    - Each call applies one BoardStore mutator and returns once the local effect is visible
    - Every successful call starts one background six-table save cycle
    - Unknown task ids return 404 and start no cycle
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from boardsync.api.dependencies import get_board_store
from boardsync.core.board_store import BoardStore
from boardsync.schemas.board import TaskResponse
from boardsync.schemas.mutations import TaskCreate, TaskMove, TaskUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(body: TaskCreate, store: BoardStore = Depends(get_board_store)):
    task = store.add_task(body.column_id, **body.to_fields())
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str, body: TaskUpdate, store: BoardStore = Depends(get_board_store),
):
    """Shallow patch: list fields in the body replace the stored lists."""
    task = store.update_task(task_id, body.to_patch())
    return TaskResponse.model_validate(task)


@router.post("/{task_id}/move", response_model=TaskResponse)
async def move_task(
    task_id: str, body: TaskMove, store: BoardStore = Depends(get_board_store),
):
    task = store.move_task(task_id, body.column_id)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str, store: BoardStore = Depends(get_board_store)):
    store.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
