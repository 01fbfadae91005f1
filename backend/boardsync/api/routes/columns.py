"""Column Routes: create, patch and delete columns.

Invariants:
    - DELETE cascades to every task in the column; clients that want to protect
      non-empty columns must check before calling
"""

from fastapi import APIRouter, Depends, Response, status

from boardsync.api.dependencies import get_board_store
from boardsync.core.board_store import BoardStore
from boardsync.schemas.board import ColumnResponse
from boardsync.schemas.mutations import ColumnCreate, ColumnUpdate

router = APIRouter(prefix="/api/v1/columns", tags=["columns"])


@router.post("", response_model=ColumnResponse, status_code=status.HTTP_201_CREATED)
async def create_column(body: ColumnCreate, store: BoardStore = Depends(get_board_store)):
    if "color" in body.model_fields_set:
        column = store.add_column(body.title, body.color)
    else:
        column = store.add_column(body.title)
    return ColumnResponse.model_validate(column)


@router.patch("/{column_id}", response_model=ColumnResponse)
async def update_column(
    column_id: str, body: ColumnUpdate, store: BoardStore = Depends(get_board_store),
):
    column = store.update_column(column_id, body.to_patch())
    return ColumnResponse.model_validate(column)


@router.delete("/{column_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_column(column_id: str, store: BoardStore = Depends(get_board_store)):
    store.delete_column(column_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
