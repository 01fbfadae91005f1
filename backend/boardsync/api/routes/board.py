"""Board & Sync Routes: read the active board, reload it, save it, and observe sync status.

Invariants:
    - GET /board serves the in-memory graph; it never touches the table store
    - POST /board/load replaces the board wholesale, or fails leaving it untouched
    - POST /board/save runs one full six-table write and waits for its outcome
    - Store failures surface through the global BoardSyncError handler
"""

import logging

from fastapi import APIRouter, Depends

from boardsync.api.dependencies import get_board_app
from boardsync.schemas.board import BoardResponse, SyncErrorResponse, SyncStatusResponse
from boardsync.services.board_application import BoardApplication
from boardsync.services.sync_coordinator import SyncStatus

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["board"])


@router.get("/board", response_model=BoardResponse)
async def get_board(board_app: BoardApplication = Depends(get_board_app)):
    """Current board as held in memory (includes unsaved optimistic changes)."""
    return BoardResponse.model_validate(board_app.store.board)


@router.post("/board/load", response_model=BoardResponse)
async def load_board(board_app: BoardApplication = Depends(get_board_app)):
    """Reload the board from the six tables."""
    board = await board_app.load()
    return BoardResponse.model_validate(board)


@router.post("/board/save", response_model=SyncStatusResponse)
async def save_board(board_app: BoardApplication = Depends(get_board_app)):
    """Write the current board now (manual retry after a failed cycle)."""
    await board_app.coordinator.save()
    return to_status_response(board_app.coordinator.get_sync_status())


@router.get("/sync/status", response_model=SyncStatusResponse)
async def sync_status(board_app: BoardApplication = Depends(get_board_app)):
    return to_status_response(board_app.coordinator.get_sync_status())


def to_status_response(status: SyncStatus) -> SyncStatusResponse:
    error = status.last_error
    return SyncStatusResponse(
        state=status.state,
        is_syncing=status.is_syncing,
        in_flight=status.in_flight,
        last_successful_sync_at=status.last_successful_sync_at,
        last_error=SyncErrorResponse(
            code=error.code,
            message=error.message,
            table=error.context.table_name,
            operation=error.context.operation,
        ) if error else None,
    )
