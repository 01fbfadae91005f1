"""Meeting Routes: create, patch and delete meetings."""

from fastapi import APIRouter, Depends, Response, status

from boardsync.api.dependencies import get_board_store
from boardsync.core.board_store import BoardStore
from boardsync.schemas.board import MeetingResponse
from boardsync.schemas.mutations import MeetingCreate, MeetingUpdate

router = APIRouter(prefix="/api/v1/meetings", tags=["meetings"])


@router.post("", response_model=MeetingResponse, status_code=status.HTTP_201_CREATED)
async def create_meeting(body: MeetingCreate, store: BoardStore = Depends(get_board_store)):
    meeting = store.add_meeting(**body.to_fields())
    return MeetingResponse.model_validate(meeting)


@router.patch("/{meeting_id}", response_model=MeetingResponse)
async def update_meeting(
    meeting_id: str, body: MeetingUpdate, store: BoardStore = Depends(get_board_store),
):
    meeting = store.update_meeting(meeting_id, body.to_patch())
    return MeetingResponse.model_validate(meeting)


@router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meeting(meeting_id: str, store: BoardStore = Depends(get_board_store)):
    store.delete_meeting(meeting_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
