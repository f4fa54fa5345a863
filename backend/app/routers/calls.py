"""API routes for incident calls and their unit assignments."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from app.routers.board import board_response
from app.schemas import BoardResponse, Call, CallCreate, CallPatch
from app.services import mutations
from app.services.board import BoardService, get_board_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/calls", tags=["calls"])


@router.post("", response_model=Call, status_code=201)
async def create_call(
    body: CallCreate,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> Call:
    """Create a call at the top of the list, with no units assigned."""
    call_id = mutations.new_id("c_")
    snapshot = board.apply(
        mutations.create_call,
        body.title,
        body.address,
        body.postal,
        body.priority,
        body.origin,
        body.code,
        body.active,
        call_id=call_id,
    )
    return snapshot.find_call(call_id)


@router.patch("/{call_id}", response_model=BoardResponse)
async def edit_call(
    call_id: str,
    body: CallPatch,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    """Merge the fields present in the body into the call; others keep their value."""
    board.apply(mutations.edit_call, call_id, body.changes())
    return board_response(board)


@router.delete("/{call_id}", response_model=BoardResponse)
async def delete_call(
    call_id: str,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    board.apply(mutations.delete_call, call_id)
    return board_response(board)


@router.post("/{call_id}/toggle", response_model=BoardResponse)
async def toggle_call_active(
    call_id: str,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    """Flip a call between active and inactive."""
    board.apply(mutations.toggle_call_active, call_id)
    return board_response(board)


@router.post("/{call_id}/units/{unit_id}", response_model=BoardResponse)
async def assign_unit(
    call_id: str,
    unit_id: str,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    """Assign a unit to a call (drop of a unit card). Repeating it changes nothing."""
    board.apply(mutations.assign_unit_to_call, unit_id, call_id)
    return board_response(board)


@router.delete("/{call_id}/units/{unit_id}", response_model=BoardResponse)
async def remove_assigned_unit(
    call_id: str,
    unit_id: str,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    """Take a unit off a call. The unit itself is kept."""
    board.apply(mutations.remove_assigned_unit, unit_id, call_id)
    return board_response(board)


@router.post("/{call_id}/groups/{group_id}", response_model=BoardResponse)
async def assign_group(
    call_id: str,
    group_id: str,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    """
    Assign every current member of a group to a call (drop of a group card).

    Members are copied; the call does not follow later changes to the group.
    """
    board.apply(mutations.assign_group_to_call, group_id, call_id)
    return board_response(board)
