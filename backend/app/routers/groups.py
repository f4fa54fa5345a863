"""API routes for unit groups."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.routers.board import board_response
from app.schemas import BoardResponse, Group, GroupCreate
from app.services import mutations
from app.services.board import BoardService, get_board_service

router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=Group, status_code=201)
async def create_group(
    body: GroupCreate,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> Group:
    """Create a group. Member ids are stored as given, even if a unit is gone."""
    group_id = mutations.new_id("g_")
    snapshot = board.apply(mutations.create_group, body.name, body.unit_ids, group_id=group_id)
    return snapshot.find_group(group_id)


@router.delete("/{group_id}", response_model=BoardResponse)
async def delete_group(
    group_id: str,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    """Delete a group. Calls keep the units the group already put on them."""
    board.apply(mutations.delete_group, group_id)
    return board_response(board)
