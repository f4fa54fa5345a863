"""API routes for field units."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.routers.board import board_response
from app.schemas import BoardResponse, StatusUpdate, Unit, UnitCreate
from app.services import mutations
from app.services.board import BoardService, get_board_service

router = APIRouter(prefix="/units", tags=["units"])


@router.post("", response_model=Unit, status_code=201)
async def create_unit(
    body: UnitCreate,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> Unit:
    """Create a unit at the end of the unit list."""
    unit_id = mutations.new_id("u_")
    snapshot = board.apply(
        mutations.create_unit,
        body.name,
        body.type,
        body.subdivision,
        body.status,
        unit_id=unit_id,
    )
    return snapshot.find_unit(unit_id)


@router.put("/{unit_id}/status", response_model=BoardResponse)
async def set_unit_status(
    unit_id: str,
    body: StatusUpdate,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    """Change a unit's status. Unknown units are ignored."""
    board.apply(mutations.set_unit_status, unit_id, body.status)
    return board_response(board)


@router.delete("/{unit_id}", response_model=BoardResponse)
async def delete_unit(
    unit_id: str,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    """
    Delete a unit.

    The unit is also removed from every group and every call it was assigned
    to. Deleting a unit that no longer exists is not an error.
    """
    board.apply(mutations.delete_unit, unit_id)
    return board_response(board)
