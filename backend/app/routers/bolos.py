"""API routes for BOLO alerts."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.routers.board import board_response
from app.schemas import BoardResponse, Bolo, BoloCreate
from app.services import mutations
from app.services.board import BoardService, get_board_service

router = APIRouter(prefix="/bolos", tags=["bolos"])


@router.post("", response_model=Bolo, status_code=201)
async def create_bolo(
    body: BoloCreate,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> Bolo:
    """Create a BOLO at the top of the list."""
    bolo_id = mutations.new_id("b_")
    snapshot = board.apply(
        mutations.create_bolo,
        body.title,
        body.plate,
        body.note,
        body.active,
        bolo_id=bolo_id,
    )
    return snapshot.find_bolo(bolo_id)


@router.delete("/{bolo_id}", response_model=BoardResponse)
async def delete_bolo(
    bolo_id: str,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    board.apply(mutations.delete_bolo, bolo_id)
    return board_response(board)
