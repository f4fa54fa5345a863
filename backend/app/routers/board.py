"""API routes for the whole board: snapshot, dispatch notes and reference tables."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from app.schemas import BoardResponse, NotesUpdate, ReferenceResponse
from app.schemas.reference import (
    SUBDIVIDED_TYPE,
    TEN_CODES,
    CallOrigin,
    Priority,
    Subdivision,
    UnitStatus,
    UnitType,
)
from app.services import mutations
from app.services.board import BoardService, get_board_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/board", tags=["board"])


def board_response(board: BoardService) -> BoardResponse:
    """Current snapshot and its version."""
    version, snapshot = board.store.stamped()
    return BoardResponse(
        version=version,
        units=snapshot.units,
        groups=snapshot.groups,
        calls=snapshot.calls,
        bolos=snapshot.bolos,
        dispatch_notes=snapshot.dispatch_notes,
    )


@router.get("", response_model=BoardResponse)
async def get_board(
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    """Get the full board. Dispatch screens render from this and from /ws/board."""
    return board_response(board)


@router.put("/notes", response_model=BoardResponse)
async def update_notes(
    body: NotesUpdate,
    board: Annotated[BoardService, Depends(get_board_service)],
) -> BoardResponse:
    """Replace the dispatch-wide notes. Notes are kept locally and never mirrored."""
    board.apply(mutations.set_dispatch_notes, body.dispatch_notes)
    return board_response(board)


@router.get("/reference", response_model=ReferenceResponse)
async def get_reference() -> ReferenceResponse:
    """Lookup tables for unit, call and code pickers."""
    return ReferenceResponse(
        unit_types=[t.value for t in UnitType],
        subdivisions={SUBDIVIDED_TYPE.value: [s.value for s in Subdivision]},
        unit_statuses=[s.value for s in UnitStatus],
        call_origins=[o.value for o in CallOrigin],
        priorities={p.value: p.label for p in Priority},
        ten_codes=TEN_CODES,
    )
