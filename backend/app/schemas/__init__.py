"""Pydantic schemas for board records and API request/response validation."""

from app.schemas.board import Bolo, Call, Group, Snapshot, Unit
from app.schemas.requests import (
    BoardResponse,
    BoloCreate,
    CallCreate,
    CallPatch,
    ChangeNotification,
    GroupCreate,
    NotesUpdate,
    ReferenceResponse,
    StatusUpdate,
    SyncResult,
    UnitCreate,
)

__all__ = [
    "BoardResponse",
    "Bolo",
    "BoloCreate",
    "Call",
    "CallCreate",
    "CallPatch",
    "ChangeNotification",
    "Group",
    "GroupCreate",
    "NotesUpdate",
    "ReferenceResponse",
    "Snapshot",
    "StatusUpdate",
    "SyncResult",
    "Unit",
    "UnitCreate",
]
