"""WebSocket message schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

BoardSection = Literal["units", "groups", "calls", "bolos", "dispatch_notes"]


class SubscribeMessage(BaseModel):
    """Client subscription message selecting which parts of the board to receive."""

    type: Literal["subscribe"] = "subscribe"
    collections: list[BoardSection] | None = None  # None or [] means everything


class BoardUpdateMessage(BaseModel):
    """Server message with the new board state."""

    type: Literal["board_update"] = "board_update"
    version: int
    data: dict[str, Any]
    timestamp: datetime


class PingMessage(BaseModel):
    """Ping message for keep-alive."""

    type: Literal["ping"] = "ping"


class PongMessage(BaseModel):
    """Pong response for keep-alive."""

    type: Literal["pong"] = "pong"


class ErrorMessage(BaseModel):
    """Error message from server."""

    type: Literal["error"] = "error"
    message: str
