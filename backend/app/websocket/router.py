"""WebSocket router for real-time board updates."""

import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as SchemaError

from app.services.board import BoardService, get_board_service
from app.websocket.manager import manager
from app.websocket.schemas import ErrorMessage, PingMessage, PongMessage, SubscribeMessage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/board")
async def websocket_board(
    websocket: WebSocket,
    board: BoardService = Depends(get_board_service),
):
    """
    WebSocket endpoint for real-time board updates.

    Protocol:
    - Client connects
    - Client sends subscribe message naming the board sections it renders
    - Server replies with the current board, then pushes every new version
    - Server sends pong in response to ping for keep-alive

    Message formats:
    Client -> Server:
        {"type": "subscribe", "collections": ["units", "calls"]}
        {"type": "ping"}

    Server -> Client:
        {"type": "board_update", "version": 12, "data": {"units": [...], "calls": [...]}, "timestamp": "..."}
        {"type": "pong"}
        {"type": "error", "message": "..."}
    """
    await manager.connect(websocket)

    try:
        while True:
            raw_message = await websocket.receive_text()

            try:
                data = json.loads(raw_message)
                msg_type = data.get("type") if isinstance(data, dict) else None

                if msg_type == "subscribe":
                    msg = SubscribeMessage.model_validate(data)
                    await manager.update_subscription(websocket, collections=msg.collections)
                    version, snapshot = board.store.stamped()
                    await manager.send_snapshot(websocket, snapshot, version)

                elif msg_type == "ping":
                    PingMessage.model_validate(data)
                    await websocket.send_json(PongMessage().model_dump())

                else:
                    error = ErrorMessage(message=f"Unknown message type: {msg_type}")
                    await websocket.send_json(error.model_dump())

            except json.JSONDecodeError:
                error = ErrorMessage(message="Invalid JSON")
                await websocket.send_json(error.model_dump())
            except SchemaError as e:
                error = ErrorMessage(message=f"Invalid {msg_type} message: {e.error_count()} errors")
                await websocket.send_json(error.model_dump())

    except WebSocketDisconnect:
        await manager.disconnect(websocket)
    except Exception as e:
        logger.exception(f"WebSocket error: {e}")
        await manager.disconnect(websocket)
