"""WebSocket connection manager for broadcasting board snapshots."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fastapi import WebSocket

from app.schemas.board import Snapshot
from app.websocket.schemas import BoardUpdateMessage

logger = logging.getLogger(__name__)


@dataclass
class ClientSubscription:
    """Tracks which board sections a client wants."""

    websocket: WebSocket
    collections: set[str] = field(default_factory=set)
    connected_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def select(self, snapshot: Snapshot) -> dict[str, Any]:
        """The subscribed part of a snapshot, camelCase keyed like the REST API."""
        include = self.collections or None
        return snapshot.model_dump(mode="json", by_alias=True, include=include)


class ConnectionManager:
    """
    Manages WebSocket connections and broadcasts board updates.

    Designed for single-instance deployment: every dispatch screen connected
    to this process receives each new snapshot.
    """

    def __init__(self):
        self._connections: dict[WebSocket, ClientSubscription] = {}
        self._lock = asyncio.Lock()

    @property
    def connection_count(self) -> int:
        """Number of active connections."""
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self._connections[websocket] = ClientSubscription(websocket=websocket)
        logger.info(f"WebSocket connected. Total connections: {self.connection_count}")

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a disconnected WebSocket."""
        async with self._lock:
            if websocket in self._connections:
                del self._connections[websocket]
        logger.info(f"WebSocket disconnected. Total connections: {self.connection_count}")

    async def update_subscription(
        self,
        websocket: WebSocket,
        collections: list[str] | None = None,
    ) -> None:
        """Update a client's subscription preferences."""
        async with self._lock:
            if websocket in self._connections:
                self._connections[websocket].collections = set(collections or [])
                logger.debug(f"Updated subscription: collections={collections}")

    async def send_snapshot(self, websocket: WebSocket, snapshot: Snapshot, version: int) -> None:
        """Send the current board to one client, e.g. right after it subscribes."""
        async with self._lock:
            subscription = self._connections.get(websocket)
        if subscription is None:
            return
        message = BoardUpdateMessage(
            version=version,
            data=subscription.select(snapshot),
            timestamp=datetime.now(UTC),
        )
        await self._send_safe(websocket, message)

    async def broadcast(self, snapshot: Snapshot, version: int) -> None:
        """Broadcast a new snapshot to all subscribers, filtered per client."""
        async with self._lock:
            if not self._connections:
                return

            timestamp = datetime.now(UTC)
            tasks = []
            for websocket, subscription in list(self._connections.items()):
                message = BoardUpdateMessage(
                    version=version,
                    data=subscription.select(snapshot),
                    timestamp=timestamp,
                )
                tasks.append(self._send_safe(websocket, message))

            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"Broadcast board version {version} to {len(tasks)} subscribers")

    async def _send_safe(self, websocket: WebSocket, message: BoardUpdateMessage) -> None:
        """Send message to websocket, handling errors gracefully."""
        try:
            await websocket.send_json(message.model_dump(mode="json"))
        except Exception as e:
            logger.warning(f"Failed to send to websocket: {e}")
            # Schedule disconnect (don't do it here to avoid deadlock)
            asyncio.create_task(self.disconnect(websocket))


# Global singleton instance
manager = ConnectionManager()
