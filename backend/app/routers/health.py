"""Health and status endpoints."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.services.board import BoardService, get_board_service

router = APIRouter(tags=["health"])


class BoardStatus(BaseModel):
    """Record counts and version of the in-memory board."""

    version: int
    units: int
    groups: int
    calls: int
    active_calls: int
    bolos: int


class StorageStatus(BaseModel):
    """Status of local snapshot persistence."""

    enabled: bool
    saved_version: int | None = None
    failed_saves: int = 0


class RemoteStatus(BaseModel):
    """Status of the remote table mirror."""

    enabled: bool
    writes: int = 0
    failed_writes: int = 0
    reloads: int = 0
    failed_reloads: int = 0
    skipped_rows: int = 0
    last_reload_at: datetime | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    board: BoardStatus
    storage: StorageStatus
    remote: RemoteStatus


@router.get("/health", response_model=HealthResponse)
async def health_check(
    board: Annotated[BoardService, Depends(get_board_service)],
) -> HealthResponse:
    """
    Health check endpoint with persistence and sync status.

    Persistence failures never fail requests, so a growing failure count here
    is the signal that local and remote state may have diverged.
    """
    version, snapshot = board.store.stamped()

    storage = StorageStatus(enabled=board.storage is not None)
    if board.storage is not None:
        storage.saved_version = board.storage.saved_version
        storage.failed_saves = board.storage.failed_saves

    remote = RemoteStatus(enabled=board.sync is not None)
    if board.sync is not None:
        stats = board.sync.stats
        remote = RemoteStatus(
            enabled=True,
            writes=stats.writes,
            failed_writes=stats.failed_writes,
            reloads=stats.reloads,
            failed_reloads=stats.failed_reloads,
            skipped_rows=stats.skipped_rows,
            last_reload_at=stats.last_reload_at,
        )

    degraded = storage.failed_saves > 0 or remote.failed_writes > 0 or remote.failed_reloads > 0

    return HealthResponse(
        status="degraded" if degraded else "healthy",
        timestamp=datetime.now(UTC),
        board=BoardStatus(
            version=version,
            units=len(snapshot.units),
            groups=len(snapshot.groups),
            calls=len(snapshot.calls),
            active_calls=sum(1 for c in snapshot.calls if c.active),
            bolos=len(snapshot.bolos),
        ),
        storage=storage,
        remote=remote,
    )


@router.get("/ready")
async def readiness_check() -> dict:
    """Simple readiness probe for container orchestration."""
    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> dict:
    """Simple liveness probe for container orchestration."""
    return {"status": "alive"}
