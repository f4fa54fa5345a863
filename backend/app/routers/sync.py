"""API routes for remote change notifications and manual reloads."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from app.config import get_settings
from app.rate_limit import limiter
from app.schemas import ChangeNotification, SyncResult
from app.schemas.board import COLLECTIONS
from app.services.board import BoardService, get_board_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post("/changes", response_model=SyncResult, status_code=202)
@limiter.limit(f"{settings.rate_limit_per_minute}/minute")
async def receive_change(
    request: Request,
    notification: ChangeNotification,
    board: Annotated[BoardService, Depends(get_board_service)],
    x_webhook_secret: Annotated[str | None, Header()] = None,
) -> SyncResult:
    """
    Row-change webhook from the hosted table store.

    The payload is only a hint that something changed: the board is reloaded
    in full in the background rather than patched from the payload.
    """
    if settings.remote_webhook_secret and x_webhook_secret != settings.remote_webhook_secret:
        logger.warning(f"Rejected change notification for {notification.table}: bad secret")
        raise HTTPException(status_code=401, detail="Invalid webhook secret")

    if notification.table not in COLLECTIONS:
        logger.warning(f"Ignoring change notification for table {notification.table}")
        return SyncResult(
            reloaded=False,
            version=board.version,
            message=f"Ignored change on {notification.table}",
        )

    if board.schedule_reload() is None:
        return SyncResult(
            reloaded=False,
            version=board.version,
            message="Remote sync is not configured",
        )

    logger.info(f"{notification.type} on {notification.table}: reload scheduled")
    return SyncResult(
        reloaded=False,
        version=board.version,
        message=f"Reload scheduled after {notification.type} on {notification.table}",
    )


@router.post("/reload", response_model=SyncResult)
async def reload_board(
    board: Annotated[BoardService, Depends(get_board_service)],
) -> SyncResult:
    """Reload the board from the remote tables now and wait for the result."""
    if board.sync is None:
        return SyncResult(
            reloaded=False,
            version=board.version,
            message="Remote sync is not configured",
        )

    reloaded = await board.reload()
    return SyncResult(
        reloaded=reloaded,
        version=board.version,
        message="Board reloaded" if reloaded else "Reload failed, local board kept",
    )
