"""API routers."""

from app.routers.board import router as board_router
from app.routers.bolos import router as bolos_router
from app.routers.calls import router as calls_router
from app.routers.groups import router as groups_router
from app.routers.health import router as health_router
from app.routers.legacy import router as legacy_router
from app.routers.sync import router as sync_router
from app.routers.units import router as units_router

__all__ = [
    "board_router",
    "bolos_router",
    "calls_router",
    "groups_router",
    "health_router",
    "legacy_router",
    "sync_router",
    "units_router",
]
