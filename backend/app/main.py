"""FastAPI application for the dispatch board backend."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import get_settings
from app.database import check_db_ready, init_db
from app.rate_limit import limiter
from app.routers import (
    board_router,
    bolos_router,
    calls_router,
    groups_router,
    health_router,
    legacy_router,
    sync_router,
    units_router,
)
from app.services.board import get_board_service
from app.services.mutations import ValidationError
from app.tasks.scheduler import setup_scheduler, shutdown_scheduler
from app.websocket import websocket_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("Starting dispatch board backend...")

    try:
        await init_db()
        await check_db_ready()
        logger.info("Database ready")
    except Exception as e:
        logger.error(f"Database not ready: {e}")
        raise

    board = get_board_service()
    await board.load()
    if board.sync is not None:
        await board.reload()

    setup_scheduler()

    yield

    # Shutdown
    shutdown_scheduler()
    await board.flush()
    logger.info("Dispatch board backend shut down")


# Create FastAPI app
app = FastAPI(
    title="Dispatch Board API",
    description="CAD board for units, groups, calls and BOLOs",
    version="0.1.0",
    lifespan=lifespan,
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Rejected mutation: the board is unchanged."""
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "field": exc.field},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Include routers
app.include_router(health_router)
app.include_router(board_router, prefix=settings.api_v1_prefix)
app.include_router(units_router, prefix=settings.api_v1_prefix)
app.include_router(groups_router, prefix=settings.api_v1_prefix)
app.include_router(calls_router, prefix=settings.api_v1_prefix)
app.include_router(bolos_router, prefix=settings.api_v1_prefix)
app.include_router(sync_router, prefix=settings.api_v1_prefix)
app.include_router(legacy_router)  # In-memory /api/{resource}
app.include_router(websocket_router)  # WebSocket at /ws/board


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Dispatch Board API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
