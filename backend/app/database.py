"""Database setup with SQLAlchemy async for the local snapshot storage."""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import get_settings

settings = get_settings()


def _engine_options(database_url: str) -> dict[str, Any]:
    """Pool options; SQLite drivers manage their own pool."""
    if database_url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create tables that do not exist yet."""
    # Registers the mapped tables on Base.metadata
    import app.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_db_ready(bind: AsyncEngine = engine) -> None:
    """
    Verify database connectivity and expected schema.

    Raises RuntimeError when the local_storage table is missing.
    """
    async with bind.connect() as conn:
        await conn.execute(text("SELECT 1"))

        has_table = await conn.run_sync(
            lambda sync_conn: sync_conn.dialect.has_table(sync_conn, "local_storage")
        )
        if not has_table:
            raise RuntimeError(
                "Database schema is missing tables: local_storage "
                "(run database init)."
            )
