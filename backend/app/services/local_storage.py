"""Local persistence of the board snapshot as one JSON blob under a fixed key."""

import asyncio
import logging

from pydantic import ValidationError as SchemaError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import get_settings
from app.database import async_session_maker
from app.models import StorageEntry
from app.schemas.board import Snapshot

logger = logging.getLogger(__name__)
settings = get_settings()


def serialize_snapshot(snapshot: Snapshot) -> str:
    """Snapshot as JSON: {units, groups, calls, bolos, dispatchNotes}."""
    return snapshot.model_dump_json(by_alias=True)


def deserialize_snapshot(raw: str | bytes | None) -> Snapshot:
    """Parse a stored blob; absent or corrupt data yields an empty snapshot."""
    if not raw:
        return Snapshot()
    try:
        return Snapshot.model_validate_json(raw)
    except SchemaError as e:
        logger.warning(f"Stored snapshot is corrupt, starting empty: {e.error_count()} errors")
        return Snapshot()


class LocalSnapshotStorage:
    """
    Key/value snapshot storage backed by the local_storage table.

    Saves carry the store version they were taken at; a save older than the
    last one written is skipped, so out-of-order background saves can never
    roll the stored blob back. Failures are logged, never raised.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession] = async_session_maker,
        key: str = settings.storage_key,
    ):
        self.session_maker = session_maker
        self.key = key
        self.saved_version = -1
        self.failed_saves = 0
        self._lock = asyncio.Lock()

    async def load(self) -> Snapshot:
        """Read the stored snapshot, or an empty one."""
        try:
            async with self.session_maker() as session:
                result = await session.execute(
                    select(StorageEntry).where(StorageEntry.key == self.key)
                )
                entry = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load snapshot '{self.key}': {e}")
            return Snapshot()

        if entry is None:
            logger.info(f"No stored snapshot under '{self.key}', starting empty")
            return Snapshot()
        return deserialize_snapshot(entry.value)

    async def save(self, snapshot: Snapshot, version: int) -> bool:
        """Write the snapshot unless a newer version was already saved."""
        async with self._lock:
            if version <= self.saved_version:
                logger.debug(f"Skipping stale save: version={version} saved={self.saved_version}")
                return False

            try:
                async with self.session_maker() as session:
                    await session.merge(
                        StorageEntry(
                            key=self.key,
                            value=serialize_snapshot(snapshot),
                            version=version,
                        )
                    )
                    await session.commit()
            except SQLAlchemyError as e:
                self.failed_saves += 1
                logger.error(f"Failed to save snapshot version {version}: {e}")
                return False

            self.saved_version = version
            return True
