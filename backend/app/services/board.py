"""Board service: applies mutations and fans the result out to storage, remote and screens."""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any, Concatenate, ParamSpec

from app.config import get_settings
from app.schemas.board import Snapshot
from app.services.local_storage import LocalSnapshotStorage
from app.services.remote_client import RemoteTableClient
from app.services.store import RecordStore
from app.services.sync import RowChange, SyncAdapter, diff_snapshots

if TYPE_CHECKING:
    from app.websocket.manager import ConnectionManager

logger = logging.getLogger(__name__)
settings = get_settings()

P = ParamSpec("P")


class BoardService:
    """
    Single owner of the dispatch board.

    Flow for a local change:
    - the mutation computes a new snapshot (ValidationError leaves the store untouched)
    - the store swaps it in and bumps the version
    - local save and broadcast run as background tasks; remote writes are queued
      and sent one mutation at a time, in the order the mutations were applied

    Remote reloads replace units, groups, calls and BOLOs wholesale and keep
    the local dispatch notes. Whichever replace lands last wins.
    """

    def __init__(
        self,
        store: RecordStore | None = None,
        storage: LocalSnapshotStorage | None = None,
        sync: SyncAdapter | None = None,
        notifier: "ConnectionManager | None" = None,
    ):
        self.store = store or RecordStore()
        self.storage = storage
        self.sync = sync
        self.notifier = notifier
        self._tasks: set[asyncio.Task] = set()
        # Remote writes leave in mutation order through a single writer task
        self._outbox: asyncio.Queue[list[RowChange]] = asyncio.Queue()
        self._writer: asyncio.Task | None = None

    @property
    def version(self) -> int:
        return self.store.version

    def snapshot(self) -> Snapshot:
        return self.store.read()

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _publish(self, snapshot: Snapshot, version: int) -> None:
        if self.storage is not None:
            self._spawn(self.storage.save(snapshot, version))
        if self.notifier is not None and self.notifier.connection_count:
            self._spawn(self.notifier.broadcast(snapshot, version))

    def apply(
        self,
        mutation: Callable[Concatenate[Snapshot, P], Snapshot],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> Snapshot:
        """Run a mutation against the current snapshot and publish the result."""
        before = self.store.read()
        after = mutation(before, *args, **kwargs)
        if after is before:
            logger.debug(f"{mutation.__name__}: no change")
            return before

        version = self.store.replace(after)
        logger.info(f"{mutation.__name__} applied: version={version}")
        self._publish(after, version)

        if self.sync is not None:
            changes = diff_snapshots(before, after)
            if changes:
                self._enqueue(changes)
        return after

    def _enqueue(self, changes: list[RowChange]) -> None:
        self._outbox.put_nowait(changes)
        if self._writer is None or self._writer.done():
            self._writer = self._spawn(self._drain_outbox())

    async def _drain_outbox(self) -> None:
        """Push queued row changes one mutation at a time, then exit."""
        while not self._outbox.empty():
            changes = self._outbox.get_nowait()
            try:
                await self.sync.push(changes)
            except Exception as e:
                logger.error(f"Remote push failed: {e}", exc_info=True)
            finally:
                self._outbox.task_done()

    async def load(self) -> None:
        """Restore the locally saved snapshot."""
        if self.storage is None:
            return
        snapshot = await self.storage.load()
        version = self.store.replace(snapshot)
        self.storage.saved_version = version
        logger.info(
            f"Loaded board: {len(snapshot.units)} units, {len(snapshot.groups)} groups, "
            f"{len(snapshot.calls)} calls, {len(snapshot.bolos)} bolos"
        )

    async def reload(self) -> bool:
        """Replace the board with the remote tables. Returns False if nothing was loaded."""
        if self.sync is None:
            return False
        remote = await self.sync.fetch_snapshot()
        if remote is None:
            return False

        # Notes are read after the fetch so edits made meanwhile survive
        snapshot = remote.model_copy(update={"dispatch_notes": self.store.read().dispatch_notes})
        version = self.store.replace(snapshot)
        logger.info(f"Board reloaded from remote: version={version}")
        self._publish(snapshot, version)
        return True

    def schedule_reload(self) -> asyncio.Task | None:
        """Start a reload without waiting for it."""
        if self.sync is None:
            return None
        return self._spawn(self.reload())

    async def flush(self) -> None:
        """Wait for pending background saves, writes and broadcasts."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


_service: BoardService | None = None


def build_board_service() -> BoardService:
    """Board service wired from settings."""
    from app.websocket.manager import manager as ws_manager

    sync = None
    if settings.remote_enabled:
        sync = SyncAdapter(RemoteTableClient())
        logger.info(f"Remote sync enabled: {settings.remote_url}")
    return BoardService(storage=LocalSnapshotStorage(), sync=sync, notifier=ws_manager)


def get_board_service() -> BoardService:
    """Dependency returning the process-wide board service."""
    global _service

    if _service is None:
        _service = build_board_service()
    return _service
