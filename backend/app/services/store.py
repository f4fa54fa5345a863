"""Versioned holder for the current board snapshot."""

import logging

from app.schemas.board import Snapshot

logger = logging.getLogger(__name__)


class PersistenceFailure(Exception):
    """Base exception for local or remote persistence errors."""

    pass


class RecordStore:
    """
    Owns exactly one current snapshot.

    Every replace bumps the version stamp, whether the new snapshot came from
    a local mutation or a remote reload. Snapshots are immutable, so readers
    never observe a partial update.
    """

    def __init__(self, snapshot: Snapshot | None = None):
        self._state: tuple[int, Snapshot] = (0, snapshot or Snapshot())

    @property
    def version(self) -> int:
        return self._state[0]

    def read(self) -> Snapshot:
        """Current snapshot."""
        return self._state[1]

    def stamped(self) -> tuple[int, Snapshot]:
        """Current (version, snapshot) pair, read together."""
        return self._state

    def replace(self, snapshot: Snapshot) -> int:
        """Swap in a new snapshot and return its version."""
        version = self._state[0] + 1
        self._state = (version, snapshot)
        logger.debug(f"Snapshot replaced: version={version}")
        return version
