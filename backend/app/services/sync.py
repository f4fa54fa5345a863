"""Mirrors board mutations to the hosted table store and reloads from it."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import ValidationError as SchemaError

from app.schemas.board import COLLECTIONS, Bolo, Call, Group, Record, Snapshot, Unit
from app.services.remote_client import RemoteStoreError, RemoteTableClient

logger = logging.getLogger(__name__)

# Reload order per table: units/groups in creation order, calls/bolos newest first
TABLE_ORDER: dict[str, str] = {
    "units": "id.asc",
    "groups": "id.asc",
    "calls": "id.desc",
    "bolos": "created_at.desc",
}

RECORD_TYPES: dict[str, type[Record]] = {
    "units": Unit,
    "groups": Group,
    "calls": Call,
    "bolos": Bolo,
}


@dataclass(frozen=True)
class RowChange:
    """One row-level write against a remote table."""

    table: str
    op: Literal["insert", "update", "delete"]
    row_id: str
    row: dict[str, Any] | None = None


def to_row(record: Record) -> dict[str, Any]:
    """Record as a remote row (snake_case columns, JSON-safe values)."""
    return record.model_dump(mode="json")


def diff_snapshots(before: Snapshot, after: Snapshot) -> list[RowChange]:
    """
    Row changes that turn the remote copy of ``before`` into ``after``.

    Inserts carry the full row, updates only the changed columns. Notes are
    local-only and never produce a change.
    """
    changes: list[RowChange] = []
    for table in COLLECTIONS:
        old_records = getattr(before, table)
        new_records = getattr(after, table)
        if old_records is new_records:
            continue

        old = {r.id: r for r in old_records}
        new = {r.id: r for r in new_records}

        for row_id, record in new.items():
            previous = old.get(row_id)
            if previous is None:
                changes.append(RowChange(table, "insert", row_id, to_row(record)))
            elif previous != record:
                old_row, new_row = to_row(previous), to_row(record)
                delta = {k: v for k, v in new_row.items() if old_row.get(k) != v}
                changes.append(RowChange(table, "update", row_id, delta))

        for row_id in old.keys() - new.keys():
            changes.append(RowChange(table, "delete", row_id))

    return changes


@dataclass
class SyncStats:
    """Counters exposed on the health endpoint."""

    writes: int = 0
    failed_writes: int = 0
    reloads: int = 0
    failed_reloads: int = 0
    skipped_rows: int = 0
    last_reload_at: datetime | None = None
    last_error: str | None = field(default=None, repr=False)


class SyncAdapter:
    """
    Best-effort remote mirror.

    Writes are fire-and-forget from the caller's point of view: a failed write
    is logged and counted, never retried or rolled back. Reloads fetch all four
    tables and hand back collections that replace local state wholesale.
    """

    def __init__(self, client: RemoteTableClient):
        self.client = client
        self.stats = SyncStats()

    async def write(self, change: RowChange) -> bool:
        """Apply one row change remotely. Returns False on failure."""
        try:
            if change.op == "insert":
                await self.client.insert(change.table, change.row or {})
            elif change.op == "update":
                await self.client.update(change.table, change.row_id, change.row or {})
            else:
                await self.client.delete(change.table, change.row_id)
        except RemoteStoreError as e:
            self.stats.failed_writes += 1
            self.stats.last_error = str(e)
            logger.error(f"Remote {change.op} of {change.table}/{change.row_id} failed: {e}")
            return False

        self.stats.writes += 1
        return True

    async def push(self, changes: list[RowChange]) -> int:
        """Write changes in order; returns how many succeeded."""
        written = 0
        for change in changes:
            if await self.write(change):
                written += 1
        if changes:
            logger.info(f"Mirrored {written}/{len(changes)} row changes")
        return written

    def _parse_rows(self, table: str, rows: list[Any]) -> tuple[Record, ...]:
        """Validate rows one by one; a row that does not parse is skipped."""
        record_type = RECORD_TYPES[table]
        records = []
        for row in rows:
            try:
                records.append(record_type.model_validate(row))
            except SchemaError as e:
                row_id = row.get("id") if isinstance(row, dict) else None
                self.stats.skipped_rows += 1
                logger.warning(f"Skipping unreadable {table} row {row_id}: {e.error_count()} errors")
        return tuple(records)

    async def fetch_snapshot(self) -> Snapshot | None:
        """
        Load all four tables concurrently.

        Returns a snapshot with empty notes, or None if any table failed to
        load. Rows that do not parse are left out of the snapshot and counted.
        """
        try:
            results = await asyncio.gather(
                *(self.client.select_all(table, order=TABLE_ORDER[table]) for table in COLLECTIONS)
            )
        except RemoteStoreError as e:
            self.stats.failed_reloads += 1
            self.stats.last_error = str(e)
            logger.error(f"Remote reload failed: {e}")
            return None

        snapshot = Snapshot(
            **{table: self._parse_rows(table, rows) for table, rows in zip(COLLECTIONS, results)}
        )

        self.stats.reloads += 1
        self.stats.last_reload_at = datetime.now(UTC)
        logger.info(
            "Remote reload: "
            + ", ".join(f"{len(getattr(snapshot, table))} {table}" for table in COLLECTIONS)
        )
        return snapshot
