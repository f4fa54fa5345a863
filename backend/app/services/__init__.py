"""Services for board state, persistence and remote sync."""

from app.services.board import BoardService, get_board_service
from app.services.local_storage import LocalSnapshotStorage
from app.services.mutations import ValidationError
from app.services.remote_client import RemoteStoreError, RemoteTableClient
from app.services.store import PersistenceFailure, RecordStore
from app.services.sync import SyncAdapter

__all__ = [
    "BoardService",
    "LocalSnapshotStorage",
    "PersistenceFailure",
    "RecordStore",
    "RemoteStoreError",
    "RemoteTableClient",
    "SyncAdapter",
    "ValidationError",
    "get_board_service",
]
