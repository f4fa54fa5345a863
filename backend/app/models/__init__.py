"""Database models."""

from app.models.storage_entry import StorageEntry

__all__ = ["StorageEntry"]
