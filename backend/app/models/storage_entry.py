"""StorageEntry model: key/value blobs for the persisted board snapshot."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class StorageEntry(Base):
    """
    One serialized value under a fixed key.

    The board keeps its whole snapshot as a single JSON blob under
    ``settings.storage_key``.
    """

    __tablename__ = "local_storage"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    version: Mapped[int] = mapped_column(server_default="0", nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<StorageEntry {self.key}: {len(self.value)} bytes>"
