"""Model representing one content identity in the media catalog."""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, Index, UniqueConstraint
from sqlmodel import Field, SQLModel


class CatalogStatus(str, Enum):
    """Synchronization status of a catalog entry."""

    PENDING = "pending"
    UPLOADED = "uploaded"
    FAILED = "failed"


class CatalogEntry(SQLModel, table=True):
    """Tracks upload state for one distinct (hash, size) pair.

    The path is whatever location first registered the content and may go
    stale if the file moves.
    """

    __tablename__ = "catalog_entries"
    __table_args__ = (
        UniqueConstraint("hash", "size", name="uq_catalog_entries_hash_size"),
        Index("ix_catalog_entries_status", "status"),
    )

    id: int | None = Field(default=None, primary_key=True)
    path: str = Field(index=True)
    hash: str = Field(max_length=16)
    size: int = Field(ge=0)
    status: str = Field(default=CatalogStatus.PENDING.value, max_length=16)
    status_code: int | None = None
    last_error: str | None = None
    uploaded_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
