"""Models module - imports all models for SQLModel registration."""

from mediasync.models.catalog_entry import CatalogEntry, CatalogStatus

__all__ = [
    "CatalogEntry",
    "CatalogStatus",
]
