"""Persistent catalog of media content and its upload status."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import case, func, or_, update
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from mediasync.models.catalog_entry import CatalogEntry, CatalogStatus
from mediasync.services.content_identity import ContentIdentity
from mediasync.utils.errors import CatalogStoreError


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CatalogStore:
    """Status transitions over the catalog table.

    Every mutation is one statement against one row and is committed
    immediately, so an interrupted run loses at most the in-flight item.
    """

    def __init__(self, session: Session):
        self.session = session

    def _commit(self, statement) -> int:
        try:
            result = self.session.exec(statement)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise CatalogStoreError(f"Catalog write failed: {e}") from e
        return result.rowcount

    def _insert_ignore(self, path: str, identity: ContentIdentity, **values) -> bool:
        statement = (
            insert(CatalogEntry)
            .values(
                path=str(path),
                hash=identity.hash,
                size=identity.size,
                updated_at=_now(),
                **values,
            )
            .on_conflict_do_nothing(index_elements=["hash", "size"])
        )
        return self._commit(statement) > 0

    def upsert_pending(self, path: str, identity: ContentIdentity) -> bool:
        """Register content as pending unless its identity is already known."""
        return self._insert_ignore(path, identity, status=CatalogStatus.PENDING.value)

    def upsert_uploaded(self, path: str, identity: ContentIdentity, status_code: Optional[int] = None) -> bool:
        """Register content as already uploaded unless its identity is already known."""
        return self._insert_ignore(
            path,
            identity,
            status=CatalogStatus.UPLOADED.value,
            status_code=status_code,
            uploaded_at=_now(),
        )

    def mark_uploaded(self, entry_id: int, status_code: Optional[int]) -> None:
        now = _now()
        self._commit(
            update(CatalogEntry)
            .execution_options(synchronize_session=False)
            .where(CatalogEntry.id == entry_id)
            .values(
                status=CatalogStatus.UPLOADED.value,
                status_code=status_code,
                last_error=None,
                uploaded_at=now,
                updated_at=now,
            )
        )

    def mark_failed(self, entry_id: int, status_code: Optional[int], error: str) -> None:
        self._commit(
            update(CatalogEntry)
            .execution_options(synchronize_session=False)
            .where(CatalogEntry.id == entry_id)
            .values(
                status=CatalogStatus.FAILED.value,
                status_code=status_code,
                last_error=error,
                updated_at=_now(),
            )
        )

    def mark_uploaded_by_path(self, path: str, status_code: Optional[int]) -> bool:
        """Mark the entry registered under path as uploaded.

        A null status code keeps the stored one. Entries that are already
        uploaded with the same code are left untouched and report no change.
        """
        now = _now()
        if status_code is None:
            needs_change = CatalogEntry.status != CatalogStatus.UPLOADED.value
        else:
            needs_change = or_(
                CatalogEntry.status != CatalogStatus.UPLOADED.value,
                CatalogEntry.status_code.is_(None),
                CatalogEntry.status_code != status_code,
            )
        statement = (
            update(CatalogEntry)
            .execution_options(synchronize_session=False)
            .where(CatalogEntry.path == str(path))
            .where(needs_change)
            .values(
                status=CatalogStatus.UPLOADED.value,
                status_code=func.coalesce(status_code, CatalogEntry.status_code),
                last_error=None,
                uploaded_at=now,
                updated_at=now,
            )
        )
        return self._commit(statement) > 0

    def select_unsynchronized(self) -> List[CatalogEntry]:
        """Entries not yet uploaded, previously failed ones first, then by id."""
        failed_first = case((CatalogEntry.status == CatalogStatus.FAILED.value, 0), else_=1)
        statement = (
            select(CatalogEntry)
            .where(or_(CatalogEntry.status.is_(None), CatalogEntry.status != CatalogStatus.UPLOADED.value))
            .order_by(failed_first, CatalogEntry.id)
        )
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise CatalogStoreError(f"Catalog read failed: {e}") from e

    def get(self, entry_id: int) -> Optional[CatalogEntry]:
        try:
            return self.session.exec(
                select(CatalogEntry)
                .where(CatalogEntry.id == entry_id)
                .execution_options(populate_existing=True)
            ).first()
        except SQLAlchemyError as e:
            raise CatalogStoreError(f"Catalog read failed: {e}") from e

    def find_by_path(self, path: str) -> Optional[CatalogEntry]:
        try:
            return self.session.exec(
                select(CatalogEntry)
                .where(CatalogEntry.path == str(path))
                .order_by(CatalogEntry.id)
                .execution_options(populate_existing=True)
            ).first()
        except SQLAlchemyError as e:
            raise CatalogStoreError(f"Catalog read failed: {e}") from e

    def count_by_status(self) -> Dict[str, int]:
        """Number of entries per status."""
        try:
            rows = self.session.exec(
                select(CatalogEntry.status, func.count()).group_by(CatalogEntry.status)
            ).all()
        except SQLAlchemyError as e:
            raise CatalogStoreError(f"Catalog read failed: {e}") from e
        counts = {status.value: 0 for status in CatalogStatus}
        for status, count in rows:
            counts[status] = count
        return counts
