"""Catalog database connection management using SQLModel on SQLite."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from mediasync.config.logger import app_logger
from mediasync.services.catalog_store import CatalogStore
from mediasync.utils.errors import CatalogStoreError


def get_db_url(db_path: str | Path) -> str:
    """Build the SQLAlchemy URL for a catalog file."""
    return f"sqlite:///{Path(db_path).expanduser().resolve()}"


def init_db(db_path: str | Path) -> Engine:
    """Create the engine and the catalog schema if it does not exist yet."""
    # Import all models to register them with SQLModel
    from mediasync.models import catalog_entry  # noqa: F401

    engine = create_engine(get_db_url(db_path), echo=False)
    try:
        SQLModel.metadata.create_all(engine)
    except SQLAlchemyError as e:
        engine.dispose()
        raise CatalogStoreError(f"Failed to open catalog {db_path}: {e}") from e

    app_logger.debug(f"Catalog initialized: {db_path}")
    return engine


@contextmanager
def open_catalog(db_path: str | Path) -> Iterator[CatalogStore]:
    """Open the catalog for the duration of a run.

    The session and engine are released on every exit path.
    """
    engine = init_db(db_path)
    session = Session(engine, expire_on_commit=False)
    try:
        yield CatalogStore(session)
    finally:
        session.close()
        engine.dispose()
        app_logger.debug(f"Catalog closed: {db_path}")
