"""Shared fixtures for catalog tests."""

from pathlib import Path
from typing import Callable, Iterator, List

import pytest
from loguru import logger

from mediasync.db.db import open_catalog
from mediasync.services.catalog_store import CatalogStore
from mediasync.utils.progress import ProgressReporter


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "catalog.db"


@pytest.fixture
def store(db_path: Path) -> Iterator[CatalogStore]:
    with open_catalog(db_path) as catalog:
        yield catalog


@pytest.fixture
def reporter() -> ProgressReporter:
    return ProgressReporter("test", interactive=False)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, bytes], Path]:
    """Create a file below tmp_path/media with the given bytes."""

    def _write(relative: str, content: bytes) -> Path:
        path = tmp_path / "media" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _write


@pytest.fixture
def log_messages() -> Iterator[List[str]]:
    """Collect loguru messages emitted during a test."""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
