"""Indexer: registers media found under a directory tree into the catalog."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mediasync.config.logger import app_logger, log_performance
from mediasync.services.catalog_store import CatalogStore
from mediasync.services.content_identity import compute_identity
from mediasync.services.media import get_all_media_files
from mediasync.utils.errors import InputError
from mediasync.utils.progress import ProgressReporter


@dataclass
class IndexSummary:
    found: int = 0
    inserted: int = 0
    skipped: int = 0


def validate_root(root: str | Path) -> Path:
    """Make the tree root absolute, rejecting anything that is not a directory."""
    root = Path(os.path.abspath(os.path.expanduser(root)))
    if not root.is_dir():
        raise InputError(f"Target folder is not found or not directory: {root}")
    return root


def run_index(root: str | Path, store: CatalogStore, reporter: Optional[ProgressReporter] = None) -> IndexSummary:
    """Hash every media file under root and register unseen content as pending.

    Files whose content is already cataloged, under any path, count as
    skipped. An unreadable directory aborts the pass.
    """
    start_time = time.time()
    reporter = reporter or ProgressReporter("index")
    files = get_all_media_files(validate_root(root))
    summary = IndexSummary(found=len(files))
    app_logger.info(f"Found {len(files)} media file(s).")

    for index, path in enumerate(files, start=1):
        identity = compute_identity(path)
        if store.upsert_pending(str(path), identity):
            summary.inserted += 1
        else:
            summary.skipped += 1
            app_logger.debug(f"Already cataloged: {path} ({identity.device_asset_id})")
        reporter.update(index, len(files))

    reporter.close()
    log_performance("index", time.time() - start_time, files=len(files))
    return summary
