"""Log reconciler: backfills catalog state from an earlier run's output."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional

from mediasync.config.logger import app_logger, log_performance
from mediasync.config.settings import settings
from mediasync.services.catalog_store import CatalogStore
from mediasync.services.content_identity import compute_identity
from mediasync.services.log_parser import CompletedLogEntry
from mediasync.utils.progress import ProgressReporter


@dataclass
class ReconcileSummary:
    parsed: int = 0
    marked: int = 0
    inserted: int = 0
    missing: int = 0
    unchanged: int = 0


def run_reconcile(
    entries: List[CompletedLogEntry],
    store: CatalogStore,
    reporter: Optional[ProgressReporter] = None,
    max_missing_log: int = settings.RECONCILE_MISSING_LOG_LIMIT,
) -> ReconcileSummary:
    """Mark logged uploads as uploaded without contacting the server.

    Path matches are tried first. Files unknown to the catalog are hashed
    and inserted as uploaded, which covers runs made before the catalog
    existed.
    """
    start_time = time.time()
    reporter = reporter or ProgressReporter("reconcile")
    summary = ReconcileSummary(parsed=len(entries))

    def note_missing(path: str, error: OSError) -> None:
        summary.missing += 1
        if isinstance(error, (FileNotFoundError, NotADirectoryError, IsADirectoryError)):
            reason = "file not found"
        else:
            reason = f"unreadable: {error.strerror or error}"
        if summary.missing <= max_missing_log:
            app_logger.warning(f"Skip import ({reason}): {path}")
        elif summary.missing == max_missing_log + 1:
            app_logger.warning(f"Skip import logs are suppressed after {max_missing_log} missing files.")

    for processed, entry in enumerate(entries, start=1):
        reporter.update(processed, len(entries))
        if store.mark_uploaded_by_path(entry.path, entry.status_code):
            summary.marked += 1
            continue
        if store.find_by_path(entry.path) is not None:
            summary.unchanged += 1
            continue

        try:
            identity = compute_identity(entry.path)
        except OSError as e:
            note_missing(entry.path, e)
            continue

        if store.upsert_uploaded(entry.path, identity, entry.status_code):
            summary.inserted += 1
        else:
            # Same content is already cataloged under another path
            summary.unchanged += 1

    reporter.close()
    log_performance("reconcile", time.time() - start_time, entries=len(entries))
    return summary
