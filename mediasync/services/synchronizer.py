"""Synchronizer: uploads catalog entries that are not yet on the server."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mediasync.config.logger import app_logger, log_performance
from mediasync.config.settings import settings
from mediasync.models.catalog_entry import CatalogEntry
from mediasync.services.catalog_store import CatalogStore
from mediasync.services.content_identity import ContentIdentity
from mediasync.services.media import is_video_file
from mediasync.services.retry_queue import Requeued, RetryQueue
from mediasync.services.uploader import UploadTransport
from mediasync.utils.progress import ProgressReporter

FILE_NOT_FOUND = "File not found"
UNKNOWN_ERROR = "unknown error"


@dataclass
class SyncOptions:
    exclude_videos: bool = False
    quiet_success: bool = False
    max_retries: int = settings.SYNC_MAX_RETRY_COUNT


@dataclass
class SyncSummary:
    total: int = 0
    uploaded: int = 0
    failed: int = 0
    skipped_video: int = 0
    attempts: int = 0


def _defer(queue: RetryQueue[CatalogEntry], entry: CatalogEntry, summary: SyncSummary) -> None:
    outcome = queue.defer(entry)
    if isinstance(outcome, Requeued):
        app_logger.info(f"Retrying later ({outcome.retry}/{queue.max_retries}): {entry.path}")
    else:
        summary.failed += 1


def run_sync(
    store: CatalogStore,
    transport: UploadTransport,
    options: Optional[SyncOptions] = None,
    reporter: Optional[ProgressReporter] = None,
) -> SyncSummary:
    """Upload every entry not yet uploaded, retrying failures at the tail.

    The work set is a snapshot taken once at start. Transport and missing
    file failures become `failed` transitions; only catalog errors escape.
    """
    options = options or SyncOptions()
    reporter = reporter or ProgressReporter("sync")
    start_time = time.time()

    rows = store.select_unsynchronized()
    summary = SyncSummary(total=len(rows))
    app_logger.info(f"Found {len(rows)} media file(s) to upload.")

    queue: RetryQueue[CatalogEntry] = RetryQueue(rows, options.max_retries, key=lambda entry: entry.id)
    while queue:
        entry = queue.pop()
        count = queue.popped
        msg = f"{count}/{queue.total}"

        if options.exclude_videos and is_video_file(entry.path):
            summary.skipped_video += 1
            app_logger.info(f"Skipping video file (exclude-videos): {entry.path}  : {msg}")
            reporter.update(count, queue.total)
            continue

        summary.attempts += 1
        path = Path(entry.path)
        if not path.is_file():
            app_logger.error(f"Failed: {entry.path} -> {FILE_NOT_FOUND}  : {msg}")
            store.mark_failed(entry.id, None, FILE_NOT_FOUND)
            _defer(queue, entry, summary)
            reporter.update(count, queue.total)
            continue

        result = transport.upload(path, ContentIdentity(hash=entry.hash, size=entry.size))
        if result.success:
            store.mark_uploaded(entry.id, result.status_code)
            summary.uploaded += 1
            if not options.quiet_success:
                app_logger.info(f"Uploaded: {entry.path} -> {result.status_code}  : {msg}")
        else:
            error = result.error_message or UNKNOWN_ERROR
            app_logger.error(f"Failed: {entry.path} -> {error}  : {msg}")
            store.mark_failed(entry.id, result.status_code, error)
            _defer(queue, entry, summary)
        reporter.update(count, queue.total)

    reporter.close()
    log_performance("sync", time.time() - start_time, attempts=summary.attempts)
    return summary
