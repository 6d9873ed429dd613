"""Command line entry point for the media catalog.

Commands:
  - index:     register media under a directory as pending
  - sync:      upload pending and failed entries to Immich (alias: post)
  - reconcile: backfill upload state from an earlier run's log (alias: import-log)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from mediasync.config.logger import app_logger, loguru_config
from mediasync.config.settings import settings
from mediasync.db.db import open_catalog
from mediasync.services.indexer import run_index, validate_root
from mediasync.services.log_parser import parse_completed_entries
from mediasync.services.reconciler import run_reconcile
from mediasync.services.synchronizer import SyncOptions, run_sync
from mediasync.services.uploader import ImmichUploader
from mediasync.utils.errors import MediaSyncError
from mediasync.utils.progress import ProgressReporter

app = typer.Typer(help="Content-addressed media catalog synchronized with Immich", no_args_is_help=True)


def _db_path(db_path: Optional[str]) -> Path:
    return Path(db_path or settings.CATALOG_DB_PATH).expanduser().resolve()


def _fail(error: Exception) -> None:
    app_logger.error(f"Error: {error}")
    raise typer.Exit(1)


@app.callback()
def main(
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Console log level"),
    log_files: bool = typer.Option(True, "--log-files/--no-log-files", help="Also write rotating log files"),
) -> None:
    """Configure logging before any command runs."""
    loguru_config.setup_logger(log_level, write_files=log_files)


@app.command()
def index(
    root: str = typer.Argument(..., help="Media directory to scan"),
    db_path: Optional[str] = typer.Argument(None, help="Catalog database path"),
) -> None:
    """Hash media under ROOT and register new content as pending."""
    db_file = _db_path(db_path)
    try:
        root_dir = validate_root(root)
        with open_catalog(db_file) as store, ProgressReporter("index") as reporter:
            summary = run_index(root_dir, store, reporter)
    except (MediaSyncError, OSError) as e:
        _fail(e)

    app_logger.info(
        f"Index completed. inserted={summary.inserted}, skipped={summary.skipped}, "
        f"{reporter.summary()}, db={db_file}"
    )


def _sync(
    db_path: Optional[str],
    exclude_videos: bool,
    quiet_success: bool,
    retry_count: int,
) -> None:
    db_file = _db_path(db_path)
    options = SyncOptions(exclude_videos=exclude_videos, quiet_success=quiet_success, max_retries=retry_count)
    try:
        with ImmichUploader() as uploader, open_catalog(db_file) as store, ProgressReporter("sync") as reporter:
            summary = run_sync(store, uploader, options, reporter)
            counts = store.count_by_status()
    except MediaSyncError as e:
        _fail(e)

    app_logger.info(
        f"Sync completed. uploaded={summary.uploaded}, failed={summary.failed}, "
        f"skipped_video={summary.skipped_video}, {reporter.summary()}, db={db_file}"
    )
    catalog_state = ", ".join(f"{status}={count}" for status, count in counts.items())
    app_logger.info(f"Catalog status: {catalog_state}")


@app.command()
def sync(
    db_path: Optional[str] = typer.Argument(None, help="Catalog database path"),
    exclude_videos: bool = typer.Option(False, "--exclude-videos", help="Skip video files"),
    quiet_success: bool = typer.Option(False, "--quiet-success", help="Do not log successful uploads"),
    retry_count: int = typer.Option(
        settings.SYNC_MAX_RETRY_COUNT, "--retry-count", min=0, help="Retries per file within this run"
    ),
) -> None:
    """Upload every catalog entry that is not uploaded yet."""
    _sync(db_path, exclude_videos, quiet_success, retry_count)


@app.command("post", hidden=True)
def post(
    db_path: Optional[str] = typer.Argument(None, help="Catalog database path"),
    exclude_videos: bool = typer.Option(False, "--exclude-videos"),
    quiet_success: bool = typer.Option(False, "--quiet-success"),
    retry_count: int = typer.Option(settings.SYNC_MAX_RETRY_COUNT, "--retry-count", min=0),
) -> None:
    """Alias for sync."""
    _sync(db_path, exclude_videos, quiet_success, retry_count)


def _reconcile(log_path: str, db_path: Optional[str]) -> None:
    db_file = _db_path(db_path)
    try:
        entries = parse_completed_entries(log_path)
        with open_catalog(db_file) as store, ProgressReporter("reconcile") as reporter:
            summary = run_reconcile(entries, store, reporter)
    except (MediaSyncError, OSError) as e:
        _fail(e)

    app_logger.info(
        f"Reconcile completed. parsed={summary.parsed}, marked={summary.marked}, "
        f"inserted={summary.inserted}, missing={summary.missing}, unchanged={summary.unchanged}, db={db_file}"
    )


@app.command()
def reconcile(
    log_path: str = typer.Argument(..., help="Output log of an earlier run"),
    db_path: Optional[str] = typer.Argument(None, help="Catalog database path"),
) -> None:
    """Mark files listed as uploaded in LOG_PATH without re-uploading them."""
    _reconcile(log_path, db_path)


@app.command("import-log", hidden=True)
def import_log(
    log_path: str = typer.Argument(...),
    db_path: Optional[str] = typer.Argument(None),
) -> None:
    """Alias for reconcile."""
    _reconcile(log_path, db_path)


if __name__ == "__main__":
    app()
