"""
Logger configuration for mediasync using Loguru.

This module provides the logging setup shared by every command:
- Bare console messages, so a captured run can be fed back to `reconcile`
- Warnings and errors routed to stderr
- Rotating file logs with timestamps under the logs directory
"""

import sys
from pathlib import Path

from loguru import logger

from mediasync.config.settings import settings

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


# Streams are looked up per message so a live progress display can redirect them
def _stdout_sink(message) -> None:
    sys.stdout.write(message)


def _stderr_sink(message) -> None:
    sys.stderr.write(message)


class LoguruConfig:
    """Loguru configuration class for the CLI."""

    def __init__(self, app_name: str = settings.APP_NAME, logs_dir: str = settings.LOGS_DIR):
        self.app_name = app_name
        self.logs_dir = Path(logs_dir)

    def setup_logger(self, log_level: str = "INFO", write_files: bool = True) -> None:
        """Configure Loguru logger for a CLI run."""

        log_level = log_level.upper()

        # Remove default handler
        logger.remove()

        # Plain messages on stdout; the upload log format is parsed back by reconcile
        logger.add(
            _stdout_sink,
            format="{message}",
            level=log_level,
            filter=lambda record: record["level"].no < logger.level("WARNING").no,
        )

        logger.add(
            _stderr_sink,
            format="{message}",
            level=max(logger.level("WARNING").no, logger.level(log_level).no),
            backtrace=False,
            diagnose=False,
        )

        if not write_files:
            return

        self.logs_dir.mkdir(parents=True, exist_ok=True)

        # General application logs
        logger.add(
            self.logs_dir / f"{self.app_name}.log",
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
        )

        # Error logs only
        logger.add(
            self.logs_dir / "errors.log",
            format=FILE_FORMAT,
            level="ERROR",
            rotation="5 MB",
            retention="30 days",
            compression="zip",
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
        )


def log_performance(operation: str, duration: float, **kwargs) -> None:
    """Log performance metrics using Loguru."""
    logger.debug(
        "PERFORMANCE: {operation} completed in {duration:.4f}s",
        operation=operation,
        duration=duration,
        **kwargs
    )


loguru_config = LoguruConfig()

# Export logger for use in other modules
app_logger = logger
