"""Console progress for long-running catalog passes.

Interactive terminals get a rich progress bar; anything else (pipes, CI,
redirected log files) gets a plain line every few hundred items.
"""

from __future__ import annotations

import math
import sys
import time
from typing import Callable, Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from mediasync.config.logger import app_logger
from mediasync.config.settings import settings


def format_duration(seconds: float) -> str:
    """Format seconds as MM:SS, or HH:MM:SS past one hour."""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return "--:--"

    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


class ProgressReporter:
    """Progress state for one labelled pass.

    Services receive an instance instead of touching console state, so
    tests can pass a non-interactive reporter and assert on nothing but
    catalog state.
    """

    def __init__(
        self,
        label: str,
        interactive: Optional[bool] = None,
        log_every: int = settings.PROGRESS_LOG_EVERY,
        console: Optional[Console] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.label = label
        self.interactive = sys.stdout.isatty() if interactive is None else interactive
        self.log_every = max(1, log_every)
        self.console = console
        self.clock = clock
        self.started_at = clock()
        self.current = 0
        self.total = 0
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    def __enter__(self) -> "ProgressReporter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def elapsed(self) -> float:
        return max(0.0, self.clock() - self.started_at)

    def update(self, current: int, total: int) -> None:
        """Record that `current` of `total` items are done."""
        if total <= 0:
            return
        self.current = current
        self.total = total

        # Kept open until close(); sync retries grow the total
        if self.interactive:
            self._draw()
            return

        if current == 1 or current == total or current % self.log_every == 0:
            percent = min(1.0, max(0.0, current / total)) * 100
            app_logger.info(f"{self.label}: {current}/{total} ({percent:.1f}%)")

    def _draw(self) -> None:
        if self._progress is None:
            self._progress = Progress(
                TextColumn("[bold blue]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                TimeRemainingColumn(),
                console=self.console,
            )
            self._progress.start()
            self._task = self._progress.add_task(self.label, total=self.total)
        self._progress.update(self._task, completed=self.current, total=self.total)

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task = None

    def summary(self) -> str:
        return f"elapsed={format_duration(self.elapsed)}"
