"""progress display for runtime downloads."""

import sys
from contextlib import contextmanager
from typing import Optional
from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    DownloadColumn,
    TransferSpeedColumn,
    TimeRemainingColumn,
    TaskID,
)


class ProgressManager:
    """renders spinners and download bars, or stays quiet when not on a terminal."""

    def __init__(self, console: Optional[Console] = None, enabled: Optional[bool] = None):
        """
        args:
            console: optional rich console instance. if not provided, creates new one.
            enabled: force progress on or off; detected from stdout when None.
        """
        self.console = console or Console()
        self._enabled = self._should_show_progress() if enabled is None else enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _should_show_progress(self) -> bool:
        # non-interactive environments (ci, piped output) get no bars
        return sys.stdout.isatty() and not sys.stdout.closed

    @contextmanager
    def spinner(self, description: str, transient: bool = True):
        """
        indeterminate spinner for steps of unknown length (metadata lookup, extraction).

        yields:
            task id of the spinner, or None in non-interactive mode
        """
        if not self._enabled:
            yield None
            return

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=transient,
        ) as progress:
            task_id = progress.add_task(description, total=None)
            yield task_id

    @contextmanager
    def download_task(self, description: str):
        """
        a single download bar with size, speed and time remaining.

        the total is left unknown; the downloader sets it once it sees
        the response headers.

        yields:
            tuple of (Progress instance, task_id)
        """
        if not self._enabled:
            yield _DummyProgress(), None
            return

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=self.console,
        ) as progress:
            task_id = progress.add_task(description, total=None)
            yield progress, task_id


class _DummyProgress:
    """dummy progress object for non-interactive mode."""

    def add_task(self, description: str, total: Optional[int] = None, **kwargs) -> TaskID:
        return TaskID(0)

    def update(self, task_id: TaskID, **kwargs):
        pass
