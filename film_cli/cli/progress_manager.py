"""
Manages the Rich progress display for film downloads: one bar per download
plus the status line that tells the user what state it is in.
"""

import asyncio

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from film_cli.models.film import CatalogItem, DownloadProgress
from film_cli.utils.formatting import format_progress_status

PREPARING_STATUS = "Preparing download..."
COMPLETE_STATUS = "Download complete!"


class ProgressManager:
    """
    Tracks the progress bar and status line of every download started in a session.

    Status lines are keyed by catalog id and stay readable after the bar is gone,
    so callers can report the final state of each item.
    """

    def __init__(self, console: Console, quiet: bool = False):
        self.console = console
        self.quiet = quiet

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=30),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            TextColumn("{task.fields[status]}", style="dim"),
            console=console,
            transient=False,
        )

        self._live = False
        self._statuses: dict[int, str] = {}
        self._active_tasks: dict[TaskID, int] = {}
        self._received: dict[TaskID, int] = {}

    def status_of(self, catalog_id: int) -> str:
        """Returns the last status line shown for a catalog item."""
        return self._statuses.get(catalog_id, "")

    def _set_status(self, task_id: TaskID | None, catalog_id: int, status: str):
        self._statuses[catalog_id] = status
        if task_id is not None:
            self.progress.update(task_id, status=escape(status))

    def start_download(self, item: CatalogItem) -> TaskID | None:
        """Adds a bar for a download that is about to begin."""
        self._statuses[item.id] = PREPARING_STATUS
        if self.quiet:
            return None
        if not self._live:
            self.progress.start()
            self._live = True
        description = item.title if len(item.title) <= 40 else item.title[:39] + "…"
        task_id = self.progress.add_task(
            escape(description), total=None, start=True, status=PREPARING_STATUS
        )
        self._active_tasks[task_id] = item.id
        return task_id

    def update_download(
        self, task_id: TaskID | None, catalog_id: int, update: DownloadProgress
    ):
        """Moves the bar forward after a received chunk."""
        status = format_progress_status(update.received, update.total)
        if task_id is not None:
            self._received[task_id] = update.received
            self.progress.update(task_id, completed=update.received, total=update.total)
        self._set_status(task_id, catalog_id, status)

    def finish_download(
        self, task_id: TaskID | None, catalog_id: int, status: str, success: bool
    ):
        """
        Records the final status line. Once no download is active the live
        display is stopped, leaving the finished bars printed above the prompt.
        """
        self._statuses[catalog_id] = status
        if task_id is None:
            return
        received = self._received.pop(task_id, 0)
        if success:
            # total is still None when no Content-Length was sent
            self.progress.update(task_id, total=received, completed=received)
        style = "green" if success else "red"
        self.progress.update(task_id, status=f"[{style}]{escape(status)}[/{style}]")
        self.progress.stop_task(task_id)
        self._active_tasks.pop(task_id, None)
        if not self._active_tasks:
            self._stop_live()

    def _stop_live(self):
        if not self._live:
            return
        self.progress.refresh()
        self.progress.stop()
        self._live = False
        self._received.clear()
        for task_id in list(self.progress.task_ids):
            self.progress.remove_task(task_id)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._live:
            await asyncio.sleep(0.1)
            self._stop_live()
