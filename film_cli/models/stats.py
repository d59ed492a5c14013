"""
Dataclass for tracking download session statistics.
"""

import time
from dataclasses import dataclass, field


@dataclass
class DownloadStats:
    """Tracks the outcome of the downloads run in one command."""

    films_downloaded: int = 0
    films_failed: int = 0
    films_duplicate: int = 0
    total_size_downloaded: int = 0
    failures: dict[int, str] = field(default_factory=dict)
    _start_time: float = field(default=0.0, repr=False)

    def __post_init__(self):
        self._start_time = time.monotonic()

    def record_success(self, size: int) -> None:
        self.films_downloaded += 1
        self.total_size_downloaded += size

    def record_failure(
        self, catalog_id: int, message: str, duplicate: bool = False
    ) -> None:
        """Counts a failed download, keeping its status text for the summary."""
        if duplicate:
            self.films_duplicate += 1
        else:
            self.films_failed += 1
        self.failures[catalog_id] = message

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._start_time

    @property
    def average_speed_bps(self) -> float:
        elapsed = self.elapsed
        if elapsed <= 0:
            return 0.0
        return self.total_size_downloaded / elapsed
