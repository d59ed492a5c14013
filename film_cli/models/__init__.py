"""
Data Models Layer.

This package contains the Pydantic models and dataclasses that define the core
data structures used throughout the application, such as catalog items, stored
films, configuration and statistics.
"""

from .config import AppConfig
from .film import (
    CatalogItem,
    DownloadOutcome,
    DownloadProgress,
    DownloadState,
    FilmSummary,
    StoredFilm,
)
from .stats import DownloadStats

__all__ = [
    "AppConfig",
    "CatalogItem",
    "DownloadOutcome",
    "DownloadProgress",
    "DownloadState",
    "DownloadStats",
    "FilmSummary",
    "StoredFilm",
]
