"""
Pydantic models for catalog entries and the films kept in the local store,
plus the small value types a single download passes around.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from film_cli.utils.formatting import format_bytes


class CatalogItem(BaseModel):
    """A remote film that is available for download."""

    id: int
    title: str
    url: str
    thumbnail: str = ""
    size: str = ""

    class Config:
        """Pydantic model configuration."""

        str_strip_whitespace = True
        extra = "ignore"

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Only plain HTTP(S) sources can be streamed."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Catalog URL must be http(s), got: {v!r}")
        return v


class FilmSummary(BaseModel):
    """A stored film's metadata, without its payload."""

    id: int | None = None
    original_id: int | None = None
    title: str
    url: str
    size: str
    download_date: str


class StoredFilm(FilmSummary):
    """A downloaded film as persisted in the local store."""

    blob: bytes = Field(repr=False)

    @classmethod
    def from_download(cls, item: CatalogItem, payload: bytes) -> "StoredFilm":
        """Builds the record for a completed download of a catalog item."""
        return cls(
            original_id=item.id,
            title=item.title,
            url=item.url,
            blob=payload,
            size=format_bytes(len(payload)),
            download_date=datetime.now(timezone.utc).isoformat(),
        )

    def summary(self) -> FilmSummary:
        return FilmSummary(**self.model_dump(exclude={"blob"}))


class DownloadState(str, Enum):
    """Lifecycle of a single download attempt."""

    IDLE = "idle"
    PREPARING = "preparing"
    DOWNLOADING = "downloading"
    SAVED = "saved"
    FAILED = "failed"


@dataclass(frozen=True)
class DownloadProgress:
    """Progress published after every received chunk."""

    received: int
    total: int | None = None

    @property
    def percent(self) -> float | None:
        # Not clamped: a server that under-reports Content-Length yields > 100.
        if not self.total:
            return None
        return self.received / self.total * 100


@dataclass
class DownloadOutcome:
    """The final state of one download action and what the user is shown."""

    catalog_id: int
    state: DownloadState = DownloadState.IDLE
    status: str = ""
    film_id: int | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.state is DownloadState.SAVED
