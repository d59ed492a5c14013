"""
Utilities for handling file paths derived from film metadata.
"""

from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

from pathvalidate import sanitize_filename

DEFAULT_EXTENSION = ".mp4"


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def extension_from_url(url: str) -> str:
    """Returns the file extension of the URL's path, e.g. '.mkv'."""
    suffix = PurePosixPath(unquote(urlparse(url).path)).suffix.lower()
    if not suffix or len(suffix) > 6:
        return DEFAULT_EXTENSION
    return suffix


def film_file_name(film_id: int, title: str, url: str) -> str:
    """Builds a filesystem-safe file name for a stored film."""
    stem = sanitize_filename(title, platform="auto").strip() or "film"
    return f"{film_id:04d} - {stem}{extension_from_url(url)}"
