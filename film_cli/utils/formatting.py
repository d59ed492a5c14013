"""
Helper functions for formatting data into human-readable strings.
"""

import math
from datetime import datetime

BYTE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def format_bytes(num_bytes: int, decimals: int = 2) -> str:
    """
    Formats a byte count into a human-readable size string (e.g., '1.5 KB').

    The scaled value is rounded to ``decimals`` places and trailing zeros are
    dropped, so 2048 bytes is '2 KB'. Counts beyond the TB range stay in TB.

    Raises:
        ValueError: If ``num_bytes`` is negative.
    """
    if num_bytes < 0:
        raise ValueError(f"Byte count cannot be negative: {num_bytes}")
    if num_bytes == 0:
        return "0 Bytes"

    k = 1024
    dm = max(decimals, 0)
    i = int(math.floor(math.log(num_bytes) / math.log(k)))
    # log() can land just below an exact power of 1024
    if num_bytes >= k ** (i + 1):
        i += 1
    i = min(max(i, 0), len(BYTE_UNITS) - 1)

    value = f"{num_bytes / k**i:.{dm}f}"
    if "." in value:
        value = value.rstrip("0").rstrip(".")
    return f"{value} {BYTE_UNITS[i]}"


def format_duration(seconds: float) -> str:
    """
    Formats a duration in seconds into a human-readable string (e.g., '2h 34m 12s').
    """
    s = int(seconds)
    hours, remainder = divmod(s, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def format_download_date(iso_timestamp: str) -> str:
    """Renders a stored ISO-8601 timestamp as a local calendar date."""
    try:
        moment = datetime.fromisoformat(iso_timestamp)
    except ValueError:
        return iso_timestamp
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime("%Y-%m-%d")


def format_progress_status(received: int, total: int | None) -> str:
    """Builds the status line shown while a film is downloading."""
    if not total:
        return f"Downloading: {format_bytes(received)}"
    percent = received / total * 100
    return (
        f"Downloading: {round(percent)}% "
        f"({format_bytes(received)}/{format_bytes(total)})"
    )
