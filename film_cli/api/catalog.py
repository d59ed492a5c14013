"""
Supplies the list of films available for download, either from a remote JSON
endpoint, a local JSON file, or the built-in sample list.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import aiohttp
from pydantic import ValidationError

from film_cli.exceptions import CatalogError, NetworkError
from film_cli.models.film import CatalogItem

log = logging.getLogger(__name__)

# Used when neither a catalog URL nor a catalog file is configured.
SAMPLE_CATALOG: list[dict[str, Any]] = [
    {
        "id": 1,
        "title": "Sample Film 1",
        "url": "https://example.com/film1.mp4",
        "thumbnail": "https://example.com/thumb1.jpg",
        "size": "1.2GB",
    },
    {
        "id": 2,
        "title": "Sample Film 2",
        "url": "https://example.com/film2.mp4",
        "thumbnail": "https://example.com/thumb2.jpg",
        "size": "2.1GB",
    },
]


def parse_catalog(entries: Any) -> list[CatalogItem]:
    """
    Validates raw catalog entries into CatalogItems, preserving their order.

    Entries that repeat an earlier id are dropped with a warning, since the id
    is what download actions are keyed on.

    Raises:
        CatalogError: If the payload is not a list or an entry is malformed.
    """
    if not isinstance(entries, list):
        raise CatalogError("Catalog must be a JSON list of film objects.")

    items: list[CatalogItem] = []
    seen_ids: set[int] = set()
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise CatalogError(f"Catalog entry #{position} is not an object.")
        try:
            item = CatalogItem(**entry)
        except ValidationError as e:
            raise CatalogError(f"Catalog entry #{position} is invalid:\n{e}") from e
        if item.id in seen_ids:
            log.warning(
                f"[yellow]Catalog id {item.id} appears more than once; "
                f"ignoring '{item.title}'.[/yellow]"
            )
            continue
        seen_ids.add(item.id)
        items.append(item)
    return items


class CatalogSource:
    """Loads the film catalog from the configured source."""

    def __init__(
        self,
        catalog_url: str = "",
        catalog_file: str = "",
        timeout: float = 30.0,
    ):
        self.catalog_url = catalog_url
        self.catalog_file = catalog_file
        self.timeout = timeout

    @property
    def description(self) -> str:
        if self.catalog_url:
            return self.catalog_url
        if self.catalog_file:
            return self.catalog_file
        return "built-in sample catalog"

    async def fetch(self) -> list[CatalogItem]:
        """
        Returns the ordered list of films available for download.

        Raises:
            NetworkError: If the remote catalog can't be retrieved.
            CatalogError: If the catalog content is malformed.
        """
        if self.catalog_url:
            entries = await self._fetch_remote()
        elif self.catalog_file:
            entries = await asyncio.to_thread(self._read_file)
        else:
            entries = SAMPLE_CATALOG

        items = parse_catalog(entries)
        log.debug(f"Loaded {len(items)} catalog entries from {self.description}.")
        return items

    async def _fetch_remote(self) -> Any:
        timeout = aiohttp.ClientTimeout(total=self.timeout, connect=15)
        try:
            async with (
                aiohttp.ClientSession(timeout=timeout) as session,
                session.get(self.catalog_url) as response,
            ):
                if not 200 <= response.status < 300:
                    raise NetworkError(
                        f"Catalog request failed with HTTP status {response.status}",
                        status=response.status,
                    )
                return await response.json(content_type=None)
        except json.JSONDecodeError as e:
            raise CatalogError(
                f"Catalog at '{self.catalog_url}' is not JSON: {e}"
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            raise NetworkError(f"Could not fetch catalog: {reason}") from e

    def _read_file(self) -> Any:
        path = Path(self.catalog_file).expanduser()
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise CatalogError(f"Could not read catalog file '{path}': {e}") from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"Catalog file '{path}' is not valid JSON: {e}") from e
