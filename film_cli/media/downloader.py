"""
Handles the low-level streaming download of film files over HTTP, publishing
progress after every received chunk.
"""

import asyncio
import logging
from collections.abc import Callable

import aiohttp

from film_cli.exceptions import NetworkError
from film_cli.models.config import DEFAULT_CHUNK_SIZE
from film_cli.models.film import DownloadProgress

log = logging.getLogger(__name__)

ProgressCallback = Callable[[DownloadProgress], None]


def parse_content_length(value: str | None) -> int | None:
    """Returns the announced body size, or None when it is absent or malformed."""
    if value is None:
        return None
    try:
        length = int(value)
    except ValueError:
        return None
    return length if length >= 0 else None


class Downloader:
    """
    Streams a single file into memory.

    There is no retry and no read timeout: a stalled transfer waits until the
    server resumes or drops the connection. Only connection setup is bounded.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        connect_timeout: float = 15.0,
        session: aiohttp.ClientSession | None = None,
    ):
        self.chunk_size = chunk_size
        self.connect_timeout = connect_timeout
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=4,
                ttl_dns_cache=600,
                keepalive_timeout=30,
                enable_cleanup_closed=True,
            )
            timeout = aiohttp.ClientTimeout(
                total=None, sock_connect=self.connect_timeout, sock_read=None
            )
            self._session = aiohttp.ClientSession(connector=connector, timeout=timeout)
            self._owns_session = True
            log.debug("Created download session.")
        return self._session

    async def close(self) -> None:
        """Closes the HTTP session if this downloader created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            log.debug("Download session closed.")
        self._session = None

    async def __aenter__(self) -> "Downloader":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def download(
        self, url: str, on_progress: ProgressCallback | None = None
    ) -> bytes:
        """
        Downloads ``url`` and returns the assembled payload.

        ``on_progress`` is called after every chunk with the running byte count
        and the total announced by ``Content-Length`` (None when absent).

        Raises:
            NetworkError: On a non-2xx status or a transport failure.
        """
        session = await self._get_session()
        chunks: list[bytes] = []
        received = 0
        try:
            async with session.get(url, allow_redirects=True) as response:
                if not 200 <= response.status < 300:
                    raise NetworkError(
                        f"HTTP error! status: {response.status}", status=response.status
                    )

                total = parse_content_length(response.headers.get("Content-Length"))
                log.debug(
                    f"Streaming '{url}' ({total if total is not None else 'unknown'}"
                    " bytes expected)."
                )

                async for chunk in response.content.iter_chunked(self.chunk_size):
                    chunks.append(chunk)
                    received += len(chunk)
                    if on_progress:
                        on_progress(DownloadProgress(received=received, total=total))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            raise NetworkError(f"Transfer of '{url}' failed: {reason}") from e

        log.debug(f"Finished '{url}': {received} bytes received.")
        return b"".join(chunks)
