import io
import json

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from rich.console import Console

from film_cli.api.catalog import CatalogSource
from film_cli.cli.progress_manager import ProgressManager
from film_cli.cli.renderers import CatalogRenderer, SavedFilmsRenderer
from film_cli.core.film_manager import FilmManager
from film_cli.media.downloader import Downloader
from film_cli.storage.film_store import FilmStore

PAYLOAD_2K = bytes(range(256)) * 8
STREAMED_PARTS = [b"a" * 1000, b"b" * 1000, b"c" * 500]


def make_app() -> web.Application:
    async def film(request):
        return web.Response(body=PAYLOAD_2K, content_type="application/octet-stream")

    async def missing(request):
        return web.Response(status=404, text="not here")

    async def streamed(request):
        response = web.StreamResponse()
        response.enable_chunked_encoding()
        await response.prepare(request)
        for part in STREAMED_PARTS:
            await response.write(part)
        await response.write_eof()
        return response

    async def catalog(request):
        return web.json_response(
            [
                {"id": 1, "title": "Remote One", "url": "http://x/a.bin", "size": "2 KB"},
                {"id": 2, "title": "Remote Two", "url": "http://x/b.bin"},
            ]
        )

    async def broken_catalog(request):
        return web.Response(text="<html>nope</html>", content_type="text/html")

    app = web.Application()
    app.router.add_get("/a.bin", film)
    app.router.add_get("/missing.bin", missing)
    app.router.add_get("/streamed.bin", streamed)
    app.router.add_get("/catalog.json", catalog)
    app.router.add_get("/broken.json", broken_catalog)
    return app


@pytest_asyncio.fixture
async def film_server():
    server = TestServer(make_app())
    await server.start_server()
    yield server
    await server.close()


@pytest_asyncio.fixture
async def downloader():
    async with Downloader(chunk_size=4096) as dl:
        yield dl


@pytest_asyncio.fixture
async def store(tmp_path):
    return await FilmStore(tmp_path / "films.sqlite").open()


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=160, color_system=None)


@pytest.fixture
def write_catalog(tmp_path):
    def _write_catalog(entries):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(entries), encoding="utf-8")
        return str(path)

    return _write_catalog


@pytest.fixture
def launched():
    return []


@pytest.fixture
def make_manager(store, downloader, console, tmp_path, launched):
    def _make_manager(catalog_file: str = "") -> FilmManager:
        return FilmManager(
            store=store,
            downloader=downloader,
            catalog_source=CatalogSource(catalog_file=catalog_file),
            progress_manager=ProgressManager(console=console, quiet=True),
            catalog_renderer=CatalogRenderer(console),
            saved_renderer=SavedFilmsRenderer(console),
            playback_dir=tmp_path / "playback",
            launcher=launched.append,
        )

    return _make_manager
