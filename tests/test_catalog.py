import pytest

from film_cli.api.catalog import SAMPLE_CATALOG, CatalogSource, parse_catalog
from film_cli.exceptions import CatalogError, NetworkError


@pytest.mark.asyncio
async def test_sample_catalog_is_used_without_configuration():
    items = await CatalogSource().fetch()
    assert [item.id for item in items] == [entry["id"] for entry in SAMPLE_CATALOG]
    assert items[0].size == "1.2GB"


@pytest.mark.asyncio
async def test_catalog_file_keeps_its_order(write_catalog):
    path = write_catalog(
        [
            {"id": 9, "title": "Last First", "url": "https://cdn/9.mp4"},
            {"id": 3, "title": "Then This", "url": "https://cdn/3.mp4", "extra": "x"},
        ]
    )
    items = await CatalogSource(catalog_file=path).fetch()
    assert [item.id for item in items] == [9, 3]
    assert items[1].thumbnail == ""


@pytest.mark.asyncio
async def test_missing_catalog_file_raises_catalog_error(tmp_path):
    with pytest.raises(CatalogError):
        await CatalogSource(catalog_file=str(tmp_path / "nope.json")).fetch()


@pytest.mark.asyncio
async def test_remote_catalog_is_fetched_as_json(film_server):
    items = await CatalogSource(str(film_server.make_url("/catalog.json"))).fetch()
    assert [item.title for item in items] == ["Remote One", "Remote Two"]


@pytest.mark.asyncio
async def test_remote_catalog_http_error_raises_network_error(film_server):
    source = CatalogSource(str(film_server.make_url("/missing.bin")))
    with pytest.raises(NetworkError, match="404"):
        await source.fetch()


@pytest.mark.asyncio
async def test_remote_catalog_that_is_not_json_raises_catalog_error(film_server):
    source = CatalogSource(str(film_server.make_url("/broken.json")))
    with pytest.raises(CatalogError):
        await source.fetch()


def test_parse_catalog_drops_repeated_ids():
    items = parse_catalog(
        [
            {"id": 1, "title": "Kept", "url": "http://x/1"},
            {"id": 1, "title": "Dropped", "url": "http://x/2"},
        ]
    )
    assert [item.title for item in items] == ["Kept"]


@pytest.mark.parametrize(
    "payload",
    [
        {"id": 1},
        [{"title": "no id", "url": "http://x/1"}],
        [{"id": 1, "title": "bad url", "url": "ftp://x/1"}],
        ["not an object"],
    ],
)
def test_parse_catalog_rejects_malformed_payloads(payload):
    with pytest.raises(CatalogError):
        parse_catalog(payload)
