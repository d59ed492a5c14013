import pytest

from film_cli.api.catalog import CatalogSource
from film_cli.cli.progress_manager import (
    COMPLETE_STATUS,
    PREPARING_STATUS,
    ProgressManager,
)
from film_cli.cli.renderers import CatalogRenderer, SavedFilmsRenderer
from film_cli.core.film_manager import FilmManager
from film_cli.models.film import CatalogItem, DownloadProgress, DownloadState


@pytest.fixture
def live_manager(film_server, write_catalog, store, downloader, console, tmp_path):
    path = write_catalog(
        [
            {"id": 1, "title": "Film A", "url": str(film_server.make_url("/a.bin"))},
            {
                "id": 2,
                "title": "Streamed",
                "url": str(film_server.make_url("/streamed.bin")),
            },
        ]
    )
    return FilmManager(
        store=store,
        downloader=downloader,
        catalog_source=CatalogSource(catalog_file=path),
        progress_manager=ProgressManager(console=console),
        catalog_renderer=CatalogRenderer(console),
        saved_renderer=SavedFilmsRenderer(console),
        playback_dir=tmp_path / "playback",
        launcher=lambda path: None,
    )


@pytest.mark.asyncio
async def test_live_display_shows_each_download_to_completion(live_manager, console):
    known = await live_manager.download_item(1)
    unknown = await live_manager.download_item(2)
    duplicate = await live_manager.download_item(1)

    assert known.state is DownloadState.SAVED
    assert unknown.state is DownloadState.SAVED
    assert duplicate.state is DownloadState.FAILED

    progress_manager = live_manager.progress_manager
    assert progress_manager.status_of(1).startswith("Error: ")
    assert progress_manager.status_of(2) == COMPLETE_STATUS
    assert not progress_manager._live
    assert not progress_manager.progress.task_ids

    output = console.file.getvalue()
    assert output.count("100%") == 3
    assert "  0%" not in output
    assert COMPLETE_STATUS in output
    assert "Streamed" in output


def test_quiet_manager_only_tracks_statuses(console):
    progress_manager = ProgressManager(console=console, quiet=True)
    item = CatalogItem(id=4, title="Quiet", url="https://films.example/q.mp4")

    task_id = progress_manager.start_download(item)
    assert task_id is None
    assert progress_manager.status_of(4) == PREPARING_STATUS

    progress_manager.update_download(task_id, 4, DownloadProgress(1024, 2048))
    assert progress_manager.status_of(4) == "Downloading: 50% (1 KB/2 KB)"

    progress_manager.finish_download(task_id, 4, COMPLETE_STATUS, success=True)
    assert progress_manager.status_of(4) == COMPLETE_STATUS
    assert console.file.getvalue() == ""


def test_unknown_size_bar_is_filled_on_success(console):
    progress_manager = ProgressManager(console=console)
    item = CatalogItem(id=5, title="Chunked", url="https://films.example/c.mp4")

    task_id = progress_manager.start_download(item)
    progress_manager.update_download(task_id, 5, DownloadProgress(2500, None))
    task = progress_manager.progress.tasks[0]
    assert task.total is None

    progress_manager.finish_download(task_id, 5, COMPLETE_STATUS, success=True)
    assert task.total == 2500
    assert task.completed == 2500
