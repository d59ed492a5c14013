"""
The controller that turns user actions (download, play, export, delete) into
calls on the catalog source, the downloader and the film store, and keeps the
console views in step with the store.
"""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

import aiofiles
import typer

from film_cli.api.catalog import CatalogSource
from film_cli.cli.progress_manager import COMPLETE_STATUS, ProgressManager
from film_cli.cli.renderers import CatalogRenderer, SavedFilmsRenderer
from film_cli.exceptions import ConstraintError, FilmCliError, NotFoundError
from film_cli.media.downloader import Downloader
from film_cli.models.film import (
    CatalogItem,
    DownloadOutcome,
    DownloadProgress,
    DownloadState,
    FilmSummary,
    StoredFilm,
)
from film_cli.models.stats import DownloadStats
from film_cli.storage.film_store import FilmStore
from film_cli.utils.path import create_dir, film_file_name

log = logging.getLogger(__name__)


class FilmManager:
    """Coordinates a session of catalog browsing, downloading and playback."""

    def __init__(
        self,
        store: FilmStore,
        downloader: Downloader,
        catalog_source: CatalogSource,
        progress_manager: ProgressManager,
        catalog_renderer: CatalogRenderer,
        saved_renderer: SavedFilmsRenderer,
        playback_dir: Path,
        launcher: Callable[[str], object] = typer.launch,
    ):
        self.store = store
        self.downloader = downloader
        self.catalog_source = catalog_source
        self.progress_manager = progress_manager
        self.catalog_renderer = catalog_renderer
        self.saved_renderer = saved_renderer
        self.playback_dir = playback_dir
        self.launcher = launcher
        self.stats = DownloadStats()
        self._catalog: dict[int, CatalogItem] = {}

    @property
    def catalog(self) -> list[CatalogItem]:
        return list(self._catalog.values())

    async def load_catalog(self, render: bool = True) -> list[CatalogItem]:
        """Fetches the catalog and, by default, draws it."""
        items = await self.catalog_source.fetch()
        self._catalog = {item.id: item for item in items}
        if render:
            self.catalog_renderer.render(items)
        return items

    async def refresh_saved(self) -> list[FilmSummary]:
        """Redraws the saved-films list from a full scan of the store."""
        films = await self.store.list_summaries()
        self.saved_renderer.render(films)
        return films

    def _fail(
        self, outcome: DownloadOutcome, error: Exception, duplicate: bool = False
    ) -> DownloadOutcome:
        outcome.state = DownloadState.FAILED
        outcome.error = error
        outcome.status = f"Error: {error}"
        self.stats.record_failure(outcome.catalog_id, outcome.status, duplicate)
        return outcome

    async def download_item(self, catalog_id: int) -> DownloadOutcome:
        """
        Downloads one catalog item and saves it to the store.

        Failures never escape: they are logged and reported through the returned
        outcome's state and status line, and no record is written.
        """
        outcome = DownloadOutcome(catalog_id=catalog_id)

        if not self._catalog:
            try:
                await self.load_catalog(render=False)
            except FilmCliError as e:
                log.error(f"[red]Could not load catalog: {e}[/red]")
                return self._fail(outcome, e)

        item = self._catalog.get(catalog_id)
        if item is None:
            error = NotFoundError(f"Film {catalog_id} is not in the catalog.")
            log.error(f"[red]{error}[/red]")
            return self._fail(outcome, error)

        log.info(f"Starting download: [cyan]{item.title}[/cyan]")
        outcome.state = DownloadState.PREPARING
        task_id = self.progress_manager.start_download(item)

        def on_progress(update: DownloadProgress) -> None:
            outcome.state = DownloadState.DOWNLOADING
            self.progress_manager.update_download(task_id, item.id, update)

        try:
            payload = await self.downloader.download(item.url, on_progress=on_progress)
            film = StoredFilm.from_download(item, payload)
            outcome.film_id = await self.store.put(film)
        except ConstraintError as e:
            log.warning(f"[yellow]'{item.title}' is already saved: {e}[/yellow]")
            self._fail(outcome, e, duplicate=True)
        except FilmCliError as e:
            log.error(f"[red]Download of '{item.title}' failed: {e}[/red]")
            self._fail(outcome, e)
        else:
            outcome.state = DownloadState.SAVED
            outcome.status = COMPLETE_STATUS
            self.stats.record_success(len(payload))
            log.debug(f"Film saved to database as #{outcome.film_id}.")

        self.progress_manager.finish_download(
            task_id, item.id, outcome.status, outcome.ok
        )
        if outcome.ok:
            await self.refresh_saved()
        return outcome

    async def download_items(self, catalog_ids: Iterable[int]) -> list[DownloadOutcome]:
        """Downloads several catalog items one after another."""
        return [await self.download_item(catalog_id) for catalog_id in catalog_ids]

    async def _write_payload(self, film: StoredFilm, destination: Path) -> Path:
        create_dir(destination.parent)
        async with aiofiles.open(destination, "wb") as f:
            await f.write(film.blob)
        return destination

    async def play(self, film_id: int) -> bool:
        """
        Opens a saved film with the system's default player.

        Returns False without raising when the film does not exist.
        """
        film = await self.store.get_by_id(film_id)
        if film is None:
            log.debug(f"Film #{film_id} not found; nothing to play.")
            return False

        path = self.playback_dir / film_file_name(film_id, film.title, film.url)
        if not path.is_file() or path.stat().st_size != len(film.blob):
            await self._write_payload(film, path)
        log.info(f"Playing [cyan]{film.title}[/cyan]")
        self.launcher(str(path))
        return True

    async def export(self, film_id: int, destination: Path) -> Path:
        """
        Writes a saved film to ``destination``. A directory destination gets a
        file named after the film.

        Raises:
            NotFoundError: If there is no film with that id.
        """
        film = await self.store.get_by_id(film_id)
        if film is None:
            raise NotFoundError(f"No saved film with id {film_id}.")

        if destination.is_dir():
            destination = destination / film_file_name(film_id, film.title, film.url)
        await self._write_payload(film, destination)
        log.info(f"Exported [cyan]{film.title}[/cyan] to [dim]{destination}[/dim]")
        return destination

    async def delete(self, film_id: int) -> list[FilmSummary]:
        """Deletes a saved film (if present) and redraws the saved list."""
        await self.store.delete(film_id)
        for cached in self.playback_dir.glob(f"{film_id:04d} - *"):
            cached.unlink(missing_ok=True)
        return await self.refresh_saved()
