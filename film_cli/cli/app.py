"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from film_cli import __version__
from film_cli.api.catalog import CatalogSource
from film_cli.core.film_manager import FilmManager
from film_cli.exceptions import FilmCliError
from film_cli.media.downloader import Downloader
from film_cli.models.config import AppConfig
from film_cli.storage.config_manager import ConfigManager
from film_cli.storage.film_store import FilmStore

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_stats_table,
    print_summary_panel,
)
from .interactive import BrowseSession
from .progress_manager import ProgressManager
from .renderers import CatalogRenderer, SavedFilmsRenderer

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("film_cli")

app = typer.Typer(
    name="film-cli",
    help=(
        "Browse a film catalog, download films with live progress and keep them"
        " for offline playback. Use 'film-cli <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "film-cli"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _load_config() -> AppConfig:
    try:
        return ConfigManager(CONFIG_FILE).load_config()
    except FilmCliError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e


def _open_store(config: AppConfig) -> FilmStore:
    return FilmStore(Path(config.config_path) / config.database_name)


@asynccontextmanager
async def _session(config: AppConfig, quiet: bool = False):
    """Builds a FilmManager with all of its collaborators for one command."""
    async with (
        Downloader(
            chunk_size=config.chunk_size, connect_timeout=config.connect_timeout
        ) as downloader,
        ProgressManager(console=console, quiet=quiet) as progress_manager,
    ):
        store = await _open_store(config).open()
        yield FilmManager(
            store=store,
            downloader=downloader,
            catalog_source=CatalogSource(config.catalog_url, config.catalog_file),
            progress_manager=progress_manager,
            catalog_renderer=CatalogRenderer(console),
            saved_renderer=SavedFilmsRenderer(console),
            playback_dir=Path(config.config_path) / "playback",
        )


def _run(coro) -> None:
    """Runs a command coroutine, reporting application errors as a panel."""
    try:
        asyncio.run(coro)
    except FilmCliError as e:
        console.print(format_error_with_suggestions(e))
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Film downloader CLI"""
    if version:
        console.print(f"[bold]film-cli[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "WARNING"
    if verbose >= 2:
        log_level = "DEBUG"
    elif verbose == 1:
        log_level = "INFO"
    logging.getLogger("film_cli").setLevel(log_level)

    if show_config:
        config = _load_config()
        print_config(
            CONFIG_FILE,
            config.model_dump(include=AppConfig.get_ini_keys()),
        )
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    catalog_url: str = typer.Option(
        "", "--catalog-url", help="HTTP(S) address of a JSON film catalog."
    ),
    catalog_file: str = typer.Option(
        "", "--catalog-file", help="Path to a local JSON film catalog."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration."
    ),
):
    """Write a configuration file."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    try:
        ConfigManager(CONFIG_FILE).save_new_config(
            {"catalog_url": catalog_url, "catalog_file": catalog_file}
        )
    except FilmCliError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
    console.print(
        f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]"
    )
    console.print("Ready! Try: [cyan]film-cli catalog[/cyan]")


@app.command()
def catalog():
    """List the films available for download."""
    config = _load_config()

    async def _catalog():
        items = await CatalogSource(config.catalog_url, config.catalog_file).fetch()
        CatalogRenderer(console).render(items)

    _run(_catalog())


@app.command(name="download")
def download_command(
    ids: list[int] = typer.Argument(  # noqa: B008
        ..., help="Catalog ids of the films to download, in order."
    ),
):
    """Download films from the catalog and save them locally."""
    config = _load_config()
    failed = False

    async def _download_async():
        nonlocal failed
        async with _session(config) as manager:
            await manager.load_catalog(render=False)
            outcomes = await manager.download_items(ids)
        failed = any(not outcome.ok for outcome in outcomes)
        print_summary_panel(manager.stats)

    _run(_download_async())
    if failed:
        raise typer.Exit(code=1)


@app.command()
def saved():
    """List the films saved in the local database."""
    config = _load_config()

    async def _saved():
        store = await _open_store(config).open()
        SavedFilmsRenderer(console).render(await store.list_summaries())

    _run(_saved())


@app.command()
def play(film_id: int = typer.Argument(..., help="Id of a saved film.")):
    """Open a saved film with the default video player."""
    config = _load_config()

    async def _play():
        async with _session(config, quiet=True) as manager:
            if not await manager.play(film_id):
                console.print(f"[yellow]No saved film with id {film_id}.[/yellow]")

    _run(_play())


@app.command()
def export(
    film_id: int = typer.Argument(..., help="Id of a saved film."),
    destination: Path = typer.Argument(  # noqa: B008
        ..., help="File or directory to write the film to."
    ),
):
    """Write a saved film to a file."""
    config = _load_config()

    async def _export():
        async with _session(config, quiet=True) as manager:
            path = await manager.export(film_id, destination)
        console.print(f"[green]✓ Written to '{path}'.[/green]")

    _run(_export())


@app.command()
def delete(
    film_id: int = typer.Argument(..., help="Id of a saved film."),
    force: bool = typer.Option(
        False, "--force", "-f", help="Bypass the confirmation prompt."
    ),
):
    """Delete a saved film from the local database."""
    if not force and not typer.confirm(f"Delete saved film {film_id}?"):
        console.print("[yellow]Operation cancelled.[/yellow]")
        raise typer.Abort()

    config = _load_config()

    async def _delete():
        async with _session(config, quiet=True) as manager:
            await manager.delete(film_id)

    _run(_delete())


@app.command()
def browse():
    """Interactively browse, download, play and delete films."""
    config = _load_config()

    async def _browse():
        async with _session(config) as manager:
            await BrowseSession(manager, console).run()

    _run(_browse())


@app.command()
def stats():
    """Show statistics from the film database."""
    config = _load_config()

    async def _get_stats():
        store = await _open_store(config).open()
        print_stats_table(await store.get_stats())

    _run(_get_stats())


@app.command()
def vacuum():
    """Optimize the film database file."""
    config = _load_config()

    async def _vacuum():
        console.print("[cyan]Optimizing film database...[/cyan]")
        store = await _open_store(config).open()
        await store.vacuum()
        console.print("[green]✓ Database optimized.[/green]")

    _run(_vacuum())
