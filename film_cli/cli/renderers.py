"""
Renders the film catalog and the saved-films list to the console.

Each render draws the whole list again from the data it is given; nothing is
patched in place.
"""

from collections.abc import Sequence

from rich import box
from rich.console import Console, RenderableType
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from film_cli.models.film import CatalogItem, FilmSummary
from film_cli.utils.formatting import format_download_date

NO_SAVED_FILMS = "No films saved yet."


class CatalogRenderer:
    """Draws the films available for download."""

    def __init__(self, console: Console):
        self.console = console

    def build(self, items: Sequence[CatalogItem]) -> Table:
        table = Table(title="[bold]🎬 Available Films[/bold]", box=box.ROUNDED)
        table.add_column("ID", style="dim", justify="right")
        table.add_column("Title", style="cyan")
        table.add_column("Size", justify="right", style="green")
        table.add_column("Action", style="magenta")
        for item in items:
            table.add_row(
                str(item.id),
                escape(item.title),
                escape(item.size) or "?",
                f"download {item.id}",
            )
        return table

    def render(self, items: Sequence[CatalogItem]) -> Table:
        table = self.build(items)
        self.console.print(table)
        return table


class SavedFilmsRenderer:
    """Draws the films kept in the local store."""

    def __init__(self, console: Console):
        self.console = console

    def build(self, films: Sequence[FilmSummary]) -> RenderableType:
        if not films:
            return Text(NO_SAVED_FILMS, style="dim italic")

        table = Table(title="[bold]💾 Saved Films[/bold]", box=box.ROUNDED)
        table.add_column("ID", style="dim", justify="right")
        table.add_column("Title", style="cyan")
        table.add_column("Size", justify="right", style="green")
        table.add_column("Downloaded", style="yellow")
        table.add_column("Actions", style="magenta")
        for film in films:
            table.add_row(
                str(film.id),
                escape(film.title),
                film.size,
                format_download_date(film.download_date),
                f"play {film.id} | delete {film.id}",
            )
        return table

    def render(self, films: Sequence[FilmSummary]) -> RenderableType:
        renderable = self.build(films)
        self.console.print(renderable)
        return renderable
