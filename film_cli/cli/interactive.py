"""
The interactive `browse` session: shows the catalog and the saved films, then
reads actions such as ``download 2`` or ``play 5`` until the user quits.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from rich.console import Console
from rich.markup import escape

from film_cli.core.film_manager import FilmManager
from film_cli.exceptions import FilmCliError

log = logging.getLogger(__name__)

ActionHandler = Callable[[int], Awaitable[object]]

HELP_TEXT = (
    "[bold]Actions:[/bold] [magenta]download <id>[/magenta] · "
    "[magenta]play <id>[/magenta] · [magenta]delete <id>[/magenta] · "
    "[magenta]catalog[/magenta] · [magenta]saved[/magenta] · "
    "[magenta]help[/magenta] · [magenta]quit[/magenta]"
)


class BrowseSession:
    """Maps typed actions onto FilmManager handlers."""

    QUIT_WORDS = frozenset({"q", "quit", "exit"})

    def __init__(self, manager: FilmManager, console: Console):
        self.manager = manager
        self.console = console
        self.item_actions: dict[str, ActionHandler] = {
            "download": self._download,
            "d": self._download,
            "play": self._play,
            "p": self._play,
            "delete": self._delete,
            "rm": self._delete,
        }
        self.plain_actions: dict[str, Callable[[], Awaitable[object]]] = {
            "catalog": self._show_catalog,
            "saved": self.manager.refresh_saved,
            "help": self._show_help,
        }

    async def _download(self, catalog_id: int):
        outcome = await self.manager.download_item(catalog_id)
        style = "green" if outcome.ok else "red"
        self.console.print(
            f"[{style}]#{catalog_id}: {escape(outcome.status)}[/{style}]"
        )
        return outcome

    async def _play(self, film_id: int):
        if not await self.manager.play(film_id):
            self.console.print(f"[dim]No saved film with id {film_id}.[/dim]")

    async def _delete(self, film_id: int):
        return await self.manager.delete(film_id)

    async def _show_catalog(self):
        return self.manager.catalog_renderer.render(self.manager.catalog)

    async def _show_help(self):
        self.console.print(HELP_TEXT)

    async def dispatch(self, line: str) -> bool:
        """
        Runs one typed action. Returns False when the session should end.
        """
        words = line.strip().split()
        if not words:
            return True
        verb = words[0].lower()

        if verb in self.QUIT_WORDS:
            return False

        try:
            if verb in self.plain_actions and len(words) == 1:
                await self.plain_actions[verb]()
            elif verb in self.item_actions and len(words) == 2:
                try:
                    target = int(words[1])
                except ValueError:
                    self.console.print(
                        f"[red]'{escape(words[1])}' is not a numeric id.[/red]"
                    )
                    return True
                await self.item_actions[verb](target)
            else:
                self.console.print(
                    "[yellow]Unknown action.[/yellow] Type [magenta]help[/magenta]."
                )
        except FilmCliError as e:
            log.error(f"[red]{e}[/red]")
        return True

    async def run(self) -> None:
        """Draws both lists and processes actions until the user quits."""
        try:
            await self.manager.load_catalog()
        except FilmCliError as e:
            log.error(f"[red]Error loading films: {e}[/red]")
        await self.manager.refresh_saved()
        self.console.print(HELP_TEXT)

        while True:
            try:
                line = await asyncio.to_thread(self.console.input, "[bold cyan]> [/]")
            except EOFError:
                break
            if not await self.dispatch(line):
                break
