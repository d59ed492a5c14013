"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from film_cli.models.stats import DownloadStats
from film_cli.utils.formatting import format_bytes, format_duration


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "NetworkError": [
            "• Check your internet connection.",
            "• The file server may be down or the film may have moved.",
            "• Refresh the catalog with `film-cli catalog`.",
        ],
        "ConstraintError": [
            "• This film is already saved. See `film-cli saved`.",
            "• Delete the saved copy first to download it again.",
        ],
        "StorageError": [
            "• Make sure the config directory is writable and the disk is not full.",
            "• Run `film-cli vacuum` to rebuild the database file.",
        ],
        "CatalogError": [
            "• The catalog must be a JSON list of {id, title, url} objects.",
            "• Check the `catalog_url` / `catalog_file` setting with --show-config.",
        ],
        "NotFoundError": [
            "• List the available ids with `film-cli catalog` or `film-cli saved`.",
        ],
        "ConfigurationError": [
            "• Review your configuration file with `film-cli --show-config`.",
            "• Run `film-cli init --force` to write a fresh one.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration."""
    console = Console()
    content = "\n".join(
        f"{key} = {escape(str(value))}" for key, value in sorted(config_data.items())
    )
    console.print(
        Panel(
            content or "[dim](defaults)[/dim]",
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_stats_table(stats_data: dict[str, Any]):
    """Displays film database statistics."""
    console = Console()
    console.print(
        "\n[bold]Films in Database:[/] "
        f"[green]{stats_data['total_films']}[/green] "
        f"([cyan]{format_bytes(stats_data['total_bytes'])}[/cyan])\n"
    )

    if largest := stats_data.get("largest_films"):
        table = Table(title="Largest Films")
        table.add_column("Rank", style="dim")
        table.add_column("Title", style="cyan")
        table.add_column("Size", justify="right", style="green")
        for i, (title, size) in enumerate(largest, 1):
            table.add_row(str(i), escape(title), format_bytes(size))
        console.print(table)
    else:
        console.print("[dim]No films saved yet.[/dim]")


def print_summary_panel(stats: DownloadStats):
    """Displays the final summary of a download command."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=16)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row(
        "✓ Downloaded:", f"[bold green]{stats.films_downloaded}[/bold green]"
    )
    if stats.films_duplicate > 0:
        stats_table.add_row(
            "○ Already saved:", f"[yellow]{stats.films_duplicate}[/yellow]"
        )
    if stats.films_failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{stats.films_failed}[/bold red]")

    stats_table.add_row("", "")
    stats_table.add_row(
        "Total Size:", f"[cyan]{format_bytes(stats.total_size_downloaded)}[/cyan]"
    )
    stats_table.add_row(
        "Avg. Speed:",
        f"[magenta]{format_bytes(int(stats.average_speed_bps))}/s[/magenta]",
    )
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(stats.elapsed)}[/blue]"
    )

    for catalog_id, message in stats.failures.items():
        stats_table.add_row(f"#{catalog_id}:", f"[red]{escape(message)}[/red]")

    clean = stats.films_failed == 0 and stats.films_duplicate == 0
    console.print()
    console.print(
        Panel(
            stats_table,
            title="🎬 [bold]Downloads Finished[/bold]",
            border_style="green" if clean else "yellow",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
