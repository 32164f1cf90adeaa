# ABOUTME: The `shelfwise genres` and `shelfwise series` commands for offline parsing.
# ABOUTME: Runs catalog-style category and series strings through the canonicalizers.

import click
from rich.console import Console

from shelfwise.metadata.genres import parse_hierarchical_genres
from shelfwise.metadata.series import format_series_display, parse_series_string


@click.command("genres")
@click.argument("categories", nargs=-1, required=True)
def genres(categories: tuple[str, ...]) -> None:
    """Split category strings into canonical genres, one per line."""
    console = Console()
    for genre in sorted(parse_hierarchical_genres(categories)):
        console.print(genre)


@click.command("series")
@click.argument("text")
def series(text: str) -> None:
    """Parse a series string such as "Discworld, Book One"."""
    console = Console()
    parsed = parse_series_string(text)
    if not parsed.name:
        console.print("[yellow]No series name found.[/yellow]")
        return
    position = "-" if parsed.position is None else str(parsed.position)
    console.print(f"[bold]Name:[/bold] {parsed.name}")
    console.print(f"[bold]Position:[/bold] {position}")
    console.print(f"[bold]Display:[/bold] {format_series_display(parsed.name, parsed.position)}")
