# ABOUTME: The `shelfwise lookup` command for resolving one ISBN against both catalogs.
# ABOUTME: Prints the merged draft with cover sources, genre suggestions and series.

import click
from rich.console import Console
from rich.table import Table

from shelfwise.cli.options import api_key_option, create_resolver
from shelfwise.metadata.resolver import LookupValidationError
from shelfwise.metadata.series import format_series_display


@click.command("lookup")
@click.argument("isbn")
@api_key_option
def lookup(isbn: str, api_key: str | None) -> None:
    """Look up an ISBN in Google Books and Open Library and merge the results."""
    console = Console()
    resolver = create_resolver(api_key)

    try:
        draft = resolver.lookup_isbn(isbn)
    except LookupValidationError as exc:
        raise click.BadParameter(str(exc), param_hint="ISBN") from exc

    if draft is None:
        console.print("[yellow]Book not found. Enter the details manually.[/yellow]")
        return

    table = Table(show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Title", draft.title or "[dim]-[/dim]")
    table.add_row("Author", draft.author or "[dim]-[/dim]")
    table.add_row("ISBN", draft.isbn)
    table.add_row("Publisher", draft.publisher or "[dim]-[/dim]")
    table.add_row("Published", draft.published_date or "[dim]-[/dim]")
    table.add_row("Format", draft.physical_format or "[dim]-[/dim]")
    table.add_row("Pages", str(draft.page_count) if draft.page_count else "[dim]-[/dim]")
    table.add_row("Cover", draft.cover_image_url or "[dim]-[/dim]")
    for source, url in draft.covers.items():
        table.add_row(f"  {source}", url)
    table.add_row("Genres", ", ".join(draft.genre_suggestions) or "[dim]-[/dim]")
    if draft.series_suggestion is not None:
        table.add_row(
            "Series",
            format_series_display(
                draft.series_suggestion.name, draft.series_suggestion.position
            ),
        )
    table.add_row("Source", draft.source)

    console.print(table)
