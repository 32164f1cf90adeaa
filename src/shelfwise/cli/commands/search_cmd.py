# ABOUTME: The `shelfwise search` command for full-text catalog search.
# ABOUTME: Searches Google Books, falling back to Open Library, one page at a time.

import click
from rich.console import Console
from rich.table import Table

from shelfwise.cli.options import api_key_option, create_resolver
from shelfwise.metadata.resolver import DEFAULT_PAGE_SIZE, LookupValidationError


@click.command("search")
@click.argument("query")
@click.option(
    "--start", "start_index", type=click.IntRange(min=0), default=0, help="Result offset."
)
@click.option(
    "-n",
    "--page-size",
    type=click.IntRange(1, 40),
    default=DEFAULT_PAGE_SIZE,
    help=f"Results per page (default {DEFAULT_PAGE_SIZE}).",
)
@click.option(
    "--open-library",
    "use_secondary",
    is_flag=True,
    default=False,
    help="Search Open Library directly.",
)
@api_key_option
def search(
    query: str,
    start_index: int,
    page_size: int,
    use_secondary: bool,
    api_key: str | None,
) -> None:
    """Search the catalogs by title and/or author."""
    console = Console()
    resolver = create_resolver(api_key)

    try:
        page = resolver.search_books(
            query, start_index, page_size, use_secondary=use_secondary
        )
    except LookupValidationError as exc:
        raise click.BadParameter(str(exc), param_hint="QUERY") from exc

    if not page.books:
        console.print("[yellow]No books found.[/yellow]")
        return

    table = Table()
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Year", width=6)
    table.add_column("ISBN")

    for offset, book in enumerate(page.books, start=start_index + 1):
        table.add_row(
            str(offset),
            book.title,
            book.author,
            book.published_date or "?",
            book.isbn or "[dim]-[/dim]",
        )

    console.print(table)
    source = "Open Library" if page.use_secondary else "Google Books"
    console.print(f"\n[dim]{page.total_items} result(s) from {source}[/dim]")
    if page.has_more:
        flag = " --open-library" if page.use_secondary else ""
        console.print(
            f"[dim]More: shelfwise search {query!r} --start {page.next_index}{flag}[/dim]"
        )
