# ABOUTME: The `shelfwise duplicate` command for checking a book against the library.
# ABOUTME: Exits non-zero when the book already exists, by ISBN or by title and author.

from pathlib import Path

import click
from rich.console import Console

from shelfwise.cli.options import library_option
from shelfwise.library.duplicates import check_for_duplicate
from shelfwise.library.store import DEFAULT_LIBRARY_PATH, JsonLibrary, LibraryFileError
from shelfwise.metadata.isbn import clean_isbn


@click.command("duplicate")
@library_option
@click.option("--isbn", default="", help="ISBN of the book to add.")
@click.option("--title", default="", help="Title of the book to add.")
@click.option("--author", default="", help="Author of the book to add.")
def duplicate(library_path: Path | None, isbn: str, title: str, author: str) -> None:
    """Check whether a book is already in the library."""
    console = Console()
    try:
        records = JsonLibrary(library_path or DEFAULT_LIBRARY_PATH).load()
    except LibraryFileError as exc:
        raise click.ClickException(str(exc)) from exc

    result = check_for_duplicate(records, clean_isbn(isbn), title, author)
    if not result.is_duplicate or result.existing_book is None:
        console.print("[green]No duplicate found.[/green]")
        return

    book = result.existing_book
    how = "same ISBN" if result.match_type == "isbn" else "same title and author"
    console.print(
        f"[red]Already in library ({how}):[/red] {book.title} by {book.author or 'unknown'}"
        f" [dim](id {book.id})[/dim]"
    )
    raise SystemExit(1)
