# ABOUTME: The `shelfwise fix` command for backfilling missing book data from the catalogs.
# ABOUTME: Runs batch remediation over the library export with a Rich progress bar.

from pathlib import Path

import click
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from shelfwise.cli.options import api_key_option, create_resolver, library_option
from shelfwise.library.health import is_fixable
from shelfwise.library.records import LibraryRecord
from shelfwise.library.remediation import fix_books_from_api
from shelfwise.library.store import DEFAULT_LIBRARY_PATH, JsonLibrary, LibraryFileError


def _make_progress(console: Console) -> Progress:
    """Create a Rich progress bar for batch processing."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=console,
    )


@click.command("fix")
@library_option
@api_key_option
@click.option(
    "--delay",
    type=click.FloatRange(min=0.0),
    default=0.5,
    help="Seconds to wait between catalog lookups (default 0.5).",
)
@click.option(
    "--all",
    "include_all",
    is_flag=True,
    default=False,
    help="Try every book, not only those with fixable gaps.",
)
def fix(library_path: Path | None, api_key: str | None, delay: float, include_all: bool) -> None:
    """Fill empty fields of library books from Google Books and Open Library."""
    console = Console()
    library = JsonLibrary(library_path or DEFAULT_LIBRARY_PATH)
    try:
        records = library.load()
    except LibraryFileError as exc:
        raise click.ClickException(str(exc)) from exc

    if not include_all:
        records = [r for r in records if is_fixable(r) or not r.isbn]
    if not records:
        console.print("[green]Nothing to fix.[/green]")
        return

    resolver = create_resolver(api_key)
    progress = _make_progress(console)
    task_id = progress.add_task("Fixing", total=len(records))

    def on_progress(current: int, total: int, record: LibraryRecord) -> None:
        progress.update(task_id, completed=current - 1, description=record.title or record.id)

    with progress:
        result = fix_books_from_api(
            records,
            resolver,
            library.update_record,
            on_progress=on_progress,
            delay=delay,
        )
        progress.update(task_id, completed=len(records), description="Done")

    if result.fields_fixed_count:
        table = Table(title="Fields filled")
        table.add_column("Field")
        table.add_column("Books", justify="right")
        for name, count in sorted(result.fields_fixed_count.items()):
            table.add_row(name, str(count))
        console.print(table)

    for record, error in result.errors:
        console.print(f"[red]✗[/red] {record.title or record.id}: {error}")

    console.print(
        f"\n[green]{len(result.fixed)} fixed[/green], "
        f"[yellow]{len(result.skipped)} skipped (no ISBN)[/yellow], "
        f"[red]{len(result.errors)} error(s)[/red]"
    )
