# ABOUTME: The `shelfwise health` command for reporting missing book data.
# ABOUTME: Shows the completeness score and a count of books missing each field.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfwise.cli.options import library_option
from shelfwise.library.health import HEALTH_FIELDS, analyze_library_health, completeness_rating
from shelfwise.library.store import DEFAULT_LIBRARY_PATH, JsonLibrary, LibraryFileError


@click.command("health")
@library_option
def health(library_path: Path | None) -> None:
    """Report how complete the library's book data is."""
    console = Console()
    try:
        records = JsonLibrary(library_path or DEFAULT_LIBRARY_PATH).load()
    except LibraryFileError as exc:
        raise click.ClickException(str(exc)) from exc

    report = analyze_library_health(records)
    label, colour = completeness_rating(report.completeness_score)

    table = Table()
    table.add_column("Field")
    table.add_column("Missing", justify="right")
    for name, config in HEALTH_FIELDS.items():
        count = len(report.issues[name])
        table.add_row(config.label, f"[red]{count}[/red]" if count else "0")

    console.print(table)
    console.print(
        f"\n[{colour}]{report.completeness_score}% complete ({label})[/{colour}]"
        f" across {report.total_books} book(s)"
    )
    if report.fixable_books:
        console.print(
            f"[dim]{report.fixable_books} book(s) can be fixed with `shelfwise fix`.[/dim]"
        )
