# ABOUTME: Shared Click options and factories for Shelfwise CLI commands.
# ABOUTME: Provides reusable decorators for --library and --api-key, and the default resolver.

from pathlib import Path

import click

from shelfwise.library.store import DEFAULT_LIBRARY_PATH
from shelfwise.metadata.google_books import GoogleBooksSource
from shelfwise.metadata.http import ShelfwiseHttpClient
from shelfwise.metadata.openlibrary import OpenLibrarySource
from shelfwise.metadata.resolver import MetadataResolver

library_option = click.option(
    "--library",
    "library_path",
    type=click.Path(path_type=Path),
    default=None,
    help=f"Path to library export JSON (default: {DEFAULT_LIBRARY_PATH})",
)

api_key_option = click.option(
    "--api-key",
    envvar="SHELFWISE_GOOGLE_BOOKS_KEY",
    default=None,
    help="Google Books API key (env: SHELFWISE_GOOGLE_BOOKS_KEY).",
)


def create_resolver(api_key: str | None = None) -> MetadataResolver:
    """Create the default resolver: Google Books primary, Open Library secondary."""
    http_client = ShelfwiseHttpClient()
    return MetadataResolver(
        primary=GoogleBooksSource(http_client, api_key=api_key),
        secondary=OpenLibrarySource(http_client),
    )
