# ABOUTME: Open Library catalog source, the secondary community catalog.
# ABOUTME: Looks up ISBNs via the books-data and edition endpoints and searches search.json.

import logging

from shelfwise.metadata.http import HttpClient, MetadataFetchError
from shelfwise.metadata.openlibrary_parser import (
    apply_edition_response,
    parse_books_data_response,
    parse_search_results,
)
from shelfwise.metadata.provider import CatalogSearchResult
from shelfwise.metadata.types import SECONDARY_SOURCE, RawCatalogRecord

logger = logging.getLogger(__name__)

_OL_BASE = "https://openlibrary.org"


class OpenLibrarySource:
    """Catalog source backed by the Open Library API.

    ISBN lookup makes two calls: the books-data endpoint for the bulk of the
    record, then the edition endpoint for fields only it carries (physical
    format, series). Uses a dependency-injected HttpClient for testability.
    """

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return SECONDARY_SOURCE

    def lookup_isbn(self, isbn: str) -> RawCatalogRecord | None:
        """Look up one ISBN. Returns None when Open Library does not know it."""
        data = self._http.get(
            f"{_OL_BASE}/api/books",
            params={"bibkeys": f"ISBN:{isbn}", "format": "json", "jscmd": "data"},
        )
        try:
            record = parse_books_data_response(data, isbn)
        except (AttributeError, TypeError) as exc:
            raise MetadataFetchError(f"Malformed Open Library response for {isbn}") from exc
        if record is None:
            logger.debug("Open Library has no record for ISBN %s", isbn)
            return None

        self._enrich_from_edition(record, isbn)
        return record

    def _enrich_from_edition(self, record: RawCatalogRecord, isbn: str) -> None:
        """Fetch format, page count and series from the edition endpoint.

        Many ISBNs have no edition record (404); that is expected and only
        means the extra fields stay empty.
        """
        if record.physical_format and record.page_count and record.series:
            return
        try:
            edition = self._http.get(f"{_OL_BASE}/isbn/{isbn}.json")
        except MetadataFetchError as exc:
            logger.debug("Edition lookup skipped for %s: %s", isbn, exc)
            return
        if not isinstance(edition, dict):
            return
        try:
            apply_edition_response(record, edition)
        except (AttributeError, TypeError) as exc:
            logger.warning("Ignoring malformed Open Library edition for %s: %s", isbn, exc)

    def search(self, query: str, start_index: int, page_size: int) -> CatalogSearchResult:
        """Full-text search using offset/limit paging."""
        data = self._http.get(
            f"{_OL_BASE}/search.json",
            params={"q": query, "offset": str(start_index), "limit": str(page_size)},
        )
        try:
            records = parse_search_results(data)
            total = int(data.get("numFound") or 0)
        except (AttributeError, TypeError, ValueError) as exc:
            raise MetadataFetchError(f"Malformed Open Library search response: {query}") from exc
        return CatalogSearchResult(records=records, total_items=total)
