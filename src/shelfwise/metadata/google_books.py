# ABOUTME: Google Books catalog source, the primary catalog for lookups and search.
# ABOUTME: Queries the volumes endpoint by ISBN or free text and returns raw records.

import logging

from shelfwise.metadata.google_books_parser import parse_volumes_response
from shelfwise.metadata.http import HttpClient, MetadataFetchError
from shelfwise.metadata.provider import CatalogSearchResult
from shelfwise.metadata.types import PRIMARY_SOURCE, RawCatalogRecord

logger = logging.getLogger(__name__)

_GB_VOLUMES_URL = "https://www.googleapis.com/books/v1/volumes"


class GoogleBooksSource:
    """Catalog source backed by the Google Books volumes API.

    Uses a dependency-injected HttpClient for testability. An API key is
    optional; without one Google applies a shared anonymous quota.
    """

    def __init__(self, http_client: HttpClient, api_key: str | None = None) -> None:
        self._http = http_client
        self._api_key = api_key

    @property
    def name(self) -> str:
        return PRIMARY_SOURCE

    def _params(self, **params: str) -> dict[str, str]:
        if self._api_key:
            params["key"] = self._api_key
        return params

    def lookup_isbn(self, isbn: str) -> RawCatalogRecord | None:
        """Look up one ISBN. Returns None when Google has no volume for it."""
        data = self._http.get(_GB_VOLUMES_URL, params=self._params(q=f"isbn:{isbn}"))
        try:
            records = parse_volumes_response(data)
        except (AttributeError, TypeError) as exc:
            raise MetadataFetchError(f"Malformed Google Books response for {isbn}") from exc
        if not records:
            logger.debug("Google Books has no volume for ISBN %s", isbn)
            return None
        return records[0]

    def search(self, query: str, start_index: int, page_size: int) -> CatalogSearchResult:
        """Full-text search, one page at a time."""
        data = self._http.get(
            _GB_VOLUMES_URL,
            params=self._params(
                q=query, startIndex=str(start_index), maxResults=str(page_size)
            ),
        )
        try:
            records = parse_volumes_response(data)
            total = int(data.get("totalItems") or 0)
        except (AttributeError, TypeError, ValueError) as exc:
            raise MetadataFetchError(f"Malformed Google Books search response: {query}") from exc
        return CatalogSearchResult(records=records, total_items=total)
