# ABOUTME: Multi-source metadata resolution: queries both catalogs and merges by fixed priority.
# ABOUTME: Also runs paginated search against the primary catalog with secondary fallback.

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from shelfwise.metadata.genres import parse_hierarchical_genres
from shelfwise.metadata.http import MetadataFetchError
from shelfwise.metadata.isbn import clean_isbn, is_isbn
from shelfwise.metadata.provider import CatalogSearchResult, CatalogSource
from shelfwise.metadata.series import parse_series_from_api
from shelfwise.metadata.text import (
    normalize_author,
    normalize_genre_name,
    normalize_physical_format,
    normalize_published_date,
    normalize_publisher,
    normalize_title,
)
from shelfwise.metadata.types import (
    GenreSuggestions,
    LookupSession,
    MergedBookDraft,
    RawCatalogRecord,
)

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
DEFAULT_PAGE_SIZE = 10


class LookupValidationError(ValueError):
    """Raised for input rejected before any catalog is contacted."""


@dataclass
class SearchHit:
    """A normalized search result row."""

    title: str
    author: str
    isbn: str = ""
    cover: str = ""
    publisher: str = ""
    published_date: str = ""
    page_count: int | None = None
    categories: list[str] = field(default_factory=list)
    source: str = ""


@dataclass
class SearchPage:
    """One page of search results and the cursor for the next one.

    Callers continue with search_books(query, next_index, use_secondary=...)
    so later pages come from the catalog that answered the first.
    """

    books: list[SearchHit] = field(default_factory=list)
    has_more: bool = False
    total_items: int = 0
    next_index: int = 0
    use_secondary: bool = False


def _normalized_fields(record: RawCatalogRecord) -> dict[str, object]:
    return {
        "title": normalize_title(record.title),
        "author": normalize_author(", ".join(record.authors)),
        "publisher": normalize_publisher(record.publisher),
        "published_date": normalize_published_date(record.published_date),
        "physical_format": normalize_physical_format(record.physical_format),
        "page_count": record.page_count,
    }


def _genres_for(record: RawCatalogRecord) -> list[str]:
    # Sorted so a record always contributes its genres in the same order.
    return sorted(parse_hierarchical_genres(record.categories))


def merge_records(
    isbn: str, records: Sequence[RawCatalogRecord | None]
) -> MergedBookDraft | None:
    """Reduce per-source records into one draft, highest priority first.

    `records` must already be in priority order. A field set by an earlier
    record is never replaced by a later one; later records only fill gaps.
    Returns None when no record has anything usable.
    """
    usable = [r for r in records if r is not None and not r.is_empty]
    if not usable:
        return None

    draft = MergedBookDraft(isbn=isbn, source=usable[0].source)
    seen_genres: set[str] = set()

    for record in usable:
        for name, value in _normalized_fields(record).items():
            if value and not getattr(draft, name):
                setattr(draft, name, value)

        if record.cover_url and not draft.covers.get(record.source):
            draft.covers[record.source] = record.cover_url

        for genre in _genres_for(record):
            key = normalize_genre_name(genre)
            if key not in seen_genres:
                seen_genres.add(key)
                draft.genres.append(genre)

        if draft.series_suggestion is None:
            draft.series_suggestion = parse_series_from_api(record.series)

    return draft


class MetadataResolver:
    """Resolves ISBNs and queries against a primary and a secondary catalog.

    Lookups query both catalogs and merge them through merge_records(), so
    the outcome never depends on which request finishes first. With
    concurrent=True the two requests run in parallel threads.
    """

    def __init__(
        self,
        primary: CatalogSource,
        secondary: CatalogSource,
        *,
        concurrent: bool = False,
    ) -> None:
        self._primary = primary
        self._secondary = secondary
        self._concurrent = concurrent

    @property
    def sources(self) -> tuple[CatalogSource, CatalogSource]:
        return self._primary, self._secondary

    def lookup_isbn(
        self, isbn: str, session: LookupSession | None = None
    ) -> MergedBookDraft | None:
        """Look up one ISBN in both catalogs and merge the results.

        Args:
            isbn: ISBN in any common notation; cleaned before use.
            session: Optional editing session whose genre suggestions grow
                with this lookup and whose series suggestion it replaces.

        Returns:
            The merged draft, or None when neither catalog knows the ISBN.

        Raises:
            LookupValidationError: If the ISBN is empty or malformed.
        """
        cleaned = clean_isbn(isbn)
        if not cleaned:
            raise LookupValidationError("Please enter an ISBN")
        if not is_isbn(cleaned):
            raise LookupValidationError(f"Invalid ISBN: {isbn!r} (expected 10 or 13 digits)")

        records = self._fetch_all(cleaned)
        draft = merge_records(cleaned, records)
        if draft is None:
            logger.info("No catalog data for ISBN %s", cleaned)
            return None

        if session is not None:
            session.genre_suggestions.add_all(draft.genres)
            session.series_suggestion = draft.series_suggestion
            draft.genre_suggestions = session.genre_suggestions
        else:
            draft.genre_suggestions = GenreSuggestions(draft.genres)
        return draft

    def _fetch_all(self, isbn: str) -> tuple[RawCatalogRecord | None, RawCatalogRecord | None]:
        """Fetch from both catalogs, returning results in priority order."""
        if self._concurrent:
            with ThreadPoolExecutor(max_workers=2) as pool:
                primary = pool.submit(self._fetch, self._primary, isbn)
                secondary = pool.submit(self._fetch, self._secondary, isbn)
                return primary.result(), secondary.result()
        return self._fetch(self._primary, isbn), self._fetch(self._secondary, isbn)

    @staticmethod
    def _fetch(source: CatalogSource, isbn: str) -> RawCatalogRecord | None:
        """Query one catalog; a failure means "this catalog returned nothing"."""
        try:
            return source.lookup_isbn(isbn)
        except MetadataFetchError as exc:
            logger.warning("%s lookup failed for %s: %s", source.name, isbn, exc)
            return None

    def search_books(
        self,
        query: str,
        start_index: int = 0,
        page_size: int = DEFAULT_PAGE_SIZE,
        *,
        use_secondary: bool = False,
    ) -> SearchPage:
        """Search by title/author, primary catalog first.

        Falls back to the secondary catalog for the same page when the primary
        fails or has no results. This is a plain fallback, not a merge.

        Raises:
            LookupValidationError: If the query is shorter than MIN_QUERY_LENGTH.
        """
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            raise LookupValidationError(
                f"Search query must be at least {MIN_QUERY_LENGTH} characters"
            )

        result: CatalogSearchResult | None = None
        source = self._primary
        if not use_secondary:
            result = self._search(self._primary, query, start_index, page_size)
            if result is None or not result.records:
                use_secondary = True

        if use_secondary:
            source = self._secondary
            result = self._search(self._secondary, query, start_index, page_size)

        if result is None:
            return SearchPage(next_index=start_index, use_secondary=use_secondary)

        books = [_to_hit(record, source.name) for record in result.records]
        next_index = start_index + len(books)
        return SearchPage(
            books=books,
            has_more=bool(books) and next_index < result.total_items,
            total_items=result.total_items,
            next_index=next_index,
            use_secondary=use_secondary,
        )

    @staticmethod
    def _search(
        source: CatalogSource, query: str, start_index: int, page_size: int
    ) -> CatalogSearchResult | None:
        try:
            return source.search(query, start_index, page_size)
        except MetadataFetchError as exc:
            logger.warning("%s search failed for %r: %s", source.name, query, exc)
            return None


def _to_hit(record: RawCatalogRecord, source: str) -> SearchHit:
    return SearchHit(
        title=normalize_title(record.title) or "Unknown Title",
        author=normalize_author(", ".join(record.authors)) or "Unknown Author",
        isbn=record.isbn,
        cover=record.cover_url,
        publisher=normalize_publisher(record.publisher),
        published_date=normalize_published_date(record.published_date),
        page_count=record.page_count,
        categories=_genres_for(record),
        source=source,
    )
