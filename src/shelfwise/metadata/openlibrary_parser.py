# ABOUTME: Parsing functions for Open Library API JSON responses.
# ABOUTME: Converts the books-data, edition and search shapes into RawCatalogRecord instances.

from typing import Any

from shelfwise.metadata.types import SECONDARY_SOURCE, RawCatalogRecord

_COVERS_BASE_URL = "https://covers.openlibrary.org/b"


def _names(entries: list[Any]) -> list[str]:
    """Open Library lists are either plain strings or {"name": ...} dicts."""
    names: list[str] = []
    for entry in entries:
        if isinstance(entry, dict):
            entry = entry.get("name")
        if isinstance(entry, str) and entry.strip():
            names.append(entry)
    return names


def _page_count(value: Any) -> int | None:
    if isinstance(value, int) and value > 0:
        return value
    return None


def parse_books_data_response(data: dict[str, Any], isbn: str) -> RawCatalogRecord | None:
    """Parse an api/books?jscmd=data response for one ISBN bibkey.

    Returns None when the ISBN is absent from the response, which is how Open
    Library reports "not found" on this endpoint.
    """
    book = data.get(f"ISBN:{isbn}")
    if not book:
        return None

    publishers = _names(book.get("publishers") or [])
    cover = book.get("cover") or {}
    identifiers = book.get("identifiers") or {}
    isbns = (identifiers.get("isbn_13") or []) + (identifiers.get("isbn_10") or [])

    return RawCatalogRecord(
        source=SECONDARY_SOURCE,
        title=book.get("title") or "",
        authors=_names(book.get("authors") or []),
        isbn=isbns[0] if isbns else isbn,
        cover_url=cover.get("medium") or "",
        publisher=publishers[0] if publishers else "",
        published_date=book.get("publish_date") or "",
        page_count=_page_count(book.get("number_of_pages")),
        categories=_names(book.get("subjects") or []),
    )


def apply_edition_response(record: RawCatalogRecord, edition: dict[str, Any]) -> RawCatalogRecord:
    """Fill format, page count and series from the isbn/<isbn>.json edition endpoint.

    MUTATES record in place: only fields still empty are filled.
    """
    physical_format = edition.get("physical_format")
    if not record.physical_format and isinstance(physical_format, str):
        record.physical_format = physical_format
    if not record.page_count:
        record.page_count = _page_count(edition.get("number_of_pages"))
    series = edition.get("series")
    if isinstance(series, str):
        series = [series]
    if not record.series and isinstance(series, list):
        record.series = [s for s in series if isinstance(s, str)]
    return record


def build_cover_url(cover_id: int, size: str = "M") -> str:
    """Build an Open Library cover URL for a cover id.

    Args:
        cover_id: The numeric cover id (``cover_i`` in search docs).
        size: Image size: "S" (small), "M" (medium), or "L" (large).
    """
    return f"{_COVERS_BASE_URL}/id/{cover_id}-{size}.jpg"


def parse_search_results(data: dict[str, Any]) -> list[RawCatalogRecord]:
    """Parse an Open Library search.json response into raw records."""
    results: list[RawCatalogRecord] = []
    for doc in data.get("docs") or []:
        isbns = doc.get("isbn") or []
        publishers = doc.get("publisher") or []
        cover_id = doc.get("cover_i")
        year = doc.get("first_publish_year")

        results.append(
            RawCatalogRecord(
                source=SECONDARY_SOURCE,
                title=doc.get("title") or "",
                authors=[a for a in doc.get("author_name") or [] if a],
                isbn=isbns[0] if isbns else "",
                cover_url=build_cover_url(cover_id) if cover_id else "",
                publisher=publishers[0] if publishers else "",
                published_date=str(year) if year else "",
                page_count=_page_count(doc.get("number_of_pages_median")),
                categories=[s for s in doc.get("subject") or [] if s],
            )
        )
    return results
