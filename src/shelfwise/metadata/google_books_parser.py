# ABOUTME: Parsing functions for Google Books API JSON responses.
# ABOUTME: Converts volumeInfo structures into RawCatalogRecord instances.

from typing import Any

from shelfwise.metadata.types import PRIMARY_SOURCE, RawCatalogRecord


def _secure_url(url: str | None) -> str:
    """Google hands out http:// thumbnails; browsers block them as mixed content."""
    if not url:
        return ""
    return url.replace("http:", "https:", 1) if url.startswith("http:") else url


def _page_count(value: Any) -> int | None:
    if isinstance(value, int) and value > 0:
        return value
    return None


def _pick_isbn(identifiers: list[dict[str, Any]]) -> str:
    """Prefer ISBN-13, then ISBN-10, then whatever identifier comes first."""
    by_type = {entry.get("type"): entry.get("identifier", "") for entry in identifiers}
    for kind in ("ISBN_13", "ISBN_10"):
        if by_type.get(kind):
            return by_type[kind]
    return identifiers[0].get("identifier", "") if identifiers else ""


def parse_volume(item: dict[str, Any]) -> RawCatalogRecord:
    """Parse one entry of a volumes response into a RawCatalogRecord."""
    info = item.get("volumeInfo") or {}
    image_links = info.get("imageLinks") or {}

    return RawCatalogRecord(
        source=PRIMARY_SOURCE,
        title=info.get("title") or "",
        authors=[a for a in info.get("authors") or [] if a],
        isbn=_pick_isbn(info.get("industryIdentifiers") or []),
        cover_url=_secure_url(image_links.get("thumbnail")),
        publisher=info.get("publisher") or "",
        published_date=info.get("publishedDate") or "",
        page_count=_page_count(info.get("pageCount")),
        categories=[c for c in info.get("categories") or [] if c],
    )


def parse_volumes_response(data: dict[str, Any]) -> list[RawCatalogRecord]:
    """Parse a volumes search response into a list of records."""
    return [parse_volume(item) for item in data.get("items") or []]
