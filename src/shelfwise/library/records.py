# ABOUTME: LibraryRecord, the shape of a stored book as the core reads it.
# ABOUTME: Converts to and from the camelCase dicts used by library exports.

from dataclasses import dataclass, field
from typing import Any

# Record attribute -> key in a library export.
_EXPORT_KEYS = {
    "id": "id",
    "isbn": "isbn",
    "title": "title",
    "author": "author",
    "cover_image_url": "coverImageUrl",
    "genres": "genres",
    "page_count": "pageCount",
    "physical_format": "physicalFormat",
    "publisher": "publisher",
    "published_date": "publishedDate",
    "covers": "covers",
}


@dataclass
class LibraryRecord:
    """A stored book. Owned by the persistence layer; read-only to the core.

    Duplicate detection needs only id, isbn, title and author; the remaining
    fields are the ones batch remediation may fill.
    """

    id: str
    isbn: str = ""
    title: str = ""
    author: str = ""
    cover_image_url: str = ""
    genres: list[str] = field(default_factory=list)
    page_count: int | None = None
    physical_format: str = ""
    publisher: str = ""
    published_date: str = ""
    covers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LibraryRecord":
        """Build a record from an export dict, ignoring unknown keys."""
        kwargs: dict[str, Any] = {}
        for attr, key in _EXPORT_KEYS.items():
            value = data.get(key)
            if value is not None:
                kwargs[attr] = value
        kwargs["id"] = str(data.get("id", ""))
        if "isbn" in kwargs:
            kwargs["isbn"] = str(kwargs["isbn"])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in _EXPORT_KEYS.items()}


def export_key(attr: str) -> str:
    """The export key for a record attribute name."""
    return _EXPORT_KEYS[attr]
