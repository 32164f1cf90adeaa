# ABOUTME: CatalogSource protocol defining the contract for external bibliographic catalogs.
# ABOUTME: Google Books and Open Library both implement it; the resolver depends only on this.

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from shelfwise.metadata.types import RawCatalogRecord


@dataclass
class CatalogSearchResult:
    """One page of raw search hits plus the catalog's reported total."""

    records: list[RawCatalogRecord] = field(default_factory=list)
    total_items: int = 0


@runtime_checkable
class CatalogSource(Protocol):
    """Protocol for catalog lookup services.

    Implementations raise MetadataFetchError when the catalog cannot be
    reached or answers with something unusable, and return None / an empty
    result when the catalog simply has no match.
    """

    @property
    def name(self) -> str: ...

    def lookup_isbn(self, isbn: str) -> RawCatalogRecord | None: ...

    def search(self, query: str, start_index: int, page_size: int) -> CatalogSearchResult: ...
