# ABOUTME: Metadata package: catalog sources, text/genre/series normalization, and merging.
# ABOUTME: Exports the draft types and the resolver used throughout Shelfwise.

from shelfwise.metadata.provider import CatalogSource
from shelfwise.metadata.resolver import (
    LookupValidationError,
    MetadataResolver,
    SearchHit,
    SearchPage,
)
from shelfwise.metadata.types import (
    GenreSuggestions,
    LookupSession,
    MergedBookDraft,
    RawCatalogRecord,
    SeriesParseResult,
)

__all__ = [
    "CatalogSource",
    "GenreSuggestions",
    "LookupSession",
    "LookupValidationError",
    "MergedBookDraft",
    "MetadataResolver",
    "RawCatalogRecord",
    "SearchHit",
    "SearchPage",
    "SeriesParseResult",
]
