# ABOUTME: Core data structures for catalog metadata flowing through the resolution pipeline.
# ABOUTME: RawCatalogRecord is per-source input; MergedBookDraft is the canonical merged output.

from dataclasses import dataclass, field

# Fixed source priority used wherever per-source values are scanned.
PRIMARY_SOURCE = "googleBooks"
SECONDARY_SOURCE = "openLibrary"
SOURCE_PRIORITY: tuple[str, ...] = (PRIMARY_SOURCE, SECONDARY_SOURCE)


@dataclass(frozen=True)
class SeriesParseResult:
    """A series name and optional position parsed from free text.

    Always fully formed: an unparseable or empty input yields name="" and
    position=None rather than raising.
    """

    name: str
    position: int | float | None = None


@dataclass
class RawCatalogRecord:
    """Values returned by one external catalog for one ISBN or search hit.

    Fields are copied from the catalog response with no normalization applied;
    the resolver is responsible for turning them into canonical values.
    """

    source: str
    title: str = ""
    authors: list[str] = field(default_factory=list)
    isbn: str = ""
    cover_url: str = ""
    publisher: str = ""
    published_date: str = ""
    physical_format: str = ""
    page_count: int | None = None
    categories: list[str] = field(default_factory=list)
    series: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Whether the record carries nothing a merge could use."""
        return not any(
            (
                self.title,
                self.authors,
                self.cover_url,
                self.publisher,
                self.published_date,
                self.physical_format,
                self.page_count,
                self.categories,
                self.series,
            )
        )


class GenreSuggestions:
    """Ordered, append-only set of genre suggestions for one editing session.

    Lookups only ever add; entries leave the set through discard() (the user
    accepted or rejected a suggestion) or clear() (a brand new search).
    Membership ignores case and whitespace differences.
    """

    def __init__(self, genres: list[str] | None = None) -> None:
        self._items: dict[str, str] = {}
        if genres:
            self.add_all(genres)

    @staticmethod
    def _key(genre: str) -> str:
        return " ".join(genre.lower().split())

    def add(self, genre: str) -> bool:
        """Add a genre unless an equivalent one is present. Returns True if added."""
        key = self._key(genre)
        if not key or key in self._items:
            return False
        self._items[key] = genre.strip()
        return True

    def add_all(self, genres) -> list[str]:
        """Add several genres, returning the ones that were new."""
        return [g for g in genres if self.add(g)]

    def discard(self, genre: str) -> None:
        self._items.pop(self._key(genre), None)

    def clear(self) -> None:
        self._items.clear()

    def as_list(self) -> list[str]:
        return list(self._items.values())

    def __contains__(self, genre: object) -> bool:
        return isinstance(genre, str) and self._key(genre) in self._items

    def __iter__(self):
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenreSuggestions):
            return NotImplemented
        return self.as_list() == other.as_list()

    def __repr__(self) -> str:
        return f"GenreSuggestions({self.as_list()!r})"


@dataclass
class LookupSession:
    """State owned by one editing flow across repeated lookups.

    Two sessions never share suggestions, so concurrent edits stay isolated.
    """

    genre_suggestions: GenreSuggestions = field(default_factory=GenreSuggestions)
    series_suggestion: SeriesParseResult | None = None


@dataclass
class MergedBookDraft:
    """Canonical candidate record assembled from one or more catalogs.

    This is the interchange format between the resolver and whatever seeds a
    stored record (forms, batch remediation). Only the resolver mutates it.
    """

    isbn: str
    title: str = ""
    author: str = ""
    publisher: str = ""
    published_date: str = ""
    physical_format: str = ""
    page_count: int | None = None
    covers: dict[str, str] = field(default_factory=dict)
    genres: list[str] = field(default_factory=list)
    genre_suggestions: GenreSuggestions = field(default_factory=GenreSuggestions)
    series_suggestion: SeriesParseResult | None = None
    source: str = ""

    @property
    def cover_image_url(self) -> str:
        """First non-empty cover, scanned in fixed source-priority order."""
        for source in SOURCE_PRIORITY:
            url = self.covers.get(source)
            if url:
                return url
        for url in self.covers.values():
            if url:
                return url
        return ""
