# ABOUTME: Genre canonicalization and parsing of hierarchical catalog category strings.
# ABOUTME: Maps spelling/abbreviation variants to one display form and drops non-genre noise.

import re
from collections.abc import Iterable
from types import MappingProxyType

# Lowercase variant -> canonical display form. An empty string means "drop".
# Only synonyms and abbreviations are mapped; subgenres are not folded into
# their parents, so "Space Opera" survives as "Space Opera".
GENRE_VARIATIONS = MappingProxyType(
    {
        # Top-level genres, so casing variants share one display form
        "fiction": "Fiction",
        "fantasy": "Fantasy",
        "mystery": "Mystery",
        "romance": "Romance",
        "horror": "Horror",
        "thriller": "Thriller",
        "thrillers": "Thriller",
        "biography": "Biography",
        "history": "History",
        "poetry": "Poetry",
        "classics": "Classics",
        # Abbreviations
        "sci-fi": "Science Fiction",
        "scifi": "Science Fiction",
        "sf": "Science Fiction",
        "science fiction": "Science Fiction",
        "ya": "Young Adult",
        "lit fic": "Literary Fiction",
        "lit-fic": "Literary Fiction",
        "rom-com": "Romantic Comedy",
        "romcom": "Romantic Comedy",
        # American spelling folds into British; "humour" itself is not listed
        "humor": "Humour",
        "humorous": "Humour",
        # Synonyms
        "nonfiction": "Non-Fiction",
        "non fiction": "Non-Fiction",
        "non-fiction": "Non-Fiction",
        "whodunit": "Mystery",
        "whodunnit": "Mystery",
        "literary": "Literary Fiction",
        "general fiction": "Fiction",
        # Compound "... fiction" forms
        "fantasy fiction": "Fantasy",
        "adventure fiction": "Adventure",
        "historical fiction": "Historical Fiction",
        "psychological fiction": "Psychological",
        "political fiction": "Political",
        "domestic fiction": "Domestic",
        "satirical literature": "Satire",
        "picaresque literature": "Picaresque",
        "romance fiction": "Romance",
        "crime fiction": "Crime",
        "detective fiction": "Detective",
        "legal stories": "Legal",
        "school stories": "School",
        "love stories": "Romance",
        "horror fiction": "Horror",
        "ghost fiction": "Ghost",
        "paranormal fiction": "Paranormal",
        "supernatural thrillers": "Supernatural",
        "horror & ghost stories": "Horror",
        "contemporary women": "Contemporary",
        "fiction classics": "Classics",
        "contemporary fiction": "Contemporary",
        "modern fiction": "Contemporary",
        "american fiction": "Fiction",
        "english fantasy literature": "Fantasy",
        "english science fiction": "Science Fiction",
        "bildungsromans": "Coming of Age",
        # Ampersand forms
        "science fiction & fantasy": "Science Fiction",
        "action & adventure": "Adventure",
        "fantasy & magic": "Fantasy",
        "fiction & literature": "Fiction",
        "body, mind & spirit": "Spirituality",
        # Children and young adult
        "juvenile": "Children",
        "juvenile fiction": "Children",
        "children's": "Children",
        "children's fiction": "Children",
        "children's stories": "Children",
        "teen": "Young Adult",
        "teens": "Young Adult",
        "teen fiction": "Young Adult",
        "adolescent": "Young Adult",
        "young adult fiction": "Young Adult",
        "ya fiction": "Young Adult",
        # Low-information terms
        "general": "",
        "accessible": "",
        "readable": "",
        # Catalog metadata that is not a genre
        "new york times bestseller": "",
        "new york times reviewed": "",
        "open library staff picks": "",
        "harry potter": "",
        "j.k rowling": "",
        "juvenile audience": "",
        "juvenile works": "",
        "juvenile literature": "",
        "english language": "",
        "english fiction": "",
        "english literature": "",
        "chinese fiction": "",
        "novela": "",
        "ficción": "",
        "roman": "",
        "romans": "",
    }
)

# Whole categories or segments matching these are catalog bookkeeping.
_NOISE_PATTERNS = (
    re.compile(r"^series:", re.IGNORECASE),
    re.compile(r"^nyt:", re.IGNORECASE),
    re.compile(r"^collectionid:", re.IGNORECASE),
    re.compile(r"^award:", re.IGNORECASE),
    re.compile(r"\baward\s+winner\b", re.IGNORECASE),
    re.compile(r"\baward\s*=", re.IGNORECASE),
    re.compile(r"^reading level", re.IGNORECASE),
    re.compile(r"\bpublication type\b", re.IGNORECASE),
    re.compile(r"large type books?", re.IGNORECASE),
    re.compile(r"^translations? (?:from|into)", re.IGNORECASE),
    re.compile(r"^translating into", re.IGNORECASE),
    re.compile(r" language materials?$", re.IGNORECASE),
    re.compile(r"\(\d{4}-\d{4}\)"),
    re.compile(r"\(fictional works by one author\)", re.IGNORECASE),
)

# Hierarchy delimiters. Slash, ">" and long dashes split with or without
# surrounding spaces; a hyphen only splits when spaced so "Sci-Fi" survives.
# A comma splits only before a lower-case word ("Fiction, humorous").
_HIERARCHY_SPLIT_RE = re.compile(r"\s*[/>—–]\s*|\s+--?\s+|,\s*(?=[a-z])")


def _is_noise(text: str) -> bool:
    return any(pattern.search(text) for pattern in _NOISE_PATTERNS)


def normalize_genre_variation(name: str | None) -> str:
    """Map a genre term to its canonical display form.

    Lookup is an exact, case-insensitive match. Returns "" for terms that
    should be dropped and the trimmed input, casing untouched, for terms the
    table does not know.
    """
    if not name:
        return ""
    trimmed = name.strip()
    key = trimmed.lower()
    if key in GENRE_VARIATIONS:
        return GENRE_VARIATIONS[key]
    return trimmed


def parse_hierarchical_genres(categories: Iterable[str | None] | None) -> set[str]:
    """Split composite category strings into a set of canonical genre names.

    "Fiction / Science Fiction / Space Opera" yields {"Fiction",
    "Science Fiction", "Space Opera"}. Empty entries, dropped terms and
    catalog bookkeeping never appear in the result.
    """
    parsed: set[str] = set()
    if not categories:
        return parsed

    for category in categories:
        if not category or not isinstance(category, str):
            continue
        if _is_noise(category):
            continue
        for part in _HIERARCHY_SPLIT_RE.split(category):
            segment = part.strip()
            if not segment or _is_noise(segment):
                continue
            canonical = normalize_genre_variation(segment)
            if canonical:
                parsed.add(canonical)
    return parsed
