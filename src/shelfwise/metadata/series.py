# ABOUTME: Series notation parsing: extracts a series name and position from free text.
# ABOUTME: Handles "#N", "Book N", "Vol. N", "Part N", "(N)" and ", N" notations.

import re
from collections.abc import Sequence

from shelfwise.metadata.text import normalize_text
from shelfwise.metadata.types import SeriesParseResult

# Supported word numerals. Deliberately closed: "Book Eleven" is not parsed.
WORD_NUMERALS: dict[str, int] = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}

_WORD_NUMERAL_ALT = "|".join(WORD_NUMERALS)

# Tried in order; the first pattern yielding a name and a position wins.
_POSITION_PATTERNS = (
    # "Harry Potter #1", "Harry Potter # 1.5"
    re.compile(r"^(.+?)\s*#\s*(\d+(?:\.\d+)?)\s*$"),
    # "Discworld, Book One", "Dune Book 2"
    re.compile(rf"^(.+?),?\s+Book\s+(\d+|{_WORD_NUMERAL_ALT})\s*$", re.IGNORECASE),
    # "Saga, Vol. 3", "Saga Vol 3", "Saga Volume 3"
    re.compile(r"^(.+?),?\s+Vol(?:ume)?\.?\s*(\d+(?:\.\d+)?)\s*$", re.IGNORECASE),
    # "Dune, Part 2"
    re.compile(r"^(.+?),?\s+Part\s+(\d+)\s*$", re.IGNORECASE),
    # "Discworld (4)", "Discworld ( 4 )"
    re.compile(r"^(.+?)\s*\(\s*(\d+)\s*\)\s*$"),
    # "Discworld, 4", "Discworld: 4"
    re.compile(r"^(.+?)\s*[,:]\s*(\d+)\s*$"),
)

_WHITESPACE_RE = re.compile(r"\s+")


def _parse_position(text: str) -> int | float | None:
    """Convert a digit string or word numeral to a number."""
    lowered = text.strip().lower()
    if lowered in WORD_NUMERALS:
        return WORD_NUMERALS[lowered]
    try:
        number = float(lowered)
    except ValueError:
        return None
    return int(number) if number.is_integer() and "." not in lowered else number


def parse_series_string(raw: str | None) -> SeriesParseResult:
    """Parse a series string like "Harry Potter #4" into name and position.

    Strings without a recognized notation come back whole as the name with
    position None; empty input yields SeriesParseResult("", None).
    """
    if not raw or not isinstance(raw, str):
        return SeriesParseResult(name="")

    trimmed = raw.strip()
    if not trimmed:
        return SeriesParseResult(name="")

    for pattern in _POSITION_PATTERNS:
        match = pattern.match(trimmed)
        if not match:
            continue
        name = match.group(1).strip().rstrip(",:").strip()
        position = _parse_position(match.group(2))
        if name and position is not None:
            return SeriesParseResult(name=name, position=position)

    return SeriesParseResult(name=trimmed)


def parse_series_from_api(field: str | Sequence[str] | None) -> SeriesParseResult | None:
    """Pick the primary series from a catalog's series field.

    Catalogs return either one string or a list of candidate strings. From a
    list, the first candidate carrying a position wins, otherwise the first
    candidate with a name. Returns None when nothing usable is present.
    """
    if not field:
        return None

    if isinstance(field, str):
        parsed = parse_series_string(field)
        return parsed if parsed.name else None

    candidates = [parse_series_string(s) for s in field if isinstance(s, str) and s.strip()]
    for parsed in candidates:
        if parsed.name and parsed.position is not None:
            return parsed
    for parsed in candidates:
        if parsed.name:
            return parsed
    return None


def normalize_series_name(name: str | None) -> str:
    """Fold a series name for comparison (case, apostrophes, diacritics, spacing)."""
    return _WHITESPACE_RE.sub(" ", normalize_text(name)).strip()


def series_names_match(first: str | None, second: str | None) -> bool:
    """Whether two series names likely refer to the same series.

    Equal after normalization, or one contains the other, which covers
    "Harry Potter" against "The Harry Potter Series".
    """
    a = normalize_series_name(first)
    b = normalize_series_name(second)
    if not a or not b:
        return False
    return a == b or a in b or b in a


def _format_position(position: int | float) -> str:
    if isinstance(position, float) and position.is_integer():
        return str(int(position))
    return str(position)


def format_series_display(name: str | None, position: int | float | None) -> str:
    """Render a series as "Name #N", or just "Name" when there is no position."""
    if not name:
        return ""
    if position is None:
        return name
    return f"{name} #{_format_position(position)}"
