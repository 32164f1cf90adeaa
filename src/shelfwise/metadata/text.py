# ABOUTME: Free-text normalization for comparing and displaying catalog strings.
# ABOUTME: Case folding, diacritic stripping, apostrophe cleanup, Title Case repair, year extraction.

import re
import unicodedata

# Words kept lower case inside a Title Cased string (never in first position).
_SMALL_WORDS = frozenset(
    {
        "a",
        "an",
        "and",
        "as",
        "at",
        "but",
        "by",
        "for",
        "in",
        "nor",
        "of",
        "on",
        "or",
        "so",
        "the",
        "to",
        "up",
        "yet",
    }
)

# Curly single quotes, prime and backtick all compare as a straight apostrophe.
_APOSTROPHE_RE = re.compile(r"[‘’‛′`]")
_TRAILING_PERIODS_RE = re.compile(r"\.+$")
_WHITESPACE_RE = re.compile(r"\s+")
_YEAR_RE = re.compile(r"\b(1\d{3}|2\d{3})\b", re.ASCII)
_BARE_YEAR_RE = re.compile(r"^\d{4}$")


def normalize_text(text: str | None) -> str:
    """Fold text for semantic comparison.

    Lowercases, maps apostrophe variants to "'", and strips combining
    diacritical marks so "Café" and "cafe" compare equal.
    """
    if not text:
        return ""
    folded = _APOSTROPHE_RE.sub("'", text.lower())
    decomposed = unicodedata.normalize("NFD", folded)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_genre_name(name: str | None) -> str:
    """Lowercase, trim and collapse whitespace for genre duplicate checks."""
    if not name:
        return ""
    return _WHITESPACE_RE.sub(" ", name.lower().strip())


def _letters(text: str) -> str:
    return "".join(ch for ch in text if ch.isalpha())


def _is_single_case(text: str) -> bool:
    """True when every letter in text is upper case, or every letter is lower case."""
    letters = _letters(text)
    if not letters:
        return False
    return letters == letters.upper() or letters == letters.lower()


def to_title_case(text: str) -> str:
    """Title Case text, keeping small words lower case except the first word."""
    words = text.lower().split(" ")
    result = []
    for index, word in enumerate(words):
        if index == 0 or word not in _SMALL_WORDS:
            word = word[:1].upper() + word[1:]
        result.append(word)
    return " ".join(result)


def _repair_case(text: str) -> str:
    # Mixed case is assumed to be intentional and left alone.
    if _is_single_case(text):
        return to_title_case(text)
    return text


def normalize_title(title: str | None) -> str:
    """Trim, drop trailing periods, and repair ALL CAPS / all lowercase titles."""
    if not title:
        return ""
    normalized = _TRAILING_PERIODS_RE.sub("", title.strip())
    return _repair_case(normalized)


def normalize_author(author: str | None) -> str:
    """Trim and repair ALL CAPS / all lowercase author names."""
    if not author:
        return ""
    return _repair_case(author.strip())


def normalize_publisher(publisher: str | None) -> str:
    """Trim and repair ALL CAPS / all lowercase publisher names."""
    if not publisher:
        return ""
    return _repair_case(publisher.strip())


def normalize_published_date(date: str | int | None) -> str:
    """Reduce a published date to its year.

    "January 15, 2024" -> "2024". Input with no recognizable year is returned
    unchanged so callers never lose information.
    """
    if date is None or date == "":
        return ""
    text = str(date).strip()
    if _BARE_YEAR_RE.match(text):
        return text
    match = _YEAR_RE.search(text)
    return match.group(1) if match else str(date)


def normalize_physical_format(value: str | None) -> str:
    """Capitalize each word of a format string ("mass market paperback")."""
    if not value:
        return ""
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split())
