# ABOUTME: ISBN cleaning and shape checks shared by lookups and duplicate detection.
# ABOUTME: Accepts "ISBN-13: 978-0-...", bare digits, and spaced/dashed forms.

import re

_ISBN_PREFIX_RE = re.compile(r"^isbn(?:[-\s]?(?:10|13)(?!\d))?[-:\s]*", re.IGNORECASE)
_SEPARATORS_RE = re.compile(r"[-\s]")
_ISBN_SHAPE_RE = re.compile(r"^(?:\d{10}|\d{13})$")


def clean_isbn(value: str | None) -> str:
    """Strip an ISBN label, dashes and spaces, leaving only the identifier."""
    if not value:
        return ""
    return _SEPARATORS_RE.sub("", _ISBN_PREFIX_RE.sub("", value.strip()))


def is_isbn(value: str | None) -> bool:
    """Whether value looks like a 10- or 13-digit ISBN once cleaned."""
    return bool(_ISBN_SHAPE_RE.match(clean_isbn(value)))
