# ABOUTME: Duplicate detection for books about to be added to the library.
# ABOUTME: Matches by exact ISBN first, then by normalized title and author.

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from shelfwise.library.records import LibraryRecord
from shelfwise.metadata.text import normalize_text

MatchType = Literal["isbn", "title-author"]


@dataclass(frozen=True)
class DuplicateMatchResult:
    """Outcome of a duplicate check."""

    is_duplicate: bool
    match_type: MatchType | None = None
    existing_book: LibraryRecord | None = None


NO_DUPLICATE = DuplicateMatchResult(is_duplicate=False)


def check_for_duplicate(
    existing: Iterable[LibraryRecord],
    isbn: str | None,
    title: str | None,
    author: str | None,
) -> DuplicateMatchResult:
    """Check whether a book is already in the library.

    An ISBN match always wins, even if title and author differ entirely.
    Otherwise the first record, in input order, whose title and author both
    equal the candidate's after normalize_text() is a match. A blank title
    or author never matches on text.
    """
    records = list(existing)

    if isbn:
        for record in records:
            if record.isbn == isbn:
                return DuplicateMatchResult(True, "isbn", record)

    if not title or not title.strip() or not author or not author.strip():
        return NO_DUPLICATE

    wanted_title = normalize_text(title)
    wanted_author = normalize_text(author)
    for record in records:
        if (
            normalize_text(record.title) == wanted_title
            and normalize_text(record.author) == wanted_author
        ):
            return DuplicateMatchResult(True, "title-author", record)

    return NO_DUPLICATE
