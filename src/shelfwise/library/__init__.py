# ABOUTME: Library package: stored-record shape, duplicate detection, health and remediation.
# ABOUTME: Everything here reads records handed in by the caller; persistence is injected.

from shelfwise.library.duplicates import DuplicateMatchResult, check_for_duplicate
from shelfwise.library.records import LibraryRecord
from shelfwise.library.remediation import RemediationResult, fix_books_from_api

__all__ = [
    "DuplicateMatchResult",
    "LibraryRecord",
    "RemediationResult",
    "check_for_duplicate",
    "fix_books_from_api",
]
