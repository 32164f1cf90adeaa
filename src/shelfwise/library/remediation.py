# ABOUTME: Batch remediation: backfills empty fields of stored books from catalog lookups.
# ABOUTME: Processes records sequentially with a politeness delay and per-record failure isolation.

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from shelfwise.library.records import LibraryRecord
from shelfwise.metadata.resolver import LookupValidationError, MetadataResolver
from shelfwise.metadata.types import MergedBookDraft

logger = logging.getLogger(__name__)

# Fields remediation may fill, in reporting order. Never overwrites a value.
REMEDIABLE_FIELDS = (
    "title",
    "author",
    "cover_image_url",
    "genres",
    "page_count",
    "physical_format",
    "publisher",
    "published_date",
)

NO_ISBN = "No ISBN"
INVALID_ISBN = "Invalid ISBN"
NO_API_DATA = "No data available from APIs"
NO_NEW_DATA = "No new data available"
LOOKUP_FAILED = "API lookup failed"

# Persists a partial update for one record: (record_id, {field: value}).
UpdateRecordFn = Callable[[str, dict[str, Any]], None]
ProgressFn = Callable[[int, int, LibraryRecord], None]


@dataclass
class FixOutcome:
    """Result of remediating a single record."""

    success: bool
    fields_fixed: list[str] = field(default_factory=list)
    error: str | None = None


@dataclass
class RemediationResult:
    """Summary of a batch run. Every input record lands in exactly one bucket."""

    fixed: list[tuple[LibraryRecord, list[str]]] = field(default_factory=list)
    skipped: list[tuple[LibraryRecord, str]] = field(default_factory=list)
    errors: list[tuple[LibraryRecord, str]] = field(default_factory=list)
    fields_fixed_count: dict[str, int] = field(default_factory=dict)


def plan_book_fix(record: LibraryRecord, draft: MergedBookDraft) -> dict[str, Any]:
    """Work out which fields of record the draft can fill, without saving.

    Only empty fields are considered. Cover sources the record lacks are
    added to its covers map under the "covers" key.
    """
    updates: dict[str, Any] = {}
    for name in REMEDIABLE_FIELDS:
        if getattr(record, name):
            continue
        value = list(draft.genres) if name == "genres" else getattr(draft, name)
        if value:
            updates[name] = value

    new_covers = {
        source: url
        for source, url in draft.covers.items()
        if url and not record.covers.get(source)
    }
    if new_covers:
        updates["covers"] = {**record.covers, **new_covers}
    return updates


def fix_book_from_api(
    record: LibraryRecord,
    resolver: MetadataResolver,
    update_record: UpdateRecordFn,
) -> FixOutcome:
    """Fill the empty fields of one record from the catalogs and save them."""
    if not record.isbn:
        return FixOutcome(success=False, error=NO_ISBN)

    try:
        draft = resolver.lookup_isbn(record.isbn)
    except LookupValidationError:
        return FixOutcome(success=False, error=INVALID_ISBN)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Lookup for %s (ISBN %s) failed: %s", record.id, record.isbn, exc)
        return FixOutcome(success=False, error=LOOKUP_FAILED)

    if draft is None:
        return FixOutcome(success=False, error=NO_API_DATA)

    updates = plan_book_fix(record, draft)
    if not updates:
        return FixOutcome(success=False, error=NO_NEW_DATA)

    try:
        update_record(record.id, updates)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Saving fixes for %s failed: %s", record.id, exc)
        return FixOutcome(success=False, error=f"Save failed: {exc}")

    for name, value in updates.items():
        setattr(record, name, value)
    return FixOutcome(success=True, fields_fixed=list(updates))


def fix_books_from_api(
    records: Sequence[LibraryRecord],
    resolver: MetadataResolver,
    update_record: UpdateRecordFn,
    *,
    on_progress: ProgressFn | None = None,
    delay: float = 0.5,
) -> RemediationResult:
    """Remediate many records, one at a time.

    Args:
        records: Records to fix.
        resolver: Resolver used for each ISBN lookup.
        update_record: Persists the fields filled for one record.
        on_progress: Called as (current, total, record) before each record.
        delay: Seconds to wait between records, to stay polite to the catalogs.

    Returns:
        RemediationResult with fixed, skipped and errored records.
    """
    result = RemediationResult()
    total = len(records)

    for index, record in enumerate(records, start=1):
        if on_progress is not None:
            on_progress(index, total, record)

        outcome = fix_book_from_api(record, resolver, update_record)

        if outcome.success:
            result.fixed.append((record, outcome.fields_fixed))
            for name in outcome.fields_fixed:
                result.fields_fixed_count[name] = result.fields_fixed_count.get(name, 0) + 1
            logger.info("Fixed %s: %s", record.id, ", ".join(outcome.fields_fixed))
        elif outcome.error == NO_ISBN:
            result.skipped.append((record, NO_ISBN))
        else:
            result.errors.append((record, outcome.error or "Unknown error"))
            logger.debug("Could not fix %s: %s", record.id, outcome.error)

        # No wait after the last record or one that never reached the catalogs.
        if index < total and delay > 0 and record.isbn:
            time.sleep(delay)

    return result
