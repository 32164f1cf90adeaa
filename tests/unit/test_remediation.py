# ABOUTME: Unit tests for batch remediation of stored records.
# ABOUTME: Covers outcome buckets, fill-only-empty semantics, progress, delay, and save failures.

from typing import Any

import pytest

from shelfwise.library import remediation
from shelfwise.library.records import LibraryRecord
from shelfwise.library.remediation import (
    INVALID_ISBN,
    LOOKUP_FAILED,
    NO_API_DATA,
    NO_ISBN,
    NO_NEW_DATA,
    fix_book_from_api,
    fix_books_from_api,
    plan_book_fix,
)
from shelfwise.metadata.http import MetadataFetchError
from shelfwise.metadata.resolver import MetadataResolver
from shelfwise.metadata.types import (
    PRIMARY_SOURCE,
    SECONDARY_SOURCE,
    MergedBookDraft,
    RawCatalogRecord,
)
from tests.fixtures.fakes import FakeSource

ISBN = "9780441172719"


class FakeResolver:
    """Resolver stand-in returning a draft per ISBN."""

    def __init__(self, drafts: dict[str, MergedBookDraft | None]) -> None:
        self._drafts = drafts
        self.lookups: list[str] = []

    def lookup_isbn(self, isbn: str, session: Any = None) -> MergedBookDraft | None:
        self.lookups.append(isbn)
        return self._drafts.get(isbn)


class RecordingStore:
    """Collects update_record calls; optionally fails for one id."""

    def __init__(self, fail_for: str | None = None) -> None:
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self._fail_for = fail_for

    def update_record(self, record_id: str, fields: dict[str, Any]) -> None:
        if record_id == self._fail_for:
            raise OSError("disk full")
        self.updates.append((record_id, fields))


def _draft(**fields) -> MergedBookDraft:
    defaults = {
        "isbn": ISBN,
        "title": "Dune",
        "author": "Frank Herbert",
        "publisher": "Ace Books",
        "published_date": "1990",
        "genres": ["Fiction", "Science Fiction"],
        "covers": {PRIMARY_SOURCE: "https://gb/dune.jpg"},
    }
    defaults.update(fields)
    return MergedBookDraft(**defaults)


class TestPlanBookFix:
    """Tests for plan_book_fix."""

    def test_fills_only_empty_fields(self) -> None:
        record = LibraryRecord(
            id="1", isbn=ISBN, title="Dune", author="F. Herbert", publisher="Ace"
        )
        updates = plan_book_fix(record, _draft())

        assert "title" not in updates
        assert "author" not in updates
        assert "publisher" not in updates
        assert updates["published_date"] == "1990"
        assert updates["genres"] == ["Fiction", "Science Fiction"]
        assert updates["cover_image_url"] == "https://gb/dune.jpg"
        assert updates["covers"] == {PRIMARY_SOURCE: "https://gb/dune.jpg"}

    def test_keeps_existing_covers(self) -> None:
        record = LibraryRecord(
            id="1",
            isbn=ISBN,
            cover_image_url="https://mine.jpg",
            covers={"manual": "https://mine.jpg"},
        )
        updates = plan_book_fix(
            record,
            _draft(covers={PRIMARY_SOURCE: "https://gb.jpg", SECONDARY_SOURCE: "https://ol.jpg"}),
        )
        assert "cover_image_url" not in updates
        assert updates["covers"] == {
            "manual": "https://mine.jpg",
            PRIMARY_SOURCE: "https://gb.jpg",
            SECONDARY_SOURCE: "https://ol.jpg",
        }

    def test_nothing_to_fill(self) -> None:
        record = LibraryRecord(
            id="1",
            isbn=ISBN,
            title="Dune",
            author="Frank Herbert",
            cover_image_url="https://gb/dune.jpg",
            genres=["Classics"],
            page_count=500,
            physical_format="Hardcover",
            publisher="Ace",
            published_date="1965",
            covers={PRIMARY_SOURCE: "https://gb/dune.jpg"},
        )
        assert plan_book_fix(record, _draft()) == {}


class TestFixBookFromApi:
    """Tests for single-record remediation."""

    def test_success_saves_and_updates_record(self) -> None:
        record = LibraryRecord(id="1", isbn=ISBN, title="Dune", author="Frank Herbert")
        store = RecordingStore()
        outcome = fix_book_from_api(record, FakeResolver({ISBN: _draft()}), store.update_record)

        assert outcome.success is True
        assert "genres" in outcome.fields_fixed
        assert store.updates[0][0] == "1"
        assert record.publisher == "Ace Books"

    def test_invalid_isbn(self) -> None:
        record = LibraryRecord(id="1", isbn="12-34")
        resolver = MetadataResolver(FakeSource(PRIMARY_SOURCE), FakeSource(SECONDARY_SOURCE))
        outcome = fix_book_from_api(record, resolver, RecordingStore().update_record)
        assert outcome.success is False
        assert outcome.error == INVALID_ISBN

    def test_save_failure_leaves_record_untouched(self) -> None:
        record = LibraryRecord(id="1", isbn=ISBN)
        store = RecordingStore(fail_for="1")
        outcome = fix_book_from_api(record, FakeResolver({ISBN: _draft()}), store.update_record)

        assert outcome.success is False
        assert outcome.error == "Save failed: disk full"
        assert record.publisher == ""


class TestFixBooksFromApi:
    """Tests for batch remediation."""

    @pytest.fixture(autouse=True)
    def _no_sleep(self, monkeypatch: pytest.MonkeyPatch) -> list[float]:
        sleeps: list[float] = []
        monkeypatch.setattr(remediation.time, "sleep", sleeps.append)
        self.sleeps = sleeps
        return sleeps

    def test_every_record_lands_in_one_bucket(self) -> None:
        complete = LibraryRecord(
            id="full",
            isbn="9780553293357",
            title="Foundation",
            author="Isaac Asimov",
            cover_image_url="https://x.jpg",
            genres=["Science Fiction"],
            page_count=255,
            physical_format="Paperback",
            publisher="Bantam",
            published_date="1991",
            covers={PRIMARY_SOURCE: "https://gb/dune.jpg"},
        )
        records = [
            LibraryRecord(id="fix", isbn=ISBN, title="Dune", author="Frank Herbert"),
            LibraryRecord(id="noisbn", title="Handwritten Notes"),
            LibraryRecord(id="unknown", isbn="9780000000002"),
            complete,
        ]
        resolver = FakeResolver({ISBN: _draft(), "9780553293357": _draft()})

        result = fix_books_from_api(records, resolver, RecordingStore().update_record)

        assert [r.id for r, _ in result.fixed] == ["fix"]
        assert result.skipped == [(records[1], NO_ISBN)]
        assert [(r.id, reason) for r, reason in result.errors] == [
            ("unknown", NO_API_DATA),
            ("full", NO_NEW_DATA),
        ]
        assert resolver.lookups == [ISBN, "9780000000002", "9780553293357"]

    def test_fields_fixed_count(self) -> None:
        records = [
            LibraryRecord(id="a", isbn=ISBN, title="Dune", author="Frank Herbert"),
            LibraryRecord(id="b", isbn=ISBN, title="Dune", author="Frank Herbert", publisher="Ace"),
        ]
        result = fix_books_from_api(
            records, FakeResolver({ISBN: _draft()}), RecordingStore().update_record
        )
        assert result.fields_fixed_count["genres"] == 2
        assert result.fields_fixed_count["publisher"] == 1

    def test_progress_fires_for_every_record(self) -> None:
        records = [LibraryRecord(id="a", isbn=ISBN), LibraryRecord(id="b")]
        calls: list[tuple[int, int, str]] = []
        fix_books_from_api(
            records,
            FakeResolver({}),
            RecordingStore().update_record,
            on_progress=lambda current, total, record: calls.append((current, total, record.id)),
        )
        assert calls == [(1, 2, "a"), (2, 2, "b")]

    def test_delay_between_looked_up_records(self) -> None:
        records = [
            LibraryRecord(id="a", isbn=ISBN),
            LibraryRecord(id="b"),
            LibraryRecord(id="c", isbn=ISBN),
            LibraryRecord(id="d", isbn=ISBN),
        ]
        fix_books_from_api(
            records, FakeResolver({}), RecordingStore().update_record, delay=0.25
        )
        # After "a" and "c"; never after the no-ISBN record or the last one.
        assert self.sleeps == [0.25, 0.25]

    def test_zero_delay_never_sleeps(self) -> None:
        records = [LibraryRecord(id="a", isbn=ISBN), LibraryRecord(id="b", isbn=ISBN)]
        fix_books_from_api(records, FakeResolver({}), RecordingStore().update_record, delay=0)
        assert self.sleeps == []

    def test_catalog_failures_do_not_abort_batch(self) -> None:
        resolver = MetadataResolver(
            FakeSource(PRIMARY_SOURCE, error=MetadataFetchError("down")),
            FakeSource(
                SECONDARY_SOURCE,
                record=RawCatalogRecord(source=SECONDARY_SOURCE, publisher="Ace"),
            ),
        )
        records = [LibraryRecord(id="a", isbn=ISBN), LibraryRecord(id="b", isbn=ISBN)]
        store = RecordingStore(fail_for="a")

        result = fix_books_from_api(records, resolver, store.update_record, delay=0)

        assert [(r.id, reason) for r, reason in result.errors] == [("a", "Save failed: disk full")]
        assert [(r.id, fields) for r, fields in result.fixed] == [("b", ["publisher"])]

    def test_unexpected_lookup_error_is_recorded(self) -> None:
        resolver = MetadataResolver(
            FakeSource(PRIMARY_SOURCE, error=RuntimeError("boom")),
            FakeSource(SECONDARY_SOURCE),
        )
        records = [LibraryRecord(id="a", isbn=ISBN), LibraryRecord(id="b", isbn="")]

        result = fix_books_from_api(records, resolver, RecordingStore().update_record, delay=0)

        assert [(r.id, reason) for r, reason in result.errors] == [("a", LOOKUP_FAILED)]
        assert [(r.id, reason) for r, reason in result.skipped] == [("b", NO_ISBN)]

    def test_numeric_isbn_from_export(self) -> None:
        records = [
            LibraryRecord.from_dict({"id": "a", "isbn": 9780441172719}),
            LibraryRecord.from_dict({"id": "b", "isbn": ""}),
        ]
        resolver = FakeResolver({ISBN: _draft()})

        result = fix_books_from_api(records, resolver, RecordingStore().update_record, delay=0)

        assert resolver.lookups == [ISBN]
        assert [r.id for r, _ in result.fixed] == ["a"]
        assert [r.id for r, _ in result.skipped] == ["b"]

    def test_empty_batch(self) -> None:
        result = fix_books_from_api([], FakeResolver({}), RecordingStore().update_record)
        assert result.fixed == []
        assert result.skipped == []
        assert result.errors == []
        assert result.fields_fixed_count == {}
