# ABOUTME: Library health analysis: which books are missing data and how complete the library is.
# ABOUTME: Weighted completeness scoring plus per-issue lists for driving batch remediation.

from collections.abc import Sequence
from dataclasses import dataclass, field

from shelfwise.library.records import LibraryRecord


@dataclass(frozen=True)
class HealthField:
    weight: int
    label: str
    api_fixable: bool


# Higher weight = more important for completeness. ISBN is tracked but not scored.
# Page count and format are rarely present in catalog data, hence not api_fixable.
HEALTH_FIELDS: dict[str, HealthField] = {
    "cover_image_url": HealthField(2, "Cover Image", True),
    "genres": HealthField(2, "Genres", True),
    "page_count": HealthField(1, "Page Count", False),
    "physical_format": HealthField(1, "Format", False),
    "publisher": HealthField(1, "Publisher", True),
    "published_date": HealthField(1, "Published Date", True),
    "isbn": HealthField(0, "ISBN", False),
}


@dataclass
class HealthReport:
    """Result of analyzing a library for missing data."""

    total_books: int
    completeness_score: int
    total_issues: int
    fixable_books: int
    issues: dict[str, list[LibraryRecord]] = field(default_factory=dict)


def has_field_value(record: LibraryRecord, name: str) -> bool:
    return bool(getattr(record, name, None))


def missing_fields(record: LibraryRecord) -> list[str]:
    """Names of HEALTH_FIELDS the record has no value for."""
    return [name for name in HEALTH_FIELDS if not has_field_value(record, name)]


def book_completeness(record: LibraryRecord) -> int:
    """Weighted completeness of one record, 0-100."""
    score = 0
    total_weight = 0
    for name, config in HEALTH_FIELDS.items():
        if config.weight <= 0:
            continue
        total_weight += config.weight
        if has_field_value(record, name):
            score += config.weight
    if total_weight == 0:
        return 100
    return round(score / total_weight * 100)


def library_completeness(records: Sequence[LibraryRecord]) -> int:
    """Average completeness across records, 0-100.

    Capped at 99 while any record is incomplete, so rounding never reports a
    library with gaps as perfect.
    """
    if not records:
        return 100
    scores = [book_completeness(r) for r in records]
    average = round(sum(scores) / len(scores))
    if average == 100 and any(s < 100 for s in scores):
        return 99
    return average


def is_fixable(record: LibraryRecord) -> bool:
    """A record can be remediated if it has an ISBN and an api_fixable gap."""
    return bool(record.isbn) and any(
        HEALTH_FIELDS[name].api_fixable for name in missing_fields(record)
    )


def analyze_library_health(records: Sequence[LibraryRecord]) -> HealthReport:
    """Build a HealthReport with one issue list per tracked field."""
    issues: dict[str, list[LibraryRecord]] = {name: [] for name in HEALTH_FIELDS}
    for record in records:
        for name in missing_fields(record):
            issues[name].append(record)

    total_issues = sum(
        len(books) for name, books in issues.items() if HEALTH_FIELDS[name].weight > 0
    )
    return HealthReport(
        total_books=len(records),
        completeness_score=library_completeness(records),
        total_issues=total_issues,
        fixable_books=sum(1 for r in records if is_fixable(r)),
        issues=issues,
    )


def completeness_rating(score: int) -> tuple[str, str]:
    """Label and display colour for a completeness score."""
    if score >= 90:
        return "Excellent", "green"
    if score >= 70:
        return "Good", "green"
    if score >= 50:
        return "Fair", "yellow"
    return "Needs Attention", "red"
