# ABOUTME: JSON library export store used by the CLI as the persistence collaborator.
# ABOUTME: Loads LibraryRecords from an export file and writes partial updates back to it.

import json
import logging
from pathlib import Path
from typing import Any

from shelfwise.library.records import LibraryRecord, export_key

logger = logging.getLogger(__name__)

DEFAULT_LIBRARY_PATH = Path.home() / ".shelfwise" / "library.json"


class LibraryFileError(Exception):
    """Raised when a library export cannot be read or written."""


class JsonLibrary:
    """A library export file: a JSON list of book objects, or {"books": [...]}.

    Keys the core does not know about are preserved on write.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._raw: list[dict[str, Any]] = []
        self._wrapped = False

    def load(self) -> list[LibraryRecord]:
        """Read the file and return its records. Soft-deleted books are skipped."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise LibraryFileError(f"Cannot read {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise LibraryFileError(f"{self.path} is not valid JSON: {exc}") from exc

        if isinstance(data, dict) and isinstance(data.get("books"), list):
            self._wrapped = True
            data = data["books"]
        if not isinstance(data, list):
            raise LibraryFileError(f"{self.path} does not contain a list of books")

        self._raw = [entry for entry in data if isinstance(entry, dict)]
        return [
            LibraryRecord.from_dict(entry) for entry in self._raw if not entry.get("deletedAt")
        ]

    def update_record(self, record_id: str, fields: dict[str, Any]) -> None:
        """Apply a partial update to one book and save the file."""
        for entry in self._raw:
            if str(entry.get("id", "")) == record_id:
                for name, value in fields.items():
                    entry[export_key(name)] = value
                break
        else:
            raise LibraryFileError(f"No book with id {record_id!r} in {self.path}")
        self._save()
        logger.debug("Updated %s: %s", record_id, ", ".join(fields))

    def _save(self) -> None:
        payload: Any = {"books": self._raw} if self._wrapped else self._raw
        try:
            self.path.write_text(
                json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as exc:
            raise LibraryFileError(f"Cannot write {self.path}: {exc}") from exc
