# ABOUTME: Shared pytest fixtures for Shelfwise tests.
# ABOUTME: Provides sample library exports (as dicts and as a JSON file on disk).

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def library_books() -> list[dict[str, Any]]:
    """Library export entries in the camelCase shape the store writes."""
    return [
        {
            "id": "b1",
            "isbn": "9780441172719",
            "title": "Dune",
            "author": "Frank Herbert",
            "coverImageUrl": "",
            "genres": [],
            "publisher": "",
            "publishedDate": "",
            "rating": 5,
        },
        {
            "id": "b2",
            "isbn": "",
            "title": "Les Misérables",
            "author": "Victor Hugo",
            "coverImageUrl": "https://example.com/lesmis.jpg",
            "genres": ["Classics"],
            "pageCount": 1463,
            "physicalFormat": "Hardcover",
            "publisher": "Penguin",
            "publishedDate": "1862",
        },
        {
            "id": "b3",
            "isbn": "9780000000000",
            "title": "Binned Book",
            "author": "Nobody",
            "deletedAt": "2024-01-01T00:00:00Z",
        },
    ]


@pytest.fixture
def library_file(tmp_path: Path, library_books: list[dict[str, Any]]) -> Path:
    """Write library_books to a JSON export file."""
    path = tmp_path / "library.json"
    path.write_text(json.dumps(library_books), encoding="utf-8")
    return path
