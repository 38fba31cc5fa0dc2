"""Shared fixtures for docsearch tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from docsearch.models import DocumentRecord

SAMPLE_ENTRIES: List[Dict[str, Any]] = [
    {
        "title": "Installation",
        "content": "Install the generator with cargo and run the init command to scaffold docs.",
        "path": "install.md",
        "version": None,
    },
    {
        "title": "Configuration",
        "content": "The rum.toml file controls the theme, search and versioning of your site.",
        "path": "guide/config.md",
        "version": "latest",
    },
    {
        "title": "Keyboard shortcuts",
        "content": "Press slash to open the search overlay and Escape to close it.",
        "path": "shortcuts.md",
    },
]


@pytest.fixture
def sample_records() -> tuple[DocumentRecord, ...]:
    return tuple(
        DocumentRecord(
            title=entry["title"],
            content=entry["content"],
            path=entry["path"],
            version=entry.get("version"),
        )
        for entry in SAMPLE_ENTRIES
    )


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Built site directory with a search index and an index page."""
    assets = tmp_path / "site" / "assets"
    assets.mkdir(parents=True)
    (assets / "search-index.json").write_text(json.dumps(SAMPLE_ENTRIES), encoding="utf-8")
    (tmp_path / "site" / "index.html").write_text(
        "<!doctype html><html><body>Docs home</body></html>", encoding="utf-8"
    )
    return tmp_path / "site"
