"""Navigation target helpers."""

from __future__ import annotations

from docsearch.models import DocumentRecord

_MARKDOWN_SUFFIX = ".md"


def page_path(path: str) -> str:
    """Map a source document path to its rendered page path."""
    if path.endswith(_MARKDOWN_SUFFIX):
        return path.removesuffix(_MARKDOWN_SUFFIX) + ".html"
    return path


def navigation_target(record: DocumentRecord) -> str:
    """Build the URL path a result links to.

    Versioned records live under ``/<version>/``; unversioned ones at the root.
    """
    prefix = f"/{record.version}" if record.version else ""
    return f"{prefix}/{page_path(record.path)}"
