"""Core docsearch data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from pydantic import BaseModel


class IndexEntry(BaseModel):
    """One object of the search index file as written by the site generator."""

    title: str
    content: str
    path: str
    version: Optional[str] = None

    def to_record(self) -> DocumentRecord:
        return DocumentRecord(
            title=self.title,
            content=self.content,
            path=self.path,
            version=self.version or None,
        )


@dataclass(frozen=True, slots=True)
class DocumentRecord:
    """A single indexed page."""

    title: str
    content: str
    path: str
    version: str | None = None


IndexSnapshot = Tuple[DocumentRecord, ...]

EMPTY_SNAPSHOT: IndexSnapshot = ()


@dataclass(frozen=True, slots=True)
class Candidate:
    """A matched record paired with its strategy score (``None`` when unscored)."""

    record: DocumentRecord
    score: float | None = None
