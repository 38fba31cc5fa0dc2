"""Text helpers for result snippets and match highlighting."""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_SNIPPET_LENGTH = 150
CONTEXT_BEFORE = 50
CONTEXT_AFTER = 100
ELLIPSIS = "..."

MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"


def highlight(text: str, query: str) -> str:
    """Wrap every case-insensitive occurrence of ``query`` in a highlight marker.

    The query is matched literally; regex metacharacters carry no meaning.
    """
    if not query:
        return text
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    return pattern.sub(lambda match: f"{MARK_OPEN}{match.group(0)}{MARK_CLOSE}", text)


@dataclass(frozen=True, slots=True)
class Snippet:
    """Highlighted excerpt plus whether content was cut on either side."""

    text: str
    truncated_left: bool
    truncated_right: bool

    @property
    def markup(self) -> str:
        prefix = ELLIPSIS if self.truncated_left else ""
        suffix = ELLIPSIS if self.truncated_right else ""
        return f"{prefix}{self.text}{suffix}"


def extract_snippet(
    content: str, query: str, *, max_length: int = DEFAULT_SNIPPET_LENGTH
) -> Snippet:
    """Cut a bounded excerpt of ``content`` around the first occurrence of ``query``.

    Without an occurrence the excerpt is the head of the content and is always
    flagged as truncated on the right.
    """
    found = re.search(re.escape(query), content, re.IGNORECASE) if query else None
    if found is None:
        return Snippet(
            text=highlight(content[:max_length], query),
            truncated_left=False,
            truncated_right=True,
        )

    index = found.start()
    start = max(0, index - CONTEXT_BEFORE)
    end = min(len(content), found.end() + CONTEXT_AFTER)
    return Snippet(
        text=highlight(content[start:end], query),
        truncated_left=start > 0,
        truncated_right=end < len(content),
    )
