"""Query matching strategies."""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

import numpy as np

from docsearch.config import SearchConfig
from docsearch.models import Candidate, IndexSnapshot

LOGGER = logging.getLogger(__name__)

RESULT_LIMIT = 10
FUZZY_THRESHOLD = 0.3


class SearchStrategy(Protocol):
    name: str

    def match(self, snapshot: IndexSnapshot, query: str) -> List[Candidate]:
        ...


class LiteralStrategy:
    """Case-insensitive substring matching in index order, unscored."""

    name = "literal"

    def __init__(self, *, limit: int = RESULT_LIMIT) -> None:
        self.limit = limit

    def match(self, snapshot: IndexSnapshot, query: str) -> List[Candidate]:
        needle = query.lower()
        # Linear scan per query; fine for a single site's page count.
        results: List[Candidate] = []
        for record in snapshot:
            if needle in record.title.lower() or needle in record.content.lower():
                results.append(Candidate(record=record))
                if len(results) >= self.limit:
                    break
        return results


class FuzzyStrategy:
    """Approximate matching over titles and content using rapidfuzz.

    Each field gets a similarity in 0..100: partial alignment when the field is
    at least as long as the query, a plain ratio otherwise so that short titles
    do not fully match any longer query containing them. The best field wins
    and is turned into a distance in 0..1 where 0 is a perfect match.
    """

    name = "fuzzy"

    def __init__(self, *, threshold: float = FUZZY_THRESHOLD, limit: int = RESULT_LIMIT) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"Fuzzy threshold must be within [0, 1], got {threshold}")
        from rapidfuzz import fuzz, process
        from rapidfuzz.utils import default_process

        self.threshold = threshold
        self.limit = limit
        self._cutoff = round((1.0 - threshold) * 100.0, 6)
        self._fuzz = fuzz
        self._process = process
        self._default_process = default_process

    def _processor(self, query: str):
        """Default rapidfuzz preprocessing, or plain lowercasing for queries it would empty."""
        if self._default_process(query):
            return self._default_process
        return str.lower

    def _field_similarity(self, query: str, fields: Sequence[str]) -> np.ndarray:
        processor = self._processor(query)
        partial = self._process.cdist([query], fields, scorer=self._fuzz.partial_ratio, processor=processor)[0]
        full = self._process.cdist([query], fields, scorer=self._fuzz.ratio, processor=processor)[0]
        query_len = len(processor(query))
        lengths = np.fromiter((len(processor(field)) for field in fields), dtype=np.int64, count=len(fields))
        return np.where(lengths >= query_len, partial, full).astype("float64")

    def match(self, snapshot: IndexSnapshot, query: str) -> List[Candidate]:
        if not snapshot:
            return []

        titles = self._field_similarity(query, [record.title for record in snapshot])
        contents = self._field_similarity(query, [record.content for record in snapshot])
        similarity = np.maximum(titles, contents)

        keep = np.flatnonzero(similarity >= self._cutoff)
        if keep.size == 0:
            return []
        distances = 1.0 - similarity[keep] / 100.0
        order = keep[np.argsort(distances, kind="stable")][: self.limit]

        return [
            Candidate(record=snapshot[idx], score=float(1.0 - similarity[idx] / 100.0))
            for idx in order
        ]


def select_strategy(config: SearchConfig | None = None) -> SearchStrategy:
    """Choose the strategy for a session: fuzzy unless disabled or broken."""
    config = config or SearchConfig()
    if not config.fuzzy:
        LOGGER.info("Fuzzy matching disabled, using literal substring matching")
        return LiteralStrategy()

    try:
        strategy = FuzzyStrategy()
    except (ImportError, ValueError) as exc:
        LOGGER.warning(
            "Failed to initialise fuzzy matcher: %s. Falling back to literal matching.", exc
        )
        return LiteralStrategy()

    LOGGER.debug("Using fuzzy matching (threshold %.2f)", strategy.threshold)
    return strategy
