"""Search session orchestration."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, List, Sequence, Union

from docsearch.config import SearchConfig
from docsearch.index.matcher import RESULT_LIMIT, SearchStrategy, select_strategy
from docsearch.index.store import IndexStore, IndexUnavailable
from docsearch.models import Candidate, DocumentRecord
from docsearch.utils.paths import navigation_target
from docsearch.utils.text import extract_snippet, highlight

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchResult:
    title: str
    snippet: str
    target: str
    score: float | None
    record: DocumentRecord

    def to_render(self) -> dict[str, Any]:
        return {
            "titleMarkup": self.title,
            "snippetMarkup": self.snippet,
            "navigationTarget": self.target,
        }


@dataclass(frozen=True, slots=True)
class NoResults:
    """Placeholder entry shown when a query matched nothing."""

    message: str = "No results found"

    def to_render(self) -> dict[str, Any]:
        return {"titleMarkup": "", "snippetMarkup": self.message, "navigationTarget": None}


NO_RESULTS = NoResults()

ResultList = List[Union[SearchResult, NoResults]]


class SearchState(str, enum.Enum):
    IDLE = "idle"
    AWAITING_INDEX = "awaiting_index"
    READY = "ready"
    SEARCHING = "searching"


def build_result(candidate: Candidate, query: str) -> SearchResult:
    record = candidate.record
    return SearchResult(
        title=highlight(record.title, query),
        snippet=extract_snippet(record.content, query).markup,
        target=navigation_target(record),
        score=candidate.score,
        record=record,
    )


class SearchController:
    """Owns the index store and matching strategy for one search session.

    Open, query-changed and close events drive a small state machine. Query
    handling is synchronous; the index load is the only awaited operation.
    """

    def __init__(
        self,
        store: IndexStore,
        strategy: SearchStrategy | None = None,
        *,
        limit: int = RESULT_LIMIT,
    ) -> None:
        self.store = store
        self.strategy = strategy if strategy is not None else select_strategy()
        self.limit = limit
        self.state = SearchState.IDLE
        self.query = ""
        self.results: ResultList = []
        self._disposed = False

    @classmethod
    def from_config(cls, config: SearchConfig, **store_kwargs: Any) -> SearchController:
        store = IndexStore(config.resolve_index_source(), timeout=config.timeout, **store_kwargs)
        return cls(store, select_strategy(config))

    @property
    def index_available(self) -> bool:
        return not self.store.failed

    def open(self) -> SearchState:
        """Show the search UI, kicking off the index load on first open."""
        if self._disposed or self.state is not SearchState.IDLE:
            return self.state
        if not self.store.started:
            self.store.start().add_done_callback(self._on_loaded)
        self.state = SearchState.AWAITING_INDEX if self.store.pending else SearchState.READY
        return self.state

    def _on_loaded(self, task: Any) -> None:
        if task.cancelled():
            return
        # retrieve the failure even after teardown so it is never left unobserved
        exc = task.exception()
        if self._disposed:
            return
        if exc is not None:
            LOGGER.error("Failed to load search index: %s", exc)
        if self.state is SearchState.AWAITING_INDEX:
            self.state = SearchState.READY

    async def wait_ready(self) -> bool:
        """Open if needed and wait for the index; ``False`` if it is unavailable."""
        if self._disposed:
            return False
        if not self.store.started:
            self.open()
        try:
            await self.store.load()
        except IndexUnavailable:
            return False
        return True

    def query_changed(self, text: str) -> ResultList:
        """Recompute results for the current query text."""
        if self._disposed:
            return []
        # typing into a closed search opens it
        if self.state is SearchState.IDLE:
            self.open()

        query = text.strip()
        self.query = query
        if not query:
            self.results = []
            self.state = SearchState.AWAITING_INDEX if self.store.pending else SearchState.READY
            return self.results

        candidates: Sequence[Candidate] = self.strategy.match(self.store.snapshot, query)
        results: ResultList = [build_result(candidate, query) for candidate in candidates[: self.limit]]
        self.results = results or [NO_RESULTS]
        self.state = SearchState.SEARCHING
        return self.results

    def close(self) -> None:
        """Hide the search UI, dropping the query and results."""
        self.query = ""
        self.results = []
        self.state = SearchState.IDLE

    def dispose(self) -> None:
        """Tear the session down; a pending load finishes as a no-op."""
        self._disposed = True
        self.store.close()
        self.close()
