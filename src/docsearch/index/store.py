"""Search index loading."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, List

import httpx
from pydantic import TypeAdapter, ValidationError

from docsearch.models import EMPTY_SNAPSHOT, IndexEntry, IndexSnapshot

LOGGER = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(List[IndexEntry])


class IndexUnavailable(Exception):
    """The search index could not be fetched or parsed."""

    def __init__(self, source: str | Path, reason: str) -> None:
        super().__init__(f"Search index unavailable at {source}: {reason}")
        self.source = source
        self.reason = reason


def _is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def parse_index(payload: Any, source: str | Path = "<memory>") -> IndexSnapshot:
    """Validate decoded JSON as a list of index entries."""
    try:
        entries = _ENTRIES.validate_python(payload)
    except ValidationError as exc:
        raise IndexUnavailable(source, f"unexpected index shape ({exc.error_count()} errors)") from exc
    return tuple(entry.to_record() for entry in entries)


class IndexStore:
    """Loads the search index once and holds the resulting snapshot.

    Concurrent ``load()`` callers share a single fetch. A failed load is
    terminal: the snapshot stays empty and later calls re-raise the failure.
    """

    def __init__(
        self,
        source: str | Path,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.source = source
        self.timeout = timeout
        self._transport = transport
        self._snapshot: IndexSnapshot = EMPTY_SNAPSHOT
        self._task: asyncio.Task[IndexSnapshot] | None = None
        self._closed = False

    @property
    def snapshot(self) -> IndexSnapshot:
        return self._snapshot

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def failed(self) -> bool:
        return (
            self._task is not None
            and self._task.done()
            and not self._task.cancelled()
            and self._task.exception() is not None
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Detach the store; a load finishing afterwards is discarded."""
        self._closed = True

    def start(self) -> asyncio.Task[IndexSnapshot]:
        """Schedule the load on the running loop if it has not started yet."""
        if self._task is None:
            self._task = asyncio.ensure_future(self._load())
        return self._task

    async def load(self) -> IndexSnapshot:
        # shield so one cancelled waiter does not abort the shared fetch
        return await asyncio.shield(self.start())

    async def _load(self) -> IndexSnapshot:
        LOGGER.debug("Loading search index from %s", self.source)
        payload = await self._fetch()
        snapshot = parse_index(payload, self.source)
        if self._closed:
            LOGGER.debug("Store closed before index load finished, discarding")
            return snapshot
        self._snapshot = snapshot
        LOGGER.info("Loaded %d documents from %s", len(snapshot), self.source)
        return snapshot

    async def _fetch(self) -> Any:
        if _is_url(self.source):
            return await self._fetch_url(str(self.source))
        return await self._fetch_file(Path(self.source))

    async def _fetch_url(self, url: str) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as exc:
            raise IndexUnavailable(url, str(exc)) from exc
        except ValueError as exc:
            raise IndexUnavailable(url, f"invalid JSON: {exc}") from exc

    async def _fetch_file(self, path: Path) -> Any:
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise IndexUnavailable(path, str(exc)) from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise IndexUnavailable(path, f"invalid JSON: {exc}") from exc
