"""Search session state machine.

State changes go through the reducer functions below; ``SearchSession``
drives them from user actions and backend responses. Every request carries
the sequence number it was issued with, and a response is applied only if
that number is still the latest one.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Protocol

from episode_archive.config import ArchiveSettings, get_settings
from episode_archive.domain.models import (
    EpisodeHit,
    ErrorKind,
    ResultPage,
    SearchQuery,
    SearchSessionState,
    SearchStatus,
)
from episode_archive.logging import logger
from episode_archive.services import url_state
from episode_archive.services.accumulator import accumulate
from episode_archive.services.exceptions import (
    NetworkFailure,
    SearchServiceError,
    SessionClosed,
)
from episode_archive.services.highlights import HighlightFragment, HighlightProjector
from episode_archive.services.navigation import Navigator
from episode_archive.services.requests import RequestDescriptor, build

FACETS = ("exact_phrase", "search_title")


class SearchBackend(Protocol):
    async def fetch(self, descriptor: RequestDescriptor) -> ResultPage: ...


def begin_search(state: SearchSessionState, query: SearchQuery) -> SearchSessionState:
    """Start a fresh query lifetime; a blank query clears the board."""

    seq = state.request_seq + 1
    if query.is_blank:
        return SearchSessionState(query=query, request_seq=seq)
    return SearchSessionState(query=query, status=SearchStatus.LOADING, request_seq=seq)


def begin_load_more(state: SearchSessionState) -> SearchSessionState:
    return replace(
        state,
        status=SearchStatus.LOADING,
        error_kind=None,
        request_seq=state.request_seq + 1,
    )


def can_load_more(state: SearchSessionState) -> bool:
    return (
        state.status is SearchStatus.LOADED
        and len(state.results) < state.total
        and not state.query.is_blank
    )


def on_success(
    state: SearchSessionState, seq: int, page: ResultPage, *, offset: int
) -> SearchSessionState:
    if seq != state.request_seq:
        return state
    if offset == 0:
        return replace(
            state,
            results=accumulate((), page, offset=0),
            total=page.total,
            offset=0,
            page_count=0,
            status=SearchStatus.LOADED,
            error_kind=None,
        )
    return replace(
        state,
        results=accumulate(state.results, page, offset=offset, total=state.total),
        offset=offset,
        page_count=state.page_count + 1,
        status=SearchStatus.LOADED,
        error_kind=None,
    )


def on_failure(
    state: SearchSessionState, seq: int, kind: ErrorKind, *, offset: int
) -> SearchSessionState:
    """Record a failed request.

    A failed first page empties the board. A failed follow-up page keeps the
    results gathered so far and leaves ``offset``/``page_count`` at the last
    page that actually arrived.
    """

    if seq != state.request_seq:
        return state
    if offset == 0:
        return replace(
            state,
            results=(),
            total=0,
            status=SearchStatus.ERROR,
            error_kind=kind,
        )
    return replace(state, status=SearchStatus.ERROR, error_kind=kind)


def _error_kind(exc: SearchServiceError) -> ErrorKind:
    if isinstance(exc, NetworkFailure):
        return ErrorKind.NETWORK
    return ErrorKind.BACKEND


class SearchSession:
    """Owns the search state of one view, from mount to close."""

    def __init__(
        self,
        backend: SearchBackend,
        navigator: Navigator,
        settings: ArchiveSettings | None = None,
    ) -> None:
        self._backend = backend
        self._navigator = navigator
        self._settings = settings or get_settings()
        self._projector = HighlightProjector.from_settings(self._settings.highlights)
        self._state = SearchSessionState()
        self._draft = SearchQuery()
        self._task: asyncio.Future[ResultPage] | None = None
        self._closed = False

    async def __aenter__(self) -> SearchSession:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def state(self) -> SearchSessionState:
        return self._state

    @property
    def draft(self) -> SearchQuery:
        return self._draft

    @property
    def results(self) -> tuple[EpisodeHit, ...]:
        return self._state.results

    @property
    def is_loading(self) -> bool:
        return self._state.status is SearchStatus.LOADING

    @property
    def has_more(self) -> bool:
        return can_load_more(self._state)

    @property
    def closed(self) -> bool:
        return self._closed

    async def mount(self) -> SearchSessionState:
        """Seed the session from the address bar and run the linked search, if any."""

        self._ensure_open()
        query = url_state.decode(self._navigator.current_query_string())
        self._draft = query
        if query.is_blank:
            self._state = replace(self._state, query=query)
            return self._state
        return await self._start_search(query)

    def set_text(self, text: str) -> None:
        # Typing only edits the draft; the URL follows explicit actions.
        self._draft = self._draft.with_changes(text=text)

    async def search(self, query: SearchQuery | None = None) -> SearchSessionState:
        self._ensure_open()
        query = self._draft if query is None else query
        self._draft = query
        changes = url_state.to_changes(query)
        if query.is_blank:
            changes[url_state.QUERY_KEY] = ""
        self._navigator.push(url_state.encode(self._navigator.current_query_string(), changes))
        return await self._start_search(query)

    async def set_facet(self, name: str, value: bool) -> SearchSessionState:
        if name not in FACETS:
            raise ValueError(f"Unknown facet: {name}")
        return await self.search(self._draft.with_changes(**{name: value}))

    async def toggle_exact_phrase(self) -> SearchSessionState:
        return await self.set_facet("exact_phrase", not self._draft.exact_phrase)

    async def toggle_search_title(self) -> SearchSessionState:
        return await self.set_facet("search_title", not self._draft.search_title)

    async def load_more(self) -> SearchSessionState:
        self._ensure_open()
        if not can_load_more(self._state):
            return self._state

        previous = self._state
        offset = previous.offset + self._settings.pagination.page_size
        self._state = begin_load_more(previous)
        logger.info(
            "load_more_started",
            query=self._state.query.text,
            offset=offset,
            seq=self._state.request_seq,
        )
        descriptor = build(
            self._state.query, limit=self._settings.pagination.page_size, offset=offset
        )
        applied = await self._execute(descriptor, offset=offset, restore=previous)
        if applied and self._state.status is SearchStatus.LOADED:
            logger.info(
                "load_more_completed",
                offset=self._state.offset,
                page_count=self._state.page_count,
                results=len(self._state.results),
                total=self._state.total,
            )
        return self._state

    async def close(self) -> None:
        """Tear the session down, abandoning any request still in flight."""

        if self._closed:
            return
        self._closed = True
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    def highlights(self, hit: EpisodeHit) -> dict[str, list[HighlightFragment]]:
        return self._projector.project(hit)

    def summary(self) -> str:
        state = self._state
        if state.status is SearchStatus.ERROR:
            if state.error_kind is ErrorKind.NETWORK:
                return "Could not reach the episode archive. Please try again."
            return "The episode archive returned an error. Please try again."
        if state.status is SearchStatus.LOADING and not state.results:
            return "Loading episodes..."
        if state.results:
            plural = "" if state.total == 1 else "s"
            return f"Found {state.total} episode{plural}"
        if state.status is SearchStatus.LOADED:
            return "No episodes found."
        return "Enter a search term to find episodes."

    async def _start_search(self, query: SearchQuery) -> SearchSessionState:
        self._cancel_inflight()
        self._state = begin_search(self._state, query)
        if query.is_blank:
            logger.info("search_cleared", seq=self._state.request_seq)
            return self._state

        logger.info(
            "search_started",
            query=query.text,
            exact_phrase=query.exact_phrase,
            search_title=query.search_title,
            seq=self._state.request_seq,
        )
        descriptor = build(query, limit=self._settings.pagination.first_page_limit)
        applied = await self._execute(
            descriptor,
            offset=0,
            restore=replace(self._state, status=SearchStatus.IDLE),
        )
        if applied and self._state.status is SearchStatus.LOADED:
            logger.info(
                "search_completed",
                query=query.text,
                results=len(self._state.results),
                total=self._state.total,
            )
        return self._state

    async def _execute(
        self,
        descriptor: RequestDescriptor,
        *,
        offset: int,
        restore: SearchSessionState,
    ) -> bool:
        seq = self._state.request_seq
        task = asyncio.ensure_future(self._backend.fetch(descriptor))
        self._task = task
        try:
            page = await task
        except asyncio.CancelledError:
            if self._closed or seq != self._state.request_seq:
                logger.debug("stale_request_cancelled", seq=seq)
                return False
            # Cancelled from outside: leave the session usable.
            self._state = replace(restore, request_seq=self._state.request_seq)
            raise
        except SearchServiceError as exc:
            if seq != self._state.request_seq:
                logger.debug("stale_response_discarded", seq=seq, error=str(exc))
                return False
            kind = _error_kind(exc)
            logger.error(
                "load_more_failed" if offset else "search_failed",
                query=self._state.query.text,
                offset=offset,
                error_kind=kind.value,
                status_code=getattr(exc, "status_code", None),
                error=str(exc),
            )
            self._state = on_failure(self._state, seq, kind, offset=offset)
            return True
        except Exception:
            if seq == self._state.request_seq:
                logger.exception("search_request_crashed", query=self._state.query.text, offset=offset)
                self._state = replace(restore, request_seq=self._state.request_seq)
            raise
        finally:
            if self._task is task:
                self._task = None

        if seq != self._state.request_seq:
            logger.debug("stale_response_discarded", seq=seq, latest=self._state.request_seq)
            return False
        self._state = on_success(self._state, seq, page, offset=offset)
        return True

    def _cancel_inflight(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosed("Search session has been closed.")


__all__ = [
    "FACETS",
    "SearchBackend",
    "SearchSession",
    "begin_load_more",
    "begin_search",
    "can_load_more",
    "on_failure",
    "on_success",
]
