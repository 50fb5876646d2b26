"""Translate a search query and pagination cursor into a backend request."""

from __future__ import annotations

from dataclasses import dataclass, field

from episode_archive.domain.models import SearchQuery

EPISODES_PATH = "/api/episodes"


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    params: dict[str, str] = field(default_factory=dict)
    path: str = EPISODES_PATH

    @property
    def offset(self) -> int:
        return int(self.params.get("offset", 0))

    @property
    def limit(self) -> int:
        return int(self.params["limit"])


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build(query: SearchQuery, limit: int, offset: int | None = None) -> RequestDescriptor:
    """Build the request for one page of results.

    A blank text leaves ``query`` out entirely, which the backend reads as
    "no filter". Facets are always sent so the intent stays explicit.
    """

    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    if offset is not None and offset < 0:
        raise ValueError(f"offset must be non-negative, got {offset}")

    params: dict[str, str] = {}
    text = query.text.strip()
    if text:
        params["query"] = text
    params["exactPhrase"] = _flag(query.exact_phrase)
    params["searchTitle"] = _flag(query.search_title)
    params["limit"] = str(limit)
    if offset:
        params["offset"] = str(offset)
    return RequestDescriptor(params=params)


__all__ = ["EPISODES_PATH", "RequestDescriptor", "build"]
