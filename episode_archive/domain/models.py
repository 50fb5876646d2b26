"""Models shared by the search services and the presentation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SearchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ErrorKind(str, Enum):
    NETWORK = "network"
    BACKEND = "backend"


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """Free text plus the two boolean facets.

    Empty text is a valid value; it means no search has been requested.
    """

    text: str = ""
    exact_phrase: bool = False
    search_title: bool = False

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    def with_changes(self, **changes) -> SearchQuery:
        return replace(self, **changes)


class Episode(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    id: str
    title: str
    link: str
    script: str = ""
    duration: str = ""
    air_date: str = ""
    scribe: str | None = None
    embed_src: str = ""


class EpisodeHit(Episode):
    """An episode as returned by a search, with its highlight map if any field matched."""

    highlight: dict[str, list[str]] | None = None


class ResultPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0)
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=0, ge=0)
    data: list[EpisodeHit] = Field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SearchSessionState:
    query: SearchQuery = field(default_factory=SearchQuery)
    results: tuple[EpisodeHit, ...] = ()
    total: int = 0
    offset: int = 0
    page_count: int = 0
    status: SearchStatus = SearchStatus.IDLE
    error_kind: ErrorKind | None = None
    request_seq: int = 0


__all__ = [
    "Episode",
    "EpisodeHit",
    "ErrorKind",
    "ResultPage",
    "SearchQuery",
    "SearchSessionState",
    "SearchStatus",
]
