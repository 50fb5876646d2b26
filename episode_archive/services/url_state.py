"""Shareable URL state for a search.

Absence of a key in the query string means its default value, so a query
left at defaults encodes to an empty string.
"""

from __future__ import annotations

from typing import Mapping
from urllib.parse import parse_qsl, urlencode

from episode_archive.domain.models import SearchQuery

QUERY_KEY = "query"
EXACT_PHRASE_KEY = "exactPhrase"
SEARCH_TITLE_KEY = "searchTitle"

QueryParams = str | Mapping[str, str]


def _pairs(params: QueryParams) -> list[tuple[str, str]]:
    if isinstance(params, str):
        return parse_qsl(params.lstrip("?"), keep_blank_values=True)
    return [(str(key), str(value)) for key, value in params.items()]


def _first(pairs: list[tuple[str, str]], key: str) -> str | None:
    for name, value in pairs:
        if name == key:
            return value
    return None


def decode(query_string: QueryParams) -> SearchQuery:
    """Read a ``SearchQuery`` from URL parameters, ignoring unknown keys."""

    pairs = _pairs(query_string)
    return SearchQuery(
        text=_first(pairs, QUERY_KEY) or "",
        exact_phrase=_first(pairs, EXACT_PHRASE_KEY) == "true",
        search_title=_first(pairs, SEARCH_TITLE_KEY) == "true",
    )


def _stringify(value: str | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode(current_params: QueryParams, changes: Mapping[str, str | bool]) -> str:
    """Apply ``changes`` on top of ``current_params`` and return the new query string.

    A change equal to its default (``""`` or ``False``) drops the key. Keys
    not mentioned in ``changes`` are kept as they are.
    """

    pairs = _pairs(current_params)
    for key, value in changes.items():
        if value == "" or value is False:
            pairs = [pair for pair in pairs if pair[0] != key]
            continue
        rendered = _stringify(value)
        updated: list[tuple[str, str]] = []
        replaced = False
        for name, existing in pairs:
            if name != key:
                updated.append((name, existing))
            elif not replaced:
                updated.append((name, rendered))
                replaced = True
        if not replaced:
            updated.append((key, rendered))
        pairs = updated
    return urlencode(pairs)


def to_changes(query: SearchQuery) -> dict[str, str | bool]:
    return {
        QUERY_KEY: query.text,
        EXACT_PHRASE_KEY: query.exact_phrase,
        SEARCH_TITLE_KEY: query.search_title,
    }


__all__ = [
    "EXACT_PHRASE_KEY",
    "QUERY_KEY",
    "SEARCH_TITLE_KEY",
    "decode",
    "encode",
    "to_changes",
]
