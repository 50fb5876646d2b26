"""URL query string <-> SearchQuery mapping."""

from __future__ import annotations

from urllib.parse import parse_qs

import pytest

from episode_archive.domain.models import SearchQuery
from episode_archive.services import url_state


def test_decode_defaults_for_empty_query_string():
    assert url_state.decode("") == SearchQuery()
    assert url_state.decode("?") == SearchQuery()


def test_decode_reads_all_fields_and_ignores_unknown():
    query = url_state.decode("?query=jake+and+amir&exactPhrase=true&searchTitle=true&page=4")
    assert query == SearchQuery(text="jake and amir", exact_phrase=True, search_title=True)


@pytest.mark.parametrize("raw", ["false", "TRUE", "1", "yes", ""])
def test_decode_only_literal_true_enables_facet(raw):
    query = url_state.decode(f"query=jake&exactPhrase={raw}&searchTitle={raw}")
    assert query.exact_phrase is False
    assert query.search_title is False


def test_decode_accepts_mapping():
    assert url_state.decode({"query": "amir", "searchTitle": "true"}) == SearchQuery(
        text="amir", search_title=True
    )


def test_encode_removes_keys_set_to_default():
    result = url_state.encode(
        "query=jake&exactPhrase=true&searchTitle=true",
        {"query": "", "exactPhrase": False},
    )
    assert result == "searchTitle=true"


def test_encode_sets_values_and_preserves_untouched_keys():
    result = url_state.encode("ref=home&query=old", {"query": "new text", "exactPhrase": True})
    assert parse_qs(result) == {"ref": ["home"], "query": ["new text"], "exactPhrase": ["true"]}
    assert result.startswith("ref=home&query=new+text")


def test_encode_all_defaults_yields_no_search_parameters():
    result = url_state.encode("", url_state.to_changes(SearchQuery()))
    assert result == ""


def test_encode_single_facet_change_keeps_query():
    result = url_state.encode("query=jake", {"exactPhrase": True})
    assert url_state.decode(result) == SearchQuery(text="jake", exact_phrase=True)


@pytest.mark.parametrize(
    "query",
    [
        SearchQuery(text="jake"),
        SearchQuery(text="jake and amir", exact_phrase=True),
        SearchQuery(text="amir & co", search_title=True),
        SearchQuery(text="fired", exact_phrase=True, search_title=True),
    ],
)
def test_round_trip_through_default_url(query):
    assert url_state.decode(url_state.encode("", url_state.to_changes(query))) == query
