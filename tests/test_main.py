"""Tests for logging configuration and the command line entrypoint."""

from __future__ import annotations

import httpx
import pytest
import structlog

from episode_archive import main as main_module
from episode_archive.config import ArchiveSettings, get_settings
from episode_archive.logging import configure_logging


def test_configure_logging_outputs_json(capsys):
    configure_logging()
    logger = structlog.get_logger()
    logger.info("unit-test", foo="bar")
    out = capsys.readouterr().out
    assert "unit-test" in out
    assert "foo" in out


def test_configure_logging_uses_settings_level_and_environment(capsys):
    configure_logging(ArchiveSettings(_env_file=None, log_level="WARNING", environment="staging"))
    logger = structlog.get_logger()
    logger.info("quiet-event")
    logger.warning("loud-event", offset=10)
    out = capsys.readouterr().out
    assert "quiet-event" not in out
    assert "loud-event" in out
    assert "\"environment\": \"staging\"" in out


def test_parse_args_defaults():
    args = main_module.parse_args([])
    assert args.query_string == ""
    assert args.more == 0


@pytest.mark.asyncio
async def test_main_runs_shared_link(monkeypatch, payloads):
    _, page_payload = payloads
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        offset = int(request.url.params.get("offset", 0))
        limit = int(request.url.params["limit"])
        start = 0 if offset == 0 else 50 + (offset // 10 - 1) * 10
        count = min(limit, 55 - start)
        return httpx.Response(200, json=page_payload(55, start, count, offset=offset, limit=limit))

    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):
        return real_client(*args, transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(main_module.httpx, "AsyncClient", client_factory)
    monkeypatch.setenv("ARCHIVE_BACKEND__BASE_URL", "https://archive.example")
    get_settings.cache_clear()
    try:
        output = await main_module.main(["?query=jake&searchTitle=true", "--more", "3"])
    finally:
        get_settings.cache_clear()

    assert output.splitlines()[0] == "Found 55 episodes"
    assert "Episode 54" in output
    assert "Load more" not in output
    assert [r.url.params.get("offset") for r in seen] == [None, "10"]
    assert all(r.url.params["searchTitle"] == "true" for r in seen)
    assert seen[0].url.host == "archive.example"
