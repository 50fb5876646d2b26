"""Shared pytest fixtures for the search session tests."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import pytest

from episode_archive.config import ArchiveSettings
from episode_archive.domain.models import ResultPage
from episode_archive.services.requests import RequestDescriptor


def episode_payload(index: int, **overrides: Any) -> dict[str, Any]:
    payload = {
        "id": f"ep-{index}",
        "title": f"Episode {index}",
        "link": f"https://example.com/episodes/{index}",
        "script": f"Script for episode {index}",
        "duration": "3:12",
        "air_date": "2009-06-01",
        "embed_src": f"https://example.com/embed/{index}",
    }
    payload.update(overrides)
    return payload


def page_payload(total: int, start: int, count: int, *, offset: int = 0, limit: int = 50) -> dict:
    return {
        "total": total,
        "offset": offset,
        "limit": limit,
        "data": [episode_payload(start + i) for i in range(count)],
    }


class ScriptedBackend:
    """Fake backend answering each request through ``responder``.

    The responder receives the request descriptor and returns a page payload
    or raises. When ``gate`` is set, requests wait for it before answering.
    """

    def __init__(self, responder: Callable[[RequestDescriptor], Any]) -> None:
        self._responder = responder
        self.requests: list[RequestDescriptor] = []
        self.cancelled: list[RequestDescriptor] = []
        self.gate: asyncio.Event | None = None

    async def fetch(self, descriptor: RequestDescriptor) -> ResultPage:
        self.requests.append(descriptor)
        gate = self.gate
        if gate is not None:
            try:
                await gate.wait()
            except asyncio.CancelledError:
                self.cancelled.append(descriptor)
                raise
        return ResultPage.model_validate(self._responder(descriptor))


@pytest.fixture
def settings() -> ArchiveSettings:
    return ArchiveSettings(_env_file=None)


@pytest.fixture
def make_backend() -> Callable[[Callable[[RequestDescriptor], Any]], ScriptedBackend]:
    return ScriptedBackend


@pytest.fixture
def payloads():
    return episode_payload, page_payload
