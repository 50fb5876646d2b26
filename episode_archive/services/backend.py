"""HTTP client for the episode search endpoint."""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from episode_archive.config import BackendSettings
from episode_archive.domain.models import ResultPage
from episode_archive.logging import logger
from episode_archive.services.exceptions import BackendError, NetworkFailure
from episode_archive.services.requests import RequestDescriptor


class EpisodeBackend:
    """Fetch result pages from ``GET /api/episodes``.

    Failures are not retried; the caller decides whether to search again.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: BackendSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or BackendSettings()

    def url_for(self, descriptor: RequestDescriptor) -> str:
        return f"{str(self._settings.base_url).rstrip('/')}{descriptor.path}"

    async def fetch(self, descriptor: RequestDescriptor) -> ResultPage:
        url = self.url_for(descriptor)
        try:
            response = await self._client.get(
                url,
                params=descriptor.params,
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            logger.warning(
                "backend_request_failed",
                url=url,
                status_code=status_code,
                error=str(exc),
            )
            raise BackendError(
                f"Episode search failed with status {status_code}", status_code=status_code
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("backend_request_failed", url=url, error=str(exc))
            raise NetworkFailure(f"Episode search request failed: {exc}") from exc

        try:
            return ResultPage.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning(
                "backend_request_failed",
                url=url,
                status_code=response.status_code,
                error="invalid response body",
            )
            raise BackendError(
                "Episode search returned an invalid body", status_code=response.status_code
            ) from exc


__all__ = ["EpisodeBackend"]
