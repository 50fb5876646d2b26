"""Merge successive result pages into one ordered result list."""

from __future__ import annotations

from typing import Sequence

from episode_archive.domain.models import EpisodeHit, ResultPage
from episode_archive.logging import logger


def accumulate(
    current: Sequence[EpisodeHit],
    page: ResultPage,
    *,
    offset: int | None = None,
    total: int | None = None,
) -> tuple[EpisodeHit, ...]:
    """Replace on the first page, append on later ones.

    ``offset`` is the offset that was requested and ``total`` the result
    count the list is held to; both default to what the backend echoed in
    ``page``. Records are not de-duplicated across pages. The merged list
    never grows past the total.
    """

    offset = page.offset if offset is None else offset
    total = page.total if total is None else total
    if offset == 0:
        merged = tuple(page.data)
    else:
        merged = (*current, *page.data)

    if len(merged) > total:
        logger.warning(
            "results_capped",
            total=total,
            received=len(merged),
            offset=offset,
        )
        merged = merged[:total]
    return merged


__all__ = ["accumulate"]
