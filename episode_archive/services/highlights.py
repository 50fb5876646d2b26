"""Turn backend highlight maps into renderable fragments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import bleach

from episode_archive.config import HighlightSettings
from episode_archive.domain.models import EpisodeHit

DEFAULT_ALLOWED_TAGS = frozenset({"em", "mark", "strong", "b"})


@dataclass(frozen=True, slots=True)
class HighlightFragment:
    fragment_html: str


class HighlightProjector:
    """Project an ``EpisodeHit`` highlight map into per-field fragments.

    Fragments are markup. With ``sanitize`` enabled every fragment is cleaned
    against an emphasis-only allow-list before it leaves the projector;
    otherwise the backend is trusted to have escaped everything except the
    emphasis tags and fragments pass through unchanged.
    """

    def __init__(
        self,
        *,
        sanitize: bool = True,
        allowed_tags: Iterable[str] = DEFAULT_ALLOWED_TAGS,
    ) -> None:
        self._sanitize = sanitize
        self._allowed_tags = frozenset(allowed_tags)

    @classmethod
    def from_settings(cls, settings: HighlightSettings) -> HighlightProjector:
        return cls(sanitize=settings.sanitize, allowed_tags=settings.tag_set())

    def project(self, hit: EpisodeHit) -> dict[str, list[HighlightFragment]]:
        if not hit.highlight:
            return {}
        return {
            field_name: [HighlightFragment(self._clean(html)) for html in fragments]
            for field_name, fragments in hit.highlight.items()
        }

    def _clean(self, html: str) -> str:
        if not self._sanitize:
            return html
        return bleach.clean(html, tags=self._allowed_tags, attributes={}, strip=True)


__all__ = ["DEFAULT_ALLOWED_TAGS", "HighlightFragment", "HighlightProjector"]
