"""Plain-text presentation of a search session."""

from __future__ import annotations

from datetime import datetime

from episode_archive.services.session import SearchSession


def format_air_date(value: str) -> str:
    """Render an ISO date as ``Month D, YYYY``; anything else is returned unchanged."""

    raw = (value or "").strip()
    if not raw:
        return ""
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return value
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def render_text(session: SearchSession) -> str:
    lines = [session.summary()]
    for hit in session.results:
        lines.append("")
        lines.append(hit.title)
        lines.append(f"{format_air_date(hit.air_date)} | {hit.duration}")
        for fragments in session.highlights(hit).values():
            lines.extend(f"  {fragment.fragment_html}" for fragment in fragments)
        lines.append(f"Watch Episode: {hit.link}")
    if session.has_more:
        shown = len(session.results)
        lines.extend(["", f"Showing {shown} of {session.state.total}. Load more results available."])
    return "\n".join(lines)


__all__ = ["format_air_date", "render_text"]
