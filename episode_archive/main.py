"""Command line entrypoint: run a shared search link and print the results."""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

import httpx

from episode_archive.config import get_settings
from episode_archive.logging import configure_logging, logger
from episode_archive.services.backend import EpisodeBackend
from episode_archive.services.navigation import MemoryNavigator
from episode_archive.services.session import SearchSession
from episode_archive.views import render_text


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="episode-archive", description=__doc__)
    parser.add_argument(
        "query_string",
        nargs="?",
        default="",
        help='URL query string, e.g. "?query=jake&exactPhrase=true".',
    )
    parser.add_argument(
        "--more",
        type=int,
        default=0,
        metavar="N",
        help="Load N additional pages after the first one.",
    )
    return parser.parse_args(argv)


async def main(argv: Sequence[str] | None = None) -> str:
    args = parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    navigator = MemoryNavigator(args.query_string)
    logger.info("cli_starting", environment=settings.environment, location=navigator.location)
    async with httpx.AsyncClient() as client:
        backend = EpisodeBackend(client, settings=settings.backend)
        async with SearchSession(backend, navigator, settings=settings) as session:
            await session.mount()
            for _ in range(max(args.more, 0)):
                if not session.has_more:
                    break
                await session.load_more()
            output = render_text(session)

    print(output)
    return output


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
