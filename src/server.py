"""Protean Engine runner for the reviewhub domain.

Starts the Engine that processes events asynchronously when the
production overlay switches event processing to async: projectors
(ReviewCard, ModerationQueue, CompanyRating, AdminActivity) run here
instead of inside the request.

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import asyncio

from protean.server.engine import Engine


def _get_domain():
    from reviewhub.domain import reviewhub

    reviewhub.init()
    return reviewhub


async def run():
    engine = Engine(_get_domain())
    await engine.run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
