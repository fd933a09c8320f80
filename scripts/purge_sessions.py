"""
Delete sessions idle for longer than SESSION_MAX_AGE_DAYS (or --days).

Meant for cron; the API itself never expires sessions.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from auth import repository
from core import db
from core.log import configure_logging
from core.settings import Settings

logger = logging.getLogger("purge_sessions")


async def run(days: int, settings: Settings) -> int:
    await db.init_pool(settings.database_url, schema=settings.db_schema)
    try:
        return await repository.purge_stale_sessions(days)
    finally:
        await db.close_pool()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="Delete idle sessions.")
    parser.add_argument("--days", type=int, default=settings.session.max_age_days)
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    purged = asyncio.run(run(max(args.days, 1), settings))
    logger.info("sessions_purged count=%s days=%s", purged, args.days)
    return 0


if __name__ == "__main__":
    sys.exit(main())
