"""
Create a login account.

New accounts start as `pending` with must-change-password set, so the first
login activates them and the user has to pick their own password.

Usage:
  python scripts/create_account.py user@example.com --name "Example User"
  (password is prompted for unless --password is given)
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

from dotenv import load_dotenv

from auth import repository
from auth.security import hash_password
from core import db
from core.settings import Settings


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a login account.")
    parser.add_argument("username")
    parser.add_argument("--name", default=None)
    parser.add_argument("--password", default=None)
    parser.add_argument("--active", action="store_true", help="skip the pending state")
    parser.add_argument(
        "--no-password-change",
        action="store_true",
        help="do not force a password change on first login",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, settings: Settings) -> dict:
    password = args.password or getpass.getpass("Initial password: ")
    if len(password) < settings.min_password_length:
        raise SystemExit(f"Password must be at least {settings.min_password_length} characters")

    await db.init_pool(settings.database_url, schema=settings.db_schema)
    try:
        return await repository.create_account(
            username=args.username,
            name=args.name,
            password_hash=hash_password(password),
            status="active" if args.active else "pending",
            must_change_password=not args.no_password_change,
        )
    finally:
        await db.close_pool()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    row = asyncio.run(run(parse_args(argv), Settings.from_env()))
    print(f"created user_id={row['user_id']} username={row['username']} status={row['status']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
