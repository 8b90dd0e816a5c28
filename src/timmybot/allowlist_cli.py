#!/usr/bin/env python3
"""TimmyBot Allowlist Manager

Administers which guilds may use guild-scoped commands. The bot itself only
reads the allowlist; approvals are granted and revoked here.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from timmybot.config.settings import get_settings
from timmybot.domain.shared.exceptions import DomainError
from timmybot.domain.shared.validators import validate_discord_snowflake
from timmybot.infrastructure.persistence.database import Database
from timmybot.infrastructure.persistence.repositories.allowlist_repository import (
    SQLiteAllowlistRepository,
)


def _guild_id(value: str) -> int:
    """argparse type for Discord guild IDs."""
    try:
        return validate_discord_snowflake(int(value))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid guild id: {value}") from e


async def add_guild(database: Database, guild_id: int) -> int:
    repo = SQLiteAllowlistRepository(database)
    await repo.add(guild_id)
    print(f"[ok] Guild {guild_id} is now allowlisted.")
    return 0


async def remove_guild(database: Database, guild_id: int) -> int:
    repo = SQLiteAllowlistRepository(database)
    if not await repo.remove(guild_id):
        print(f"[ok] Guild {guild_id} was not on the allowlist.")
        return 0
    print(f"[ok] Removed guild {guild_id} from the allowlist.")
    return 0


async def list_guilds(database: Database) -> int:
    repo = SQLiteAllowlistRepository(database)
    entries = await repo.list_all()
    if not entries:
        print("[ok] The allowlist is empty.")
        return 0

    for entry in entries:
        status = "approved" if entry.approved else "revoked"
        print(f"  {entry.guild_id}  {status}")
    print(f"[ok] {len(entries)} guild(s) listed.")
    return 0


async def run(args: argparse.Namespace, database: Database) -> int:
    await database.initialize()
    try:
        if args.action == "add":
            return await add_guild(database, args.guild_id)
        if args.action == "remove":
            return await remove_guild(database, args.guild_id)
        return await list_guilds(database)
    finally:
        await database.close()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        description="Manage the TimmyBot guild allowlist.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s add 123456789012345678      # Allow a guild
  %(prog)s remove 123456789012345678   # Revoke a guild
  %(prog)s list                        # Show allowlisted guilds
        """,
    )

    parser.add_argument(
        "--database-url",
        "-d",
        default=None,
        help="database URL (default: DATABASE__URL or the bot's default)",
    )

    subparsers = parser.add_subparsers(dest="action", required=True)
    add = subparsers.add_parser("add", help="allow a guild")
    add.add_argument("guild_id", type=_guild_id)
    remove = subparsers.add_parser("remove", help="revoke a guild")
    remove.add_argument("guild_id", type=_guild_id)
    subparsers.add_parser("list", help="list allowlisted guilds")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    db_settings = get_settings().database
    database = Database(args.database_url or db_settings.url, settings=db_settings)

    try:
        return asyncio.run(run(args, database))
    except DomainError as e:
        print(f"[err] {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
