"""Bot start-up: configuration, database and background services."""

from __future__ import annotations

import argparse
import asyncio
import enum
import logging
import re
import sqlite3
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from worm.commands import Data
from worm.config import DEFAULT_PROMPT_FILE, Config
from worm.discord import DiscordHttp
from worm.errors import BotError, ConfigError
from worm.repository import redeem, reminder
from worm.repository.connection import create_pool
from worm.services.redeem_checker import start_code_checker

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "redeem_bot.db"
OWNER_PLACEHOLDER = "YOUR_DISCORD_USER_ID"
PRESENCE_INTERVAL = 60.0
COMMAND_PREFIX = "!"

_U64_LIMIT = 2**64
_OWNER_ID_PATTERN = re.compile(r"\+?[0-9]+")


class ActivityKind(enum.IntEnum):
    PLAYING = 0
    LISTENING = 2
    WATCHING = 3


@dataclass(frozen=True)
class Activity:
    kind: ActivityKind
    name: str


ACTIVITIES = (
    Activity(ActivityKind.PLAYING, "YouTube"),
    Activity(ActivityKind.WATCHING, "Discord"),
    Activity(ActivityKind.LISTENING, "Music"),
)


def parse_owner_id(value: str | None) -> int:
    """Parse the owner's user id, an unsigned 64-bit integer."""
    text = value if value is not None else OWNER_PLACEHOLDER
    if not _OWNER_ID_PATTERN.fullmatch(text):
        raise ConfigError("OWNER_ID must be a valid u64")
    owner = int(text)
    if owner >= _U64_LIMIT:
        raise ConfigError("OWNER_ID must be a valid u64")
    return owner


def next_activity(index: int) -> tuple[Activity, int]:
    """The activity to show at ``index`` and the index to use next."""
    position = index % len(ACTIVITIES)
    return ACTIVITIES[position], (position + 1) % len(ACTIVITIES)


async def run(config: Config, db_path: str | Path = DEFAULT_DB_PATH) -> None:
    """Prepare the database and run the background services until cancelled."""
    owner_id = parse_owner_id(config.client_id)

    try:
        pool = create_pool(db_path)
    except sqlite3.Error as exc:
        raise ConfigError(f"Failed to initialize database: {exc}") from exc

    async with pool.acquire() as conn:
        try:
            redeem.init_tables(conn)
            reminder.init_tables(conn)
        except sqlite3.Error as exc:
            raise ConfigError(f"Failed to initialize database: {exc}") from exc

    data = Data(db=pool, owners=frozenset({owner_id}))
    logger.info("Owners: %s", sorted(data.owners))

    async with DiscordHttp(config.token) as http:
        task = await start_code_checker(pool, http)
        print("Code checker service started!")
        await task


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point; returns the process exit status."""
    parser = argparse.ArgumentParser(prog="worm", description="Run the chat bot.")
    parser.add_argument("--db", default=DEFAULT_DB_PATH, help="SQLite database path")
    parser.add_argument(
        "--prompt-file", default=DEFAULT_PROMPT_FILE, help="system prompt file"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    load_dotenv(Path(".env"))

    try:
        try:
            config = Config.from_env(args.prompt_file)
        except ConfigError as exc:
            raise ConfigError(f"Failed to load config: {exc.message}") from exc
        asyncio.run(run(config, args.db))
    except BotError as exc:
        print(exc, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())