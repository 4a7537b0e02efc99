"""Storage for redeem-code notification servers and seen codes."""

from __future__ import annotations

import sqlite3
import time
from dataclasses import dataclass

_SECONDS_PER_DAY = 24 * 60 * 60


@dataclass
class RedeemServer:
    id: int
    channel_id: int
    guild_id: int
    games: str
    is_active: bool


@dataclass
class RedeemCode:
    id: int
    game: str
    code: str
    description: str | None
    expiry: str | None
    created_at: int


def init_tables(conn: sqlite3.Connection) -> None:
    """Create the redeem tables if they do not exist."""
    with conn:
        conn.execute(
            """CREATE TABLE IF NOT EXISTS redeem_servers (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                channel_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL UNIQUE,
                games TEXT NOT NULL,
                is_active INTEGER NOT NULL DEFAULT 1
            )"""
        )
        conn.execute(
            """CREATE TABLE IF NOT EXISTS redeem_codes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                game TEXT NOT NULL,
                code TEXT UNIQUE NOT NULL,
                description TEXT,
                expiry TEXT,
                created_at INTEGER NOT NULL
            )"""
        )
    try:
        conn.execute("CREATE INDEX IF NOT EXISTS idx_code ON redeem_codes(code)")
    except sqlite3.Error:
        pass


def insert_server(conn: sqlite3.Connection, guild_id: int, channel_id: int, games: str) -> None:
    """Register (or replace) the notification channel for a guild."""
    with conn:
        conn.execute(
            """INSERT OR REPLACE INTO redeem_servers (guild_id, channel_id, games, is_active)
               VALUES (?, ?, ?, 1)""",
            (guild_id, channel_id, games),
        )


def get_active_servers(conn: sqlite3.Connection, game: str) -> list[RedeemServer]:
    """Active servers whose game list mentions ``game``."""
    rows = conn.execute(
        """SELECT id, channel_id, guild_id, games, is_active
           FROM redeem_servers
           WHERE is_active = 1"""
    )
    servers = (
        RedeemServer(id, channel_id, guild_id, games, bool(is_active))
        for id, channel_id, guild_id, games, is_active in rows
    )
    return [server for server in servers if game in server.games]


def disable_server(conn: sqlite3.Connection, guild_id: int) -> None:
    with conn:
        conn.execute("UPDATE redeem_servers SET is_active = 0 WHERE guild_id = ?", (guild_id,))


def enable_server(conn: sqlite3.Connection, guild_id: int) -> None:
    with conn:
        conn.execute("UPDATE redeem_servers SET is_active = 1 WHERE guild_id = ?", (guild_id,))


def insert_code(
    conn: sqlite3.Connection,
    game: str,
    code: str,
    description: str | None = None,
    expiry: str | None = None,
) -> None:
    """Record a code; codes already stored are left untouched."""
    now = int(time.time())
    with conn:
        conn.execute(
            """INSERT OR IGNORE INTO redeem_codes (game, code, description, expiry, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (game, code, description, expiry, now),
        )


def is_code_sent(conn: sqlite3.Connection, code: str) -> bool:
    (count,) = conn.execute(
        "SELECT COUNT(*) FROM redeem_codes WHERE code = ?", (code,)
    ).fetchone()
    return count > 0


def get_codes_by_game(conn: sqlite3.Connection, game: str) -> list[RedeemCode]:
    """The ten newest codes for ``game``."""
    rows = conn.execute(
        """SELECT id, game, code, description, expiry, created_at
           FROM redeem_codes
           WHERE game = ?
           ORDER BY created_at DESC
           LIMIT 10""",
        (game,),
    )
    return [RedeemCode(*row) for row in rows]


def delete_expired_codes(conn: sqlite3.Connection, days_old: int) -> int:
    """Delete codes older than ``days_old`` days; return how many were removed."""
    cutoff = int(time.time()) - days_old * _SECONDS_PER_DAY
    with conn:
        cursor = conn.execute("DELETE FROM redeem_codes WHERE created_at < ?", (cutoff,))
    return cursor.rowcount