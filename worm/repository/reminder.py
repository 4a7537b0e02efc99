"""Storage for user reminders."""

from __future__ import annotations

import sqlite3
import time
from dataclasses import dataclass

_SECONDS_PER_DAY = 24 * 60 * 60

_COLUMNS = "id, user_id, guild_id, channel_id, message, remind_at, created_at, is_sent"


@dataclass
class Reminder:
    id: int
    user_id: int
    guild_id: int
    channel_id: int
    message: str
    remind_at: int
    created_at: int
    is_sent: bool


def _to_reminder(row: tuple) -> Reminder:
    *head, is_sent = row
    return Reminder(*head, is_sent=bool(is_sent))


def init_tables(conn: sqlite3.Connection) -> None:
    """Create the reminder table and its index if they do not exist."""
    with conn:
        conn.execute(
            """CREATE TABLE IF NOT EXISTS reminders (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL,
                channel_id INTEGER NOT NULL,
                message TEXT NOT NULL,
                remind_at INTEGER NOT NULL,
                created_at INTEGER NOT NULL,
                is_sent INTEGER NOT NULL DEFAULT 0
            )"""
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_remind_at ON reminders(remind_at, is_sent)"
        )


def insert_reminder(
    conn: sqlite3.Connection,
    user_id: int,
    guild_id: int,
    channel_id: int,
    message: str,
    remind_at: int,
) -> int:
    """Store a reminder and return its id."""
    now = int(time.time())
    with conn:
        cursor = conn.execute(
            """INSERT INTO reminders
               (user_id, guild_id, channel_id, message, remind_at, created_at, is_sent)
               VALUES (?, ?, ?, ?, ?, ?, 0)""",
            (user_id, guild_id, channel_id, message, remind_at, now),
        )
    return cursor.lastrowid


def get_pending_reminders(conn: sqlite3.Connection) -> list[Reminder]:
    """Unsent reminders that are due, earliest first."""
    now = int(time.time())
    rows = conn.execute(
        f"""SELECT {_COLUMNS} FROM reminders
            WHERE is_sent = 0 AND remind_at <= ?
            ORDER BY remind_at ASC""",
        (now,),
    )
    return [_to_reminder(row) for row in rows]


def mark_as_sent(conn: sqlite3.Connection, reminder_id: int) -> None:
    with conn:
        conn.execute("UPDATE reminders SET is_sent = 1 WHERE id = ?", (reminder_id,))


def get_user_reminders(conn: sqlite3.Connection, user_id: int) -> list[Reminder]:
    """Up to ten unsent reminders of one user, earliest first."""
    rows = conn.execute(
        f"""SELECT {_COLUMNS} FROM reminders
            WHERE user_id = ? AND is_sent = 0
            ORDER BY remind_at ASC
            LIMIT 10""",
        (user_id,),
    )
    return [_to_reminder(row) for row in rows]


def delete_reminder(conn: sqlite3.Connection, reminder_id: int, user_id: int) -> bool:
    """Delete a user's reminder; return whether anything was removed."""
    with conn:
        cursor = conn.execute(
            "DELETE FROM reminders WHERE id = ? AND user_id = ?", (reminder_id, user_id)
        )
    return cursor.rowcount > 0


def cleanup_sent_reminders(conn: sqlite3.Connection, days_old: int) -> int:
    """Remove sent reminders older than ``days_old`` days; return the count."""
    cutoff = int(time.time()) - days_old * _SECONDS_PER_DAY
    with conn:
        cursor = conn.execute(
            "DELETE FROM reminders WHERE is_sent = 1 AND created_at < ?", (cutoff,)
        )
    return cursor.rowcount