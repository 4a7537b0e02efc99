"""SQLite connection shared between tasks behind an async lock."""

from __future__ import annotations

import asyncio
import os
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class DbConnection:
    """An open SQLite database in autocommit mode."""

    def __init__(self, db_path: str | os.PathLike[str]) -> None:
        self.connection = sqlite3.connect(
            db_path, check_same_thread=False, isolation_level=None
        )

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> DbConnection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class DbPool:
    """Serialises access to a single connection between coroutines."""

    def __init__(self, connection: DbConnection) -> None:
        self._db = connection
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[sqlite3.Connection]:
        async with self._lock:
            yield self._db.connection


def create_pool(db_path: str | os.PathLike[str]) -> DbPool:
    """Open the database at ``db_path`` and wrap it in a pool."""
    return DbPool(DbConnection(db_path))