"""
Database connection management: singleton connection model.

SQLite performs best with a single long-lived connection, so one aiosqlite
connection is opened at startup and shared for the whole bot lifecycle.

Concurrency model
-----------------
SQLite is single-writer. Writes go through ``transaction()``, which holds a
write semaphore so async tasks queue up instead of fighting SQLite's busy
timeout. Reads are safe to run concurrently in WAL mode and take no lock.

Usage
-----
    await db_connection.open(path_from_database_url(os.environ["DATABASE_URL"]))

    async with db_connection.read() as conn:
        cursor = await conn.execute("SELECT ...")

    async with db_connection.transaction() as conn:
        await conn.execute("INSERT ...")
        # commits on clean exit, rolls back on exception

    await db_connection.close()
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from logcord.util.logger import get_logger

logger = get_logger("database_connection")

IN_MEMORY = ":memory:"

# ── Pragmas applied once when the connection is opened ──────────────────────
_PRAGMAS = [
    "PRAGMA journal_mode = WAL",
    "PRAGMA foreign_keys = ON",
    "PRAGMA synchronous = NORMAL",    # safe with WAL; faster than FULL
    "PRAGMA temp_store = MEMORY",
]


def path_from_database_url(url: str) -> Path | str:
    """
    Turn a ``DATABASE_URL`` into something ``aiosqlite.connect`` accepts.

    Accepts ``sqlite://path``, ``sqlite:path`` and plain paths; query strings
    such as ``?mode=rwc`` are dropped.

    Raises:
        ValueError: If the URL is empty or names another database engine.
    """
    value = url.strip()
    if not value:
        raise ValueError("DATABASE_URL is empty")

    if "://" in value and not value.startswith("sqlite://"):
        raise ValueError(f"Only sqlite databases are supported, got {value!r}")

    for prefix in ("sqlite://", "sqlite:"):
        if value.startswith(prefix):
            value = value[len(prefix):]
            break

    value = value.split("?", 1)[0]
    if not value:
        raise ValueError(f"DATABASE_URL {url!r} does not name a database file")
    if value == IN_MEMORY:
        return IN_MEMORY
    return Path(value).expanduser().resolve()


class ConnectionManager:
    """
    Singleton wrapper around a single aiosqlite connection.

    Thread / task safety
    --------------------
    * Reads:  ``async with read()``; WAL allows concurrent reads.
    * Writes: ``async with transaction()``; serialised by ``_write_sem``.
    """

    def __init__(self) -> None:
        self._conn: aiosqlite.Connection | None = None
        self._write_sem = asyncio.Semaphore(1)   # one writer at a time
        self._path: Path | str | None = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self, path: Path | str) -> None:
        """
        Open the database and apply pragmas.

        Should be called once during startup, before the store is used.
        """
        if self._conn is not None:
            logger.warning("[DB CONNECTION] open() called but connection already exists, ignoring")
            return

        self._path = path
        if isinstance(path, Path):
            path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = await aiosqlite.connect(path)
        self._conn.row_factory = aiosqlite.Row  # rows are dict-like

        for pragma in _PRAGMAS:
            await self._conn.execute(pragma)
        await self._conn.commit()

        logger.info("[DB CONNECTION] Opened connection to %s", path)

    async def close(self) -> None:
        """Flush WAL and close the connection."""
        if self._conn is None:
            return

        try:
            await self._conn.execute("PRAGMA wal_checkpoint(TRUNCATE)")
            await self._conn.commit()
        except aiosqlite.Error:
            logger.exception("[DB CONNECTION] WAL checkpoint failed during close")
        finally:
            await self._conn.close()
            self._conn = None
            logger.info("[DB CONNECTION] Connection closed")

    # ------------------------------------------------------------------
    # Connection access
    # ------------------------------------------------------------------

    @property
    def connection(self) -> aiosqlite.Connection:
        """
        The raw aiosqlite connection.

        Raises:
            RuntimeError: If the connection has not been opened yet.
        """
        if self._conn is None:
            raise RuntimeError(
                "ConnectionManager: connection is not open. "
                "Call await db_connection.open(path) at startup."
            )
        return self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Serialised write transaction: commits on clean exit, rolls back on error.

        Raises:
            RuntimeError: If the connection is not open.
        """
        conn = self.connection           # raises if not open

        async with self._write_sem:      # serialise writers
            try:
                yield conn
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise

    @asynccontextmanager
    async def read(self) -> AsyncIterator[aiosqlite.Connection]:
        """Read access; symmetrical with ``transaction()`` but takes no lock."""
        yield self.connection


# Module-level singleton
db_connection = ConnectionManager()
