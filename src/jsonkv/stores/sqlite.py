"""SQLiteStore — relational backend storing values in a JSON column via aiosqlite."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

try:
    import aiosqlite
except ImportError as exc:
    raise ImportError(
        "SQLiteStore requires the 'aiosqlite' package. Install it with: pip install aiosqlite"
    ) from exc

from jsonkv.exceptions import StoreError
from jsonkv.stores.base import Store, Value

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Values are wrapped as {"value": ...} so arrays never sit at the top level
# of the JSON column.
_ENVELOPE_FIELD = "value"

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS {table} (
    key   VARCHAR(1024) PRIMARY KEY,
    value JSON NOT NULL
)
"""


def _wrap(value: Value) -> str:
    return json.dumps({_ENVELOPE_FIELD: value}, ensure_ascii=False, allow_nan=False)


def _unwrap(raw: str) -> Value:
    envelope = json.loads(raw)
    return envelope[_ENVELOPE_FIELD]


class _ConnectionPool:
    """A small fixed-size pool of autocommit aiosqlite connections.

    Connections are opened lazily, up to ``size``.  The schema is created
    by the first connection opened.  :meth:`close` closes the idle
    connections at once; connections checked out at that moment are
    closed when they are released instead of going back to the pool.
    """

    def __init__(self, db_path: str, size: int, init_sql: str) -> None:
        self._db_path = db_path
        self._size = size
        self._init_sql = init_sql
        self._slots = asyncio.Semaphore(size)
        self._idle: list[aiosqlite.Connection] = []
        self._live: set[aiosqlite.Connection] = set()
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def size(self) -> int:
        return self._size

    async def _open(self) -> aiosqlite.Connection:
        # isolation_level=None: every statement commits on its own.
        conn = await aiosqlite.connect(self._db_path, isolation_level=None)
        try:
            async with self._init_lock:
                if not self._initialized:
                    await conn.execute(self._init_sql)
                    self._initialized = True
        except BaseException:
            await conn.close()
            raise
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        async with self._slots:
            if self._idle:
                conn = self._idle.pop()
            else:
                conn = await self._open()
                self._live.add(conn)
                logger.debug("Opened connection %d/%d to %s", len(self._live), self._size, self._db_path)
            try:
                yield conn
            finally:
                if conn in self._live:
                    self._idle.append(conn)
                else:
                    await conn.close()

    async def close(self) -> None:
        idle, self._idle = self._idle, []
        self._live.clear()
        self._initialized = False
        for conn in idle:
            await conn.close()


class SQLiteStore(Store):
    """Persistent store backed by a single SQLite table.

    Each row holds the key (primary key) and the value wrapped in a JSON
    envelope.  The envelope is an internal detail: callers always get the
    bare value back.

    Upserts try ``INSERT`` first and fall back to ``UPDATE`` on a primary
    key conflict.  Of two racing upserts for a new key at most one insert
    succeeds and the loser updates, so the row always settles on one of the
    attempted values.  If a delete removes the row between the failed
    insert and the update, the update matches nothing and the delete wins.

    Parameters:
        db_path:   Path to the SQLite database file.  Use ``":memory:"``
                   for a throwaway database (forces a pool of one).
        pool_size: Maximum number of pooled connections.
        table:     Name of the table holding the entries.
    """

    def __init__(self, db_path: str = "jsonkv.db", pool_size: int = 4, table: str = "kvs") -> None:
        if not _IDENTIFIER.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        if pool_size < 1:
            raise ValueError(f"pool_size must be at least 1, got {pool_size}")
        if db_path == ":memory:":
            pool_size = 1
        self._db_path = db_path
        self._table = table
        self._pool = _ConnectionPool(db_path, pool_size, _CREATE_TABLE.format(table=table))

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def pool_size(self) -> int:
        return self._pool.size

    async def close(self) -> None:
        await self._pool.close()

    @asynccontextmanager
    async def _connection(self, operation: str) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a pooled connection, translating engine errors to StoreError."""
        try:
            async with self._pool.acquire() as conn:
                yield conn
        except aiosqlite.Error as e:
            logger.error("SQLite error during %s: %s", operation, e)
            raise StoreError(operation, str(e)) from e
        except (ValueError, KeyError, TypeError) as e:
            # Undecodable rows or unserialisable values.
            logger.error("Bad data during %s: %s", operation, e)
            raise StoreError(operation, str(e)) from e

    # ── Store protocol ───────────────────────────────────────

    async def get_all(self) -> dict[str, Value]:
        async with self._connection("get_all") as db:
            cursor = await db.execute(f"SELECT key, value FROM {self._table}")
            rows = await cursor.fetchall()
            result = {row[0]: _unwrap(row[1]) for row in rows}
        logger.debug("get_all: %d keys", len(result))
        return result

    async def get(self, key: str) -> Value | None:
        async with self._connection("get") as db:
            cursor = await db.execute(f"SELECT value FROM {self._table} WHERE key = ?", (key,))
            row = await cursor.fetchone()
            if row is None:
                logger.debug("get %r: not found", key)
                return None
            return _unwrap(row[0])

    async def upsert(self, key: str, value: Value) -> None:
        async with self._connection("upsert") as db:
            payload = _wrap(value)
            try:
                await db.execute(
                    f"INSERT INTO {self._table} (key, value) VALUES (?, json(?))",
                    (key, payload),
                )
                logger.debug("upsert %r: inserted", key)
            except aiosqlite.IntegrityError:
                cursor = await db.execute(
                    f"UPDATE {self._table} SET value = json(?) WHERE key = ?",
                    (payload, key),
                )
                if cursor.rowcount == 0:
                    logger.debug("upsert %r: row deleted concurrently, delete wins", key)
                else:
                    logger.debug("upsert %r: updated", key)

    async def delete(self, key: str) -> int:
        async with self._connection("delete") as db:
            cursor = await db.execute(f"DELETE FROM {self._table} WHERE key = ?", (key,))
            count = cursor.rowcount
        logger.debug("delete %r: %d row(s)", key, count)
        return 1 if count else 0

    async def nuke(self) -> None:
        async with self._connection("nuke") as db:
            cursor = await db.execute(f"DELETE FROM {self._table}")
            logger.debug("nuke: removed %d row(s)", cursor.rowcount)
