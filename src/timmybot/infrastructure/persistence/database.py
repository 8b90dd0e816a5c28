"""SQLite access for the queue and allowlist tables.

Every call opens its own connection (WAL mode, busy timeout), so callers never
share cursors. An in-memory database is kept alive by one extra connection
for as long as the ``Database`` is open.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid
from collections.abc import AsyncGenerator, Iterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiosqlite

from timmybot.config.settings import DatabaseSettings
from timmybot.domain.shared.constants import DatabaseURLSchemes, SQLPragmas
from timmybot.domain.shared.exceptions import ConcurrencyError, StoreUnavailableError
from timmybot.domain.shared.messages import LogTemplates
from timmybot.domain.shared.validators import validate_sql_identifier

logger = logging.getLogger(__name__)

Params = tuple[Any, ...]

_QUEUE_SCHEMA = """
CREATE TABLE IF NOT EXISTS {table} (
    guild_id INTEGER NOT NULL,
    queue_position INTEGER NOT NULL CHECK (queue_position >= 1),
    track_ref TEXT NOT NULL,
    added_at INTEGER NOT NULL,
    PRIMARY KEY (guild_id, queue_position)
)
"""

_ALLOWLIST_SCHEMA = """
CREATE TABLE IF NOT EXISTS {table} (
    guild_id INTEGER PRIMARY KEY,
    approved INTEGER NOT NULL DEFAULT 1,
    added_at INTEGER NOT NULL
)
"""


def _path_from_url(url: str) -> str:
    # sqlite:///relative.db and sqlite:////abs/path.db
    return url.removeprefix(f"{DatabaseURLSchemes.SQLITE}/")


class Database:
    def __init__(self, url: str, settings: DatabaseSettings | None = None) -> None:
        settings = settings or DatabaseSettings()
        self._db_path = _path_from_url(url)
        self._busy_timeout = settings.busy_timeout_ms
        self._connection_timeout = settings.connection_timeout_s
        self._queue_table = validate_sql_identifier(settings.queue_table)
        self._allowlist_table = validate_sql_identifier(settings.allowlist_table)

        self._initialized = False
        self._keepalive_conn: aiosqlite.Connection | None = None

        # A private shared-cache name per instance: two in-memory databases in
        # one process must not see each other's tables.
        self._memory_uri = DatabaseURLSchemes.MEMORY_SHARED_URI.format(name=uuid.uuid4().hex)
        # Shared-cache table locks ignore busy_timeout.
        self._memory_lock = asyncio.Lock()

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_memory(self) -> bool:
        return self._db_path == DatabaseURLSchemes.MEMORY

    @property
    def queue_table(self) -> str:
        return self._queue_table

    @property
    def allowlist_table(self) -> str:
        return self._allowlist_table

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Create the tables. Safe to call more than once."""
        if self._initialized:
            return

        if self.is_memory:
            if self._keepalive_conn is None:
                self._keepalive_conn = await self._open()
            await self._create_tables(self._keepalive_conn)
            await self._keepalive_conn.commit()
        else:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            async with self._transaction() as conn:
                await self._create_tables(conn)

        self._initialized = True
        logger.info(LogTemplates.DATABASE_INITIALIZED, self._db_path)

    async def close(self) -> None:
        keepalive, self._keepalive_conn = self._keepalive_conn, None
        self._initialized = False
        if keepalive is not None:
            await keepalive.close()
        logger.info(LogTemplates.DATABASE_CLOSED)

    async def _create_tables(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(_QUEUE_SCHEMA.format(table=self._queue_table))
        await conn.execute(_ALLOWLIST_SCHEMA.format(table=self._allowlist_table))

    # ─────────────────────────────────────────────────────────────────
    # Connections
    # ─────────────────────────────────────────────────────────────────

    async def _open(self) -> aiosqlite.Connection:
        target = self._memory_uri if self.is_memory else self._db_path
        conn = await aiosqlite.connect(target, uri=self.is_memory, timeout=self._connection_timeout)
        conn.row_factory = aiosqlite.Row

        for pragma in (
            SQLPragmas.JOURNAL_MODE_WAL,
            SQLPragmas.FOREIGN_KEYS_ON,
            SQLPragmas.BUSY_TIMEOUT.format(timeout=self._busy_timeout),
        ):
            await conn.execute(pragma)
        return conn

    @asynccontextmanager
    async def _transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """One connection, committed on success and rolled back on any error."""
        guard = self._memory_lock if self.is_memory else contextlib.nullcontext()
        async with guard:
            conn = await self._open()
            try:
                yield conn
                await conn.commit()
            except Exception:
                with contextlib.suppress(aiosqlite.Error):
                    await conn.rollback()
                raise
            finally:
                await conn.close()

    # ─────────────────────────────────────────────────────────────────
    # Statements
    # ─────────────────────────────────────────────────────────────────

    async def execute(self, sql: str, parameters: Params = ()) -> aiosqlite.Cursor:
        """Run one statement in its own transaction.

        The returned cursor still carries ``rowcount`` and ``lastrowid``.
        """
        async with self._transaction() as conn:
            return await conn.execute(sql, parameters)

    async def fetch_one(self, sql: str, parameters: Params = ()) -> dict[str, Any] | None:
        async with self._transaction() as conn:
            cursor = await conn.execute(sql, parameters)
            row = await cursor.fetchone()
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, parameters: Params = ()) -> list[dict[str, Any]]:
        async with self._transaction() as conn:
            cursor = await conn.execute(sql, parameters)
            rows = await cursor.fetchall()
        return [dict(row) for row in rows]


@contextlib.contextmanager
def translate_store_errors(operation: str, entity_type: str = "QueueEntry") -> Iterator[None]:
    """Map sqlite errors onto domain exceptions.

    A constraint violation becomes ``ConcurrencyError``; any other database or
    OS failure becomes ``StoreUnavailableError``.
    """
    try:
        yield
    except aiosqlite.IntegrityError as e:
        raise ConcurrencyError(entity_type, str(e)) from e
    except (aiosqlite.Error, OSError) as e:
        logger.error(LogTemplates.STORE_ERROR, operation, e)
        raise StoreUnavailableError(operation, str(e)) from e
