"""SQLite implementation of the per-guild queue store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from timmybot.domain.queue.entities import QueueEntry
from timmybot.domain.queue.repository import QueueStore
from timmybot.domain.shared.constants import LimitConstants
from timmybot.domain.shared.messages import ErrorMessages
from timmybot.infrastructure.persistence.database import translate_store_errors

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteQueueStore(QueueStore):
    """Rows keyed by ``(guild_id, queue_position)``; the primary key rejects duplicates."""

    def __init__(
        self,
        database: Database,
        *,
        max_batch_size: int = LimitConstants.DEFAULT_MAX_BATCH_DELETE,
    ) -> None:
        self._db = database
        self._table = database.queue_table
        self._max_batch_size = max_batch_size

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    async def put(self, entry: QueueEntry) -> None:
        with translate_store_errors("put"):
            await self._db.execute(
                f"""
                INSERT INTO {self._table} (guild_id, queue_position, track_ref, added_at)
                VALUES (?, ?, ?, ?)
                """,
                (entry.guild_id, entry.position, entry.track_ref, entry.added_at_epoch_millis),
            )

    async def get(self, guild_id: int, position: int) -> QueueEntry | None:
        with translate_store_errors("get"):
            row = await self._db.fetch_one(
                f"""
                SELECT guild_id, queue_position, track_ref, added_at FROM {self._table}
                WHERE guild_id = ? AND queue_position = ?
                """,
                (guild_id, position),
            )
        return self._row_to_entry(row) if row else None

    async def delete(self, guild_id: int, position: int) -> bool:
        with translate_store_errors("delete"):
            cursor = await self._db.execute(
                f"DELETE FROM {self._table} WHERE guild_id = ? AND queue_position = ?",
                (guild_id, position),
            )
        return cursor.rowcount > 0

    async def query(self, guild_id: int, limit: int | None = None) -> list[QueueEntry]:
        sql = f"""
            SELECT guild_id, queue_position, track_ref, added_at FROM {self._table}
            WHERE guild_id = ?
            ORDER BY queue_position ASC
        """
        params: tuple[Any, ...] = (guild_id,)
        if limit is not None:
            sql += " LIMIT ?"
            params = (guild_id, limit)

        with translate_store_errors("query"):
            rows = await self._db.fetch_all(sql, params)
        return [self._row_to_entry(row) for row in rows]

    async def count(self, guild_id: int) -> int:
        with translate_store_errors("count"):
            row = await self._db.fetch_one(
                f"SELECT COUNT(*) AS n FROM {self._table} WHERE guild_id = ?",
                (guild_id,),
            )
        return row["n"] if row else 0

    async def batch_delete(self, guild_id: int, positions: list[int]) -> int:
        if len(positions) > self._max_batch_size:
            raise ValueError(
                ErrorMessages.BATCH_TOO_LARGE.format(
                    size=len(positions), limit=self._max_batch_size
                )
            )
        if not positions:
            return 0

        placeholders = ", ".join("?" for _ in positions)
        with translate_store_errors("batch_delete"):
            cursor = await self._db.execute(
                f"""
                DELETE FROM {self._table}
                WHERE guild_id = ? AND queue_position IN ({placeholders})
                """,
                (guild_id, *positions),
            )
        return cursor.rowcount

    @staticmethod
    def _row_to_entry(row: dict[str, Any]) -> QueueEntry:
        return QueueEntry(
            guild_id=row["guild_id"],
            position=row["queue_position"],
            track_ref=row["track_ref"],
            added_at_epoch_millis=row["added_at"],
        )
