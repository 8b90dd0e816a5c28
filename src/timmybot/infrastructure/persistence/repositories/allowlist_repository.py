"""SQLite implementation of the guild allowlist repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from timmybot.domain.access.entities import AllowlistEntry
from timmybot.domain.access.repository import AllowlistRepository
from timmybot.domain.queue.entities import now_millis
from timmybot.domain.shared.messages import LogTemplates
from timmybot.infrastructure.persistence.database import translate_store_errors

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteAllowlistRepository(AllowlistRepository):
    def __init__(self, database: Database) -> None:
        self._db = database
        self._table = database.allowlist_table

    async def get(self, guild_id: int) -> AllowlistEntry | None:
        with translate_store_errors("allowlist_get", "AllowlistEntry"):
            row = await self._db.fetch_one(
                f"SELECT guild_id, approved, added_at FROM {self._table} WHERE guild_id = ?",
                (guild_id,),
            )
        return self._row_to_entry(row) if row else None

    async def add(self, guild_id: int) -> AllowlistEntry:
        entry = AllowlistEntry(guild_id=guild_id, approved=True, added_at_epoch_millis=now_millis())
        with translate_store_errors("allowlist_add", "AllowlistEntry"):
            await self._db.execute(
                f"""
                INSERT INTO {self._table} (guild_id, approved, added_at)
                VALUES (?, 1, ?)
                ON CONFLICT(guild_id) DO UPDATE SET approved = 1
                """,
                (guild_id, entry.added_at_epoch_millis),
            )
        logger.info(LogTemplates.ALLOWLIST_ADDED, guild_id)
        return await self.get(guild_id) or entry

    async def remove(self, guild_id: int) -> bool:
        with translate_store_errors("allowlist_remove", "AllowlistEntry"):
            cursor = await self._db.execute(
                f"DELETE FROM {self._table} WHERE guild_id = ?",
                (guild_id,),
            )
        removed = cursor.rowcount > 0
        if removed:
            logger.info(LogTemplates.ALLOWLIST_REMOVED, guild_id)
        return removed

    async def list_all(self) -> list[AllowlistEntry]:
        with translate_store_errors("allowlist_list", "AllowlistEntry"):
            rows = await self._db.fetch_all(
                f"SELECT guild_id, approved, added_at FROM {self._table} ORDER BY guild_id ASC"
            )
        return [self._row_to_entry(row) for row in rows]

    @staticmethod
    def _row_to_entry(row: dict[str, Any]) -> AllowlistEntry:
        return AllowlistEntry(
            guild_id=row["guild_id"],
            approved=bool(row["approved"]),
            added_at_epoch_millis=row["added_at"],
        )
