"""SQLite repository implementations."""

from timmybot.infrastructure.persistence.repositories.allowlist_repository import (
    SQLiteAllowlistRepository,
)
from timmybot.infrastructure.persistence.repositories.queue_store import SQLiteQueueStore

__all__ = [
    "SQLiteQueueStore",
    "SQLiteAllowlistRepository",
]
