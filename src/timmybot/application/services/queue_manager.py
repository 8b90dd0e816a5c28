"""Per-guild FIFO queues over a persistent store with a write-through cache.

The store is authoritative; the in-process cache is a projection of it that
is loaded lazily per guild, updated only after the store accepted a write,
and dropped whenever it might have diverged. Every operation on a guild runs
under that guild's lock, so position assignment is serialized per guild
while different guilds proceed concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel

from timmybot.domain.queue.entities import QueueEntry
from timmybot.domain.shared.constants import LimitConstants
from timmybot.domain.shared.exceptions import ConcurrencyError, StoreUnavailableError
from timmybot.domain.shared.messages import ErrorMessages, LogTemplates
from timmybot.domain.shared.types import NonNegativeInt
from timmybot.utils.keyed_lock import KeyedLock

if TYPE_CHECKING:
    from ...domain.queue.repository import QueueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueueCacheStats(BaseModel):
    guilds_cached: NonNegativeInt = 0
    entries_cached: NonNegativeInt = 0
    hits: NonNegativeInt = 0
    misses: NonNegativeInt = 0


class GuildQueueManager:
    def __init__(
        self,
        store: QueueStore,
        *,
        operation_timeout_s: float = LimitConstants.DEFAULT_STORE_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._timeout = operation_timeout_s
        self._clock = clock
        self._locks: KeyedLock[int] = KeyedLock()
        self._cache: dict[int, list[QueueEntry]] = {}
        self._last_access: dict[int, float] = {}
        self._hits = 0
        self._misses = 0

    # ── Public operations ──────────────────────────────────────────

    async def enqueue(self, guild_id: int, track_ref: str) -> int:
        """Append a track and return its position.

        Positions grow monotonically within a guild: the next position is one
        past the current back of the queue, or 1 when the queue is empty.

        Raises:
            StoreUnavailableError: The store failed or timed out. The write may
                still have landed, so the guild is reloaded on its next access.
            ConcurrencyError: The position was already taken in the store.
        """
        async with self._locks.hold(guild_id):
            entries = await self._entries(guild_id)
            position = entries[-1].position + 1 if entries else 1
            entry = QueueEntry(guild_id=guild_id, position=position, track_ref=track_ref)

            try:
                await self._write(guild_id, "put", self._store.put(entry))
            except ConcurrencyError:
                logger.warning(LogTemplates.QUEUE_POSITION_CONFLICT, guild_id)
                raise

            entries.append(entry)
            logger.info(LogTemplates.QUEUE_ENQUEUED, track_ref, position, guild_id)
            return position

    async def dequeue(self, guild_id: int) -> str | None:
        """Remove and return the front track, or None if the queue is empty."""
        async with self._locks.hold(guild_id):
            entries = await self._entries(guild_id)
            if not entries:
                return None

            front = entries[0]
            await self._write(guild_id, "delete", self._store.delete(guild_id, front.position))
            entries.pop(0)
            logger.info(LogTemplates.QUEUE_DEQUEUED, front.track_ref, front.position, guild_id)
            return front.track_ref

    async def peek_front(self, guild_id: int) -> str | None:
        async with self._locks.hold(guild_id):
            entries = await self._entries(guild_id)
            return entries[0].track_ref if entries else None

    async def size(self, guild_id: int) -> int:
        """Number of queued entries. A guild that is not cached is counted in the store."""
        async with self._locks.hold(guild_id):
            cached = self._cache.get(guild_id)
            if cached is not None:
                self._hits += 1
                self._last_access[guild_id] = self._clock()
                return len(cached)

            self._misses += 1
            return await self._call("count", self._store.count(guild_id))

    async def snapshot(self, guild_id: int) -> list[QueueEntry]:
        """Ordered copy of the guild's queue, front first."""
        async with self._locks.hold(guild_id):
            return list(await self._entries(guild_id))

    async def clear(self, guild_id: int) -> int:
        """Delete every entry of a guild in bounded batches. Returns the number removed.

        The guild's cache is invalidated whether or not the loop finishes, so a
        partial failure is re-read from the store on the next access.
        """
        async with self._locks.hold(guild_id):
            removed = 0
            try:
                batch_size = self._store.max_batch_size
                while True:
                    batch = await self._call(
                        "query", self._store.query(guild_id, limit=batch_size)
                    )
                    if not batch:
                        break

                    deleted = await self._call(
                        "batch_delete",
                        self._store.batch_delete(guild_id, [e.position for e in batch]),
                    )
                    if deleted == 0:
                        raise StoreUnavailableError(
                            "batch_delete", f"No progress clearing guild {guild_id}"
                        )
                    removed += deleted
            except Exception:
                logger.warning(LogTemplates.QUEUE_CLEAR_FAILED, guild_id, removed)
                raise
            finally:
                self._drop_cache(guild_id)

            logger.info(LogTemplates.QUEUE_CLEARED, removed, guild_id)
            return removed

    # ── Cache management ───────────────────────────────────────────

    def invalidate(self, guild_id: int) -> None:
        """Forget the cached projection of a guild; the next access reloads it."""
        if self._drop_cache(guild_id):
            logger.debug(LogTemplates.QUEUE_CACHE_INVALIDATED, guild_id)

    def evict_idle(self, idle_seconds: float) -> int:
        """Drop caches of guilds untouched for ``idle_seconds`` and every unused lock.

        Returns the number of caches dropped.
        """
        cutoff = self._clock() - idle_seconds
        evicted = 0
        for guild_id, last_access in list(self._last_access.items()):
            if last_access > cutoff or self._locks.in_use(guild_id):
                continue
            self._drop_cache(guild_id)
            evicted += 1

        # Includes locks of guilds whose cache was dropped after a failed write.
        pruned = self._locks.prune()

        if evicted:
            logger.info(LogTemplates.QUEUE_CACHE_EVICTED, evicted)
        if pruned:
            logger.debug(LogTemplates.GUILD_LOCKS_PRUNED, pruned)
        return evicted

    def cache_stats(self) -> QueueCacheStats:
        return QueueCacheStats(
            guilds_cached=len(self._cache),
            entries_cached=sum(len(entries) for entries in self._cache.values()),
            hits=self._hits,
            misses=self._misses,
        )

    # ── Internals ──────────────────────────────────────────────────

    async def _entries(self, guild_id: int) -> list[QueueEntry]:
        """Cached entries for a guild, loading them from the store on a miss.

        Must be called with the guild's lock held.
        """
        self._last_access[guild_id] = self._clock()

        cached = self._cache.get(guild_id)
        if cached is not None:
            self._hits += 1
            return cached

        self._misses += 1
        entries = list(await self._call("query", self._store.query(guild_id)))
        self._cache[guild_id] = entries
        logger.debug(LogTemplates.QUEUE_CACHE_LOADED, len(entries), guild_id)
        return entries

    def _drop_cache(self, guild_id: int) -> bool:
        self._last_access.pop(guild_id, None)
        return self._cache.pop(guild_id, None) is not None

    async def _write(self, guild_id: int, operation: str, awaitable: Awaitable[T]) -> T:
        """Run a store write, dropping the guild's cache if it does not complete.

        A write that timed out or was cancelled may still have committed, so
        the cache can no longer be trusted to match the store.
        """
        try:
            return await self._call(operation, awaitable)
        except BaseException:
            self._drop_cache(guild_id)
            raise

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            async with asyncio.timeout(self._timeout):
                return await awaitable
        except TimeoutError as e:
            logger.warning(LogTemplates.STORE_TIMEOUT, operation, self._timeout)
            raise StoreUnavailableError(
                operation,
                ErrorMessages.STORE_TIMEOUT.format(timeout=self._timeout, operation=operation),
            ) from e
