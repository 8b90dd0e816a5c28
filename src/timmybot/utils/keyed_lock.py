"""Per-key asyncio locks that can be pruned once nobody uses them."""

from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)


class KeyedLock(Generic[K]):
    """One ``asyncio.Lock`` per key, created on first use.

    A key is in use from the moment a task starts waiting for its lock until
    that task releases it. ``prune`` only drops keys that are not in use, so a
    waiter woken by a release always acquires the same lock object as the
    task that released it.
    """

    def __init__(self) -> None:
        self._locks: dict[K, asyncio.Lock] = {}
        self._users: Counter[K] = Counter()

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, key: object) -> bool:
        return key in self._locks

    def in_use(self, key: K) -> bool:
        return self._users[key] > 0

    @asynccontextmanager
    async def hold(self, key: K) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()

        self._users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] <= 0:
                del self._users[key]

    def prune(self) -> int:
        """Drop every lock nobody holds or waits for. Returns how many were dropped."""
        idle = [key for key in self._locks if not self.in_use(key)]
        for key in idle:
            del self._locks[key]
        return len(idle)
