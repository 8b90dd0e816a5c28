"""
Queue Store Interface

Abstract base class defining the contract for the persistent per-guild queue.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from timmybot.domain.queue.entities import QueueEntry


class QueueStore(ABC):
    """Ordered store addressable by ``(guild_id, position)``.

    Every method may raise ``StoreUnavailableError`` when the backend fails.
    Callers bound each call with their own timeout.
    """

    @property
    @abstractmethod
    def max_batch_size(self) -> int:
        """Largest number of positions accepted by one ``batch_delete`` call."""
        ...

    @abstractmethod
    async def put(self, entry: QueueEntry) -> None:
        """Insert a new entry.

        Args:
            entry: The entry to store.

        Raises:
            ConcurrencyError: If ``(guild_id, position)`` is already taken.
        """
        ...

    @abstractmethod
    async def get(self, guild_id: int, position: int) -> QueueEntry | None:
        """Point lookup of a single entry.

        Part of the store contract for inspection tooling; the queue manager
        works from ``query`` and ``count`` and never calls it.
        """
        ...

    @abstractmethod
    async def delete(self, guild_id: int, position: int) -> bool:
        """Delete a single entry.

        Returns:
            True if an entry was removed, False if it did not exist.
        """
        ...

    @abstractmethod
    async def query(self, guild_id: int, limit: int | None = None) -> list[QueueEntry]:
        """Return a guild's entries in ascending position order.

        Args:
            guild_id: The Discord guild ID.
            limit: Maximum number of entries to return, or None for all.
        """
        ...

    @abstractmethod
    async def count(self, guild_id: int) -> int:
        """Number of entries stored for a guild.

        Used to size a guild whose queue is not cached.
        """
        ...

    @abstractmethod
    async def batch_delete(self, guild_id: int, positions: list[int]) -> int:
        """Delete up to ``max_batch_size`` entries in one call.

        Returns:
            The number of entries actually removed.

        Raises:
            ValueError: If more than ``max_batch_size`` positions are given.
        """
        ...
