"""
Allowlist Repository Interface

Abstract base class for reading and administering the guild allowlist.
"""

from abc import ABC, abstractmethod

from timmybot.domain.access.entities import AllowlistEntry


class AllowlistRepository(ABC):
    """Abstract repository for guild allowlist records."""

    @abstractmethod
    async def get(self, guild_id: int) -> AllowlistEntry | None:
        """Retrieve the allowlist record for a guild.

        Args:
            guild_id: The Discord guild ID.

        Returns:
            The record if found, None otherwise.
        """
        ...

    @abstractmethod
    async def add(self, guild_id: int) -> AllowlistEntry:
        """Create or re-approve the record for a guild."""
        ...

    @abstractmethod
    async def remove(self, guild_id: int) -> bool:
        """Delete the record for a guild.

        Returns:
            True if a record was deleted, False if none existed.
        """
        ...

    @abstractmethod
    async def list_all(self) -> list[AllowlistEntry]:
        """Return every record, ordered by guild ID."""
        ...
