"""Access bounded context: which guilds may use guild-scoped commands."""

from timmybot.domain.access.entities import AllowlistEntry
from timmybot.domain.access.repository import AllowlistRepository

__all__ = [
    "AllowlistEntry",
    "AllowlistRepository",
]
