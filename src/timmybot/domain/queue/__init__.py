"""Queue bounded context: per-guild ordered track references."""

from timmybot.domain.queue.entities import QueueEntry
from timmybot.domain.queue.repository import QueueStore

__all__ = [
    "QueueEntry",
    "QueueStore",
]
