"""Core domain entities for the queue bounded context."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

from timmybot.domain.shared.types import (
    DiscordSnowflake,
    EpochMillis,
    QueuePositionInt,
    TrackRefStr,
)


def now_millis() -> int:
    return time.time_ns() // 1_000_000


class QueueEntry(BaseModel):
    """One queued track reference.

    Entries are immutable: they are created by an enqueue and removed by a
    dequeue or a clear, never rewritten in place. The entry with the smallest
    ``position`` of a guild is the front of that guild's queue.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    position: QueuePositionInt
    track_ref: TrackRefStr
    added_at_epoch_millis: EpochMillis = Field(default_factory=now_millis)

    @property
    def key(self) -> tuple[int, int]:
        return (self.guild_id, self.position)
