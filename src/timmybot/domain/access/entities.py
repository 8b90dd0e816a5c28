"""Entities for the access bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from timmybot.domain.queue.entities import now_millis
from timmybot.domain.shared.types import DiscordSnowflake, EpochMillis


class AllowlistEntry(BaseModel):
    """Approval record for a guild. Read-only for the bot; managed by the admin CLI."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    approved: bool = True
    added_at_epoch_millis: EpochMillis = Field(default_factory=now_millis)
