"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from timmybot.domain.shared.types import DiscordSnowflake, TrackRefStr

    class MyModel(BaseModel):
        guild_id: DiscordSnowflake
        track_ref: TrackRefStr
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackRefStr = Annotated[str, Field(min_length=1, max_length=2000)]
"""Opaque track locator: a URL or a free-text search query."""

CommandNameStr = Annotated[str, Field(pattern=r"^[a-z0-9_-]{1,32}$")]
"""Discord-compatible command name: lowercase, 1-32 characters."""

CommandDescriptionStr = Annotated[str, Field(min_length=1, max_length=100)]
"""Command description shown in the slash picker: 1-100 characters."""


# ── Domain-specific numeric constraints ─────────────────────────────

QueuePositionInt = Annotated[int, Field(ge=1)]
"""One-based, strictly increasing per-guild insertion index."""

EpochMillis = Annotated[int, Field(ge=0)]
"""Wall-clock timestamp in milliseconds since the Unix epoch."""

CooldownSecondsInt = Annotated[int, Field(ge=0, le=86_400)]
"""Per-user command cooldown in whole seconds: 0 … 86 400."""

ChannelIdField = DiscordSnowflake
"""Voice or text channel ID."""
