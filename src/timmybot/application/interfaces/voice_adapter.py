"""Port interface for the bot's voice connection in each guild."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from timmybot.domain.shared.types import ChannelIdField, DiscordSnowflake

if TYPE_CHECKING:
    from .audio_resolver import ResolvedStream

TrackEndCallback = Callable[[DiscordSnowflake], Awaitable[None]]


class VoiceAdapter(ABC):
    """At most one voice connection per guild.

    Every coroutine reports failure by returning False; none of them raise
    for ordinary Discord errors.
    """

    @abstractmethod
    async def connect(self, guild_id: DiscordSnowflake, channel_id: ChannelIdField) -> bool: ...

    @abstractmethod
    async def disconnect(self, guild_id: DiscordSnowflake) -> bool:
        """True also when there was nothing to disconnect."""
        ...

    @abstractmethod
    async def ensure_connected(self, guild_id: DiscordSnowflake, channel_id: ChannelIdField) -> bool:
        """Be in ``channel_id`` afterwards, whatever the current state."""
        ...

    @abstractmethod
    async def move_to(self, guild_id: DiscordSnowflake, channel_id: ChannelIdField) -> bool: ...

    @abstractmethod
    async def play(self, guild_id: DiscordSnowflake, stream: ResolvedStream) -> bool:
        """Start ``stream``; the track-end callback fires once when it stops for any reason."""
        ...

    @abstractmethod
    async def stop(self, guild_id: DiscordSnowflake) -> bool:
        """False when nothing was playing."""
        ...

    @abstractmethod
    def is_connected(self, guild_id: DiscordSnowflake) -> bool: ...

    @abstractmethod
    def is_playing(self, guild_id: DiscordSnowflake) -> bool:
        """Paused counts as playing."""
        ...

    @abstractmethod
    def set_on_track_end_callback(self, callback: TrackEndCallback) -> None: ...
