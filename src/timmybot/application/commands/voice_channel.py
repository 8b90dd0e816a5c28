"""Handlers for joining and leaving voice channels."""

from __future__ import annotations

from typing import TYPE_CHECKING

from timmybot.application.dispatch.results import CommandResult, Failure, Success
from timmybot.domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from ..dispatch.catalog import CommandContext
    from ..interfaces.voice_adapter import VoiceAdapter
    from ..services.playback_coordinator import PlaybackCoordinator


class JoinVoiceHandler:

    def __init__(self, *, voice_adapter: VoiceAdapter) -> None:
        self._voice_adapter = voice_adapter

    async def handle(self, ctx: CommandContext) -> CommandResult:
        guild_id = ctx.require_guild_id()

        channel_id = ctx.invocation.voice_channel_id
        if channel_id is None:
            return Failure(DiscordUIMessages.ERROR_NOT_IN_VOICE)

        if not await self._voice_adapter.ensure_connected(guild_id, channel_id):
            return Failure(DiscordUIMessages.ERROR_VOICE_CONNECT)

        return Success(
            DiscordUIMessages.SUCCESS_JOINED.format(channel_id=channel_id),
            data={"channel_id": channel_id},
        )


class LeaveVoiceHandler:
    """Stops playback and disconnects; the queue itself is kept."""

    def __init__(
        self,
        *,
        voice_adapter: VoiceAdapter,
        playback_coordinator: PlaybackCoordinator,
    ) -> None:
        self._voice_adapter = voice_adapter
        self._playback = playback_coordinator

    async def handle(self, ctx: CommandContext) -> CommandResult:
        guild_id = ctx.require_guild_id()

        if not self._voice_adapter.is_connected(guild_id):
            return Failure(DiscordUIMessages.ERROR_NOT_CONNECTED)

        await self._playback.stop(guild_id)
        await self._voice_adapter.disconnect(guild_id)
        return Success(DiscordUIMessages.SUCCESS_LEFT)
