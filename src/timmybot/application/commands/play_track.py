"""Handler for queueing a track and starting playback when the guild is idle."""

from __future__ import annotations

from typing import TYPE_CHECKING

from timmybot.application.dispatch.results import CommandResult, Failure, Success
from timmybot.domain.shared.constants import LimitConstants
from timmybot.domain.shared.exceptions import InvalidParametersError
from timmybot.domain.shared.messages import DiscordUIMessages, ErrorMessages
from timmybot.utils.reply import truncate

if TYPE_CHECKING:
    from ..dispatch.catalog import CommandContext
    from ..interfaces.voice_adapter import VoiceAdapter
    from ..services.playback_coordinator import PlaybackCoordinator
    from ..services.queue_manager import GuildQueueManager


class PlayTrackHandler:
    """Connects to the caller's voice channel, enqueues the track, and starts it if idle."""

    def __init__(
        self,
        *,
        queue_manager: GuildQueueManager,
        playback_coordinator: PlaybackCoordinator,
        voice_adapter: VoiceAdapter,
    ) -> None:
        self._queue = queue_manager
        self._playback = playback_coordinator
        self._voice_adapter = voice_adapter

    async def handle(self, ctx: CommandContext) -> CommandResult:
        song = ctx.require_param("song")
        if len(song) > LimitConstants.MAX_TRACK_REF_LENGTH:
            raise InvalidParametersError(
                ErrorMessages.TRACK_REF_TOO_LONG.format(limit=LimitConstants.MAX_TRACK_REF_LENGTH),
                parameter="song",
            )
        guild_id = ctx.require_guild_id()

        channel_id = ctx.invocation.voice_channel_id
        if channel_id is None:
            return Failure(DiscordUIMessages.ERROR_NOT_IN_VOICE)

        if not await self._voice_adapter.ensure_connected(guild_id, channel_id):
            return Failure(DiscordUIMessages.ERROR_VOICE_CONNECT)

        position = await self._queue.enqueue(guild_id, song)
        started = await self._playback.start_if_idle(guild_id)

        message = DiscordUIMessages.SUCCESS_ENQUEUED.format(track=truncate(song), position=position)
        if started is not None:
            message += "\n" + DiscordUIMessages.SUCCESS_NOW_PLAYING.format(track=truncate(started))

        return Success(
            message,
            data={"position": position, "track_ref": song, "now_playing": started},
        )
