"""Handler for skipping the track at the front of the queue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from timmybot.application.dispatch.results import CommandResult, Failure, Success
from timmybot.domain.shared.messages import DiscordUIMessages
from timmybot.utils.reply import truncate

if TYPE_CHECKING:
    from ..dispatch.catalog import CommandContext
    from ..services.playback_coordinator import PlaybackCoordinator


class SkipTrackHandler:

    def __init__(self, *, playback_coordinator: PlaybackCoordinator) -> None:
        self._playback = playback_coordinator

    async def handle(self, ctx: CommandContext) -> CommandResult:
        guild_id = ctx.require_guild_id()

        outcome = await self._playback.skip(guild_id)
        if outcome is None:
            return Failure(DiscordUIMessages.STATE_NOTHING_TO_SKIP)

        if outcome.remaining:
            message = DiscordUIMessages.SUCCESS_SKIPPED.format(remaining=outcome.remaining)
        else:
            message = DiscordUIMessages.SUCCESS_SKIPPED_EMPTY
        if outcome.next_track is not None:
            message += "\n" + DiscordUIMessages.SUCCESS_NOW_PLAYING.format(
                track=truncate(outcome.next_track)
            )

        return Success(
            message,
            data={
                "skipped": outcome.skipped,
                "next": outcome.next_track,
                "remaining": outcome.remaining,
            },
        )
