"""Handler for clearing a guild's queue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from timmybot.application.dispatch.results import CommandResult, Success
from timmybot.domain.shared.messages import DiscordUIMessages
from timmybot.utils.reply import pluralize

if TYPE_CHECKING:
    from ..dispatch.catalog import CommandContext
    from ..services.playback_coordinator import PlaybackCoordinator
    from ..services.queue_manager import GuildQueueManager


class ClearQueueHandler:
    """Stops playback, then deletes every queued entry of the guild."""

    def __init__(
        self,
        *,
        queue_manager: GuildQueueManager,
        playback_coordinator: PlaybackCoordinator,
    ) -> None:
        self._queue = queue_manager
        self._playback = playback_coordinator

    async def handle(self, ctx: CommandContext) -> CommandResult:
        guild_id = ctx.require_guild_id()

        await self._playback.stop(guild_id)
        cleared = await self._queue.clear(guild_id)

        if cleared == 0:
            return Success(
                DiscordUIMessages.STATE_QUEUE_ALREADY_EMPTY,
                ephemeral=True,
                data={"cleared": 0},
            )

        return Success(
            DiscordUIMessages.SUCCESS_QUEUE_CLEARED.format(
                count=cleared, plural=pluralize(cleared)
            ),
            data={"cleared": cleared},
        )
