"""Query handler for the track at the front of a guild's queue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from timmybot.application.dispatch.results import CommandResult, Success
from timmybot.domain.shared.messages import DiscordUIMessages
from timmybot.utils.reply import truncate

if TYPE_CHECKING:
    from ..dispatch.catalog import CommandContext
    from ..services.queue_manager import GuildQueueManager


class GetCurrentTrackHandler:

    def __init__(self, *, queue_manager: GuildQueueManager) -> None:
        self._queue = queue_manager

    async def handle(self, ctx: CommandContext) -> CommandResult:
        track_ref = await self._queue.peek_front(ctx.require_guild_id())

        if track_ref is None:
            return Success(
                DiscordUIMessages.STATE_QUEUE_EMPTY,
                ephemeral=True,
                data={"track_ref": None},
            )

        return Success(
            DiscordUIMessages.STATE_CURRENT_TRACK.format(track=truncate(track_ref)),
            data={"track_ref": track_ref},
        )
