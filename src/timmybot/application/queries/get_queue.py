"""Query handler listing a guild's queue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from timmybot.application.dispatch.results import CommandResult, Success
from timmybot.domain.shared.constants import LimitConstants
from timmybot.domain.shared.messages import DiscordUIMessages
from timmybot.utils.reply import fit_message, pluralize, truncate

if TYPE_CHECKING:
    from ..dispatch.catalog import CommandContext
    from ..services.queue_manager import GuildQueueManager


class GetQueueHandler:
    """Lists up to ``limit`` entries, front first, with a count of the rest."""

    def __init__(
        self,
        *,
        queue_manager: GuildQueueManager,
        limit: int = LimitConstants.QUEUE_LIST_LIMIT,
    ) -> None:
        self._queue = queue_manager
        self._limit = limit

    async def handle(self, ctx: CommandContext) -> CommandResult:
        entries = await self._queue.snapshot(ctx.require_guild_id())

        if not entries:
            return Success(
                DiscordUIMessages.STATE_QUEUE_EMPTY,
                ephemeral=True,
                data={"tracks": []},
            )

        total = len(entries)
        lines = [DiscordUIMessages.STATE_QUEUE_HEADER.format(total=total, plural=pluralize(total))]
        lines.extend(
            DiscordUIMessages.STATE_QUEUE_LINE.format(index=i, track=truncate(entry.track_ref))
            for i, entry in enumerate(entries[: self._limit], start=1)
        )
        if total > self._limit:
            lines.append(DiscordUIMessages.STATE_QUEUE_MORE.format(more=total - self._limit))

        return Success(
            fit_message(lines),
            data={"tracks": [entry.track_ref for entry in entries]},
        )
