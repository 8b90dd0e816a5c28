"""ReplyChannel implementations for slash interactions and prefix messages."""

from __future__ import annotations

import logging
from typing import Final

import discord

from timmybot.application.dispatch.invocation import ReplyChannel

logger = logging.getLogger(__name__)

# Private replies to prefix commands fall back to a short-lived channel
# reply when the user does not accept direct messages.
PRIVATE_FALLBACK_DELETE_AFTER: Final[float] = 15.0


class InteractionReplyChannel(ReplyChannel):
    """Replies through the interaction response, or a followup once it is used.

    A command deferred with ``private_defer`` has an ephemeral "thinking"
    placeholder, and Discord gives the first followup the defer's visibility.
    Private replies fill the placeholder; public ones are posted to the channel
    and the placeholder is deleted.
    """

    def __init__(self, interaction: discord.Interaction, *, private_defer: bool = False) -> None:
        self._interaction = interaction
        self._private_defer = private_defer

    @property
    def private_defer(self) -> bool:
        return self._private_defer

    async def send(self, content: str, *, ephemeral: bool) -> None:
        if not self._interaction.response.is_done():
            await self._interaction.response.send_message(content, ephemeral=ephemeral)
            return

        channel = self._interaction.channel
        if ephemeral or not self._private_defer or channel is None:
            await self._interaction.followup.send(content, ephemeral=ephemeral)
            return

        try:
            await channel.send(content)
        except discord.Forbidden:
            # No send permission in the channel: the invoker still gets the reply.
            await self._interaction.followup.send(content, ephemeral=True)
            return

        try:
            await self._interaction.delete_original_response()
        except discord.HTTPException as e:
            logger.debug("Could not remove deferred placeholder: %r", e)


class MessageReplyChannel(ReplyChannel):
    """Replies to a prefix message.

    Public replies go to the channel; private ones go to the author's DMs.
    """

    def __init__(self, message: discord.Message) -> None:
        self._message = message

    async def send(self, content: str, *, ephemeral: bool) -> None:
        if not ephemeral:
            await self._message.reply(content, mention_author=False)
            return

        try:
            await self._message.author.send(content)
        except discord.Forbidden:
            logger.debug("DMs closed for user %s, replying in channel", self._message.author.id)
            await self._message.reply(
                content,
                mention_author=False,
                delete_after=PRIVATE_FALLBACK_DELETE_AFTER,
            )
