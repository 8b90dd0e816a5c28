"""Gateway, guild membership and voice-state listeners."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from timmybot.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


class EventCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container
        self._resumed_logged_once = False

    # ─────────────────────────────────────────────────────────────────
    # Gateway
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_connect(self) -> None:
        logger.info("WebSocket connected")

    @commands.Cog.listener()
    async def on_disconnect(self) -> None:
        logger.warning("WebSocket disconnected")

    @commands.Cog.listener()
    async def on_resumed(self) -> None:
        # Resumes are frequent on flaky links.
        if self._resumed_logged_once:
            return
        self._resumed_logged_once = True
        logger.info("WebSocket session resumed")

    # ─────────────────────────────────────────────────────────────────
    # Guild membership
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        """Tell the operator whether the new guild can use guild-scoped commands."""
        allowed = await self.container.access_gate.is_guild_authorized(guild.id)
        logger.info(LogTemplates.GUILD_JOINED, guild.name, guild.id, allowed)
        if not allowed:
            logger.warning(LogTemplates.GUILD_NOT_ALLOWLISTED_HINT, guild.id, guild.id)

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        logger.info(LogTemplates.GUILD_REMOVED, guild.name, guild.id)
        # Stored rows stay; a rejoin reloads them.
        self.container.queue_manager.invalidate(guild.id)

    # ─────────────────────────────────────────────────────────────────
    # Voice
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        if self.bot.user is None or member.id != self.bot.user.id:
            return
        if before.channel is not None and after.channel is None:
            logger.info(LogTemplates.VOICE_FORCED_DISCONNECT, before.channel.id, member.guild.id)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(EventCog(bot, container))
