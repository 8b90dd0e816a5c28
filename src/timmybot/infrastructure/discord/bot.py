"""TimmyBot client: wires the container into discord.py, loads the cogs and owns shutdown."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from timmybot.domain.shared.messages import DiscordUIMessages, LogTemplates

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

COGS: tuple[str, ...] = (
    "timmybot.infrastructure.discord.cogs.command_cog",
    "timmybot.infrastructure.discord.cogs.event_cog",
)


def _build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    # Prefix commands need the raw message text.
    intents.message_content = True
    intents.voice_states = True
    intents.guilds = True
    return intents


class TimmyBot(commands.Bot):
    def __init__(self, container: Container, settings: Settings, **kwargs) -> None:
        owners = set(settings.discord.owner_ids)
        if owners:
            kwargs.setdefault("owner_ids", owners)

        # The command cog matches the configured prefix against the catalog
        # itself; the commands extension only ever sees mentions.
        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=_build_intents(),
            help_command=None,
            **kwargs,
        )

        self.container = container
        self.settings = settings
        self._shutdown_started = False
        container.set_bot(self)

    # ─────────────────────────────────────────────────────────────────
    # Startup
    # ─────────────────────────────────────────────────────────────────

    async def setup_hook(self) -> None:
        logger.info(LogTemplates.BOT_SETUP)

        try:
            await self.container.initialize()
        except Exception as e:
            logger.exception(LogTemplates.BOT_CONTAINER_INIT_FAILED, e)
            raise
        logger.info(LogTemplates.BOT_CONTAINER_INITIALIZED)

        await self._load_cogs()
        self.tree.on_error = self._on_app_command_error

        try:
            self.container.maintenance_job.start()
        except Exception as e:
            logger.warning(LogTemplates.BOT_MAINTENANCE_START_FAILED, e)

        if self.settings.discord.sync_on_startup:
            try:
                await self._sync_commands()
            except Exception as e:
                logger.warning(LogTemplates.BOT_SYNC_ON_STARTUP_FAILED, e)

        logger.info(LogTemplates.BOT_SETUP_COMPLETE)

    async def _load_cogs(self) -> None:
        failed: list[str] = []

        for extension in COGS:
            try:
                await self.load_extension(extension)
            except Exception as e:
                logger.exception(LogTemplates.BOT_COG_LOAD_FAILED, extension, e)
                failed.append(extension)
            else:
                logger.info(LogTemplates.BOT_COG_LOADED, extension)

        logger.info(LogTemplates.BOT_COGS_LOADED_SUMMARY, len(COGS) - len(failed), len(failed))

    async def _sync_commands(self) -> None:
        """Push the slash commands to each test guild, then globally."""
        for guild_id in self.settings.discord.test_guild_ids:
            await self._sync_to_guild(guild_id)

        try:
            synced = await self.tree.sync()
        except Exception as e:
            logger.warning(LogTemplates.BOT_SYNC_GLOBAL_FAILED, e)
            return
        logger.info(LogTemplates.BOT_SYNCED_GLOBAL, len(synced))

    async def _sync_to_guild(self, guild_id: int) -> None:
        # Guild syncs show up immediately; global ones can take an hour.
        guild = discord.Object(id=guild_id)
        try:
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
        except Exception as e:
            logger.warning(LogTemplates.BOT_SYNC_GUILD_FAILED, guild_id, e)
            return
        logger.info(LogTemplates.BOT_SYNCED_GUILD, len(synced), guild_id)

    async def on_ready(self) -> None:
        user = self.user
        logger.info(LogTemplates.BOT_READY, user, getattr(user, "id", "?"))
        logger.info(
            LogTemplates.BOT_CONNECTED_GUILDS,
            len(self.guilds),
            await self._count_allowlisted_guilds(),
        )

        prefix = self.settings.discord.command_prefix
        activity = discord.Activity(type=discord.ActivityType.listening, name=f"{prefix}help")
        await self.change_presence(activity=activity)

    async def _count_allowlisted_guilds(self) -> int:
        try:
            entries = await self.container.allowlist_repository.list_all()
        except Exception as e:
            logger.warning(LogTemplates.BOT_ALLOWLIST_COUNT_FAILED, e)
            return 0

        approved = {entry.guild_id for entry in entries if entry.approved}
        return sum(1 for guild in self.guilds if guild.id in approved)

    # ─────────────────────────────────────────────────────────────────
    # Errors
    # ─────────────────────────────────────────────────────────────────

    async def _on_app_command_error(
        self, interaction: discord.Interaction, error: Exception
    ) -> None:
        """Catch what escapes the dispatcher, such as a failed defer."""
        original = getattr(error, "original", error)
        command_name = getattr(interaction.command, "name", "<unknown>")
        logger.error(LogTemplates.BOT_SLASH_COMMAND_ERROR, command_name, original)

        if interaction.response.is_done():
            send = interaction.followup.send
        else:
            send = interaction.response.send_message

        try:
            await send(DiscordUIMessages.ERROR_UNEXPECTED, ephemeral=True)
        except discord.HTTPException:
            logger.warning(LogTemplates.BOT_ERROR_MESSAGE_SEND_FAILED)

    # ─────────────────────────────────────────────────────────────────
    # Shutdown
    # ─────────────────────────────────────────────────────────────────

    async def close(self) -> None:
        if self._shutdown_started:
            return
        self._shutdown_started = True
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)

        for voice_client in list(self.voice_clients):
            try:
                await voice_client.disconnect(force=True)
            except Exception as e:
                logger.debug("Error disconnecting voice client: %r", e)

        try:
            await self.container.shutdown()
        except Exception as e:
            logger.warning(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR, e)
        else:
            logger.info(LogTemplates.BOT_CONTAINER_SHUTDOWN)

        await super().close()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)

    def _install_signal_handlers(self, shutdown_timeout: float) -> None:
        loop = asyncio.get_running_loop()

        async def _close_with_timeout() -> None:
            try:
                await asyncio.wait_for(self.close(), timeout=shutdown_timeout)
            except TimeoutError:
                logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, shutdown_timeout)

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda: asyncio.create_task(_close_with_timeout()))

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        """Run until SIGINT/SIGTERM, closing voice and the database before exit."""

        async def runner() -> None:
            async with self:
                self._install_signal_handlers(shutdown_timeout)
                await self.start(token)

        asyncio.run(runner())


def create_bot(container: Container, settings: Settings) -> TimmyBot:
    return TimmyBot(container=container, settings=settings)
