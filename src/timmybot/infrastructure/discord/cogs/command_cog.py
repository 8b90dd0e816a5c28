"""Slash commands and the prefix listener, both routed through the command dispatcher."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

import discord
from discord import app_commands
from discord.ext import commands

from timmybot.application.commands.descriptors import DEFAULT_DESCRIPTORS
from timmybot.application.dispatch.invocation import parse_prefix_message
from timmybot.domain.shared.messages import ErrorMessages
from timmybot.infrastructure.discord.invocations import from_interaction, from_message

if TYPE_CHECKING:
    from ....application.dispatch.results import CommandResult
    from ....config.container import Container

logger = logging.getLogger(__name__)

_DESCRIPTIONS: Final[dict[str, str]] = {d.name: d.description for d in DEFAULT_DESCRIPTORS}

# Commands that may take longer than Discord's 3s response window
# (voice connects, yt-dlp lookups).
DEFERRED_COMMANDS: Final[frozenset[str]] = frozenset({"join", "play"})


class CommandCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container
        self._prefix = container.settings.discord.command_prefix

    async def _run_slash(
        self,
        interaction: discord.Interaction,
        command_name: str,
        parameters: dict[str, str] | None = None,
    ) -> CommandResult:
        deferred = command_name in DEFERRED_COMMANDS and not interaction.response.is_done()
        if deferred:
            # Private until the result is known: unauthorized, cooldown and
            # failure replies must never inherit a public defer.
            await interaction.response.defer(thinking=True, ephemeral=True)

        invocation = from_interaction(
            interaction, command_name, parameters, private_defer=deferred
        )
        return await self.container.dispatcher.handle(invocation)

    # ─────────────────────────────────────────────────────────────────
    # Prefix Commands
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return

        parsed = parse_prefix_message(
            message.content,
            trigger=self._prefix,
            catalog=self.container.dispatcher.catalog,
        )
        if parsed is None:
            return

        invocation = from_message(message, parsed.command_name, parsed.parameters)
        await self.container.dispatcher.handle(invocation)

    # ─────────────────────────────────────────────────────────────────
    # Slash Commands
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="ping", description=_DESCRIPTIONS["ping"])
    async def ping(self, interaction: discord.Interaction) -> None:
        await self._run_slash(interaction, "ping")

    @app_commands.command(name="help", description=_DESCRIPTIONS["help"])
    async def help(self, interaction: discord.Interaction) -> None:
        await self._run_slash(interaction, "help")

    @app_commands.command(name="explain", description=_DESCRIPTIONS["explain"])
    async def explain(self, interaction: discord.Interaction) -> None:
        await self._run_slash(interaction, "explain")

    @app_commands.command(name="join", description=_DESCRIPTIONS["join"])
    async def join(self, interaction: discord.Interaction) -> None:
        await self._run_slash(interaction, "join")

    @app_commands.command(name="leave", description=_DESCRIPTIONS["leave"])
    async def leave(self, interaction: discord.Interaction) -> None:
        await self._run_slash(interaction, "leave")

    @app_commands.command(name="play", description=_DESCRIPTIONS["play"])
    @app_commands.describe(song="YouTube URL or search query")
    async def play(self, interaction: discord.Interaction, song: str) -> None:
        await self._run_slash(interaction, "play", {"song": song})

    @app_commands.command(name="skip", description=_DESCRIPTIONS["skip"])
    async def skip(self, interaction: discord.Interaction) -> None:
        await self._run_slash(interaction, "skip")

    @app_commands.command(name="current", description=_DESCRIPTIONS["current"])
    async def current(self, interaction: discord.Interaction) -> None:
        await self._run_slash(interaction, "current")

    @app_commands.command(name="queue", description=_DESCRIPTIONS["queue"])
    async def queue(self, interaction: discord.Interaction) -> None:
        await self._run_slash(interaction, "queue")

    @app_commands.command(name="clear", description=_DESCRIPTIONS["clear"])
    async def clear(self, interaction: discord.Interaction) -> None:
        await self._run_slash(interaction, "clear")


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(CommandCog(bot, container))
