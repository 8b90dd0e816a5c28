"""Informational commands that run outside any guild: ping, help, explain."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from timmybot.application.dispatch.results import CommandResult, Success
from timmybot.domain.shared.messages import DiscordUIMessages
from timmybot.utils.reply import fit_message

if TYPE_CHECKING:
    from ..dispatch.catalog import CommandContext, CommandDescriptor


class PingHandler:
    """Reports the gateway latency. ``latency_provider`` returns seconds."""

    def __init__(self, *, latency_provider: Callable[[], float]) -> None:
        self._latency_provider = latency_provider

    async def handle(self, ctx: CommandContext) -> CommandResult:
        latency = self._latency_provider()
        # discord.py reports nan before the first heartbeat.
        latency_ms = round(latency * 1000) if math.isfinite(latency) else None
        return Success(
            DiscordUIMessages.SUCCESS_PONG.format(
                latency_ms="?" if latency_ms is None else latency_ms
            ),
            data={"latency_ms": latency_ms},
        )


class HelpHandler:

    def __init__(self, *, descriptors: Iterable[CommandDescriptor], prefix: str) -> None:
        self._descriptors = tuple(descriptors)
        self._prefix = prefix

    async def handle(self, ctx: CommandContext) -> CommandResult:
        lines = [DiscordUIMessages.HELP_HEADER.format(prefix=self._prefix)]
        for descriptor in self._descriptors:
            cooldown = (
                DiscordUIMessages.HELP_COOLDOWN_SUFFIX.format(seconds=descriptor.cooldown_seconds)
                if descriptor.cooldown_seconds
                else ""
            )
            lines.append(
                DiscordUIMessages.HELP_LINE.format(
                    usage=descriptor.usage,
                    description=descriptor.description,
                    cooldown=cooldown,
                )
            )
        return Success(fit_message(lines), ephemeral=True)


class ExplainHandler:

    def __init__(self, *, prefix: str) -> None:
        self._prefix = prefix

    async def handle(self, ctx: CommandContext) -> CommandResult:
        return Success(DiscordUIMessages.EXPLAIN_TEXT.format(prefix=self._prefix), ephemeral=True)
