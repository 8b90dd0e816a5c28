"""Discord cogs - command and event listeners."""

from timmybot.infrastructure.discord.cogs.command_cog import CommandCog
from timmybot.infrastructure.discord.cogs.event_cog import EventCog

__all__ = [
    "CommandCog",
    "EventCog",
]
