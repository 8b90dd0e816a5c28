"""Descriptors of the built-in commands, in help order."""

from __future__ import annotations

from timmybot.application.dispatch.catalog import CommandDescriptor
from timmybot.domain.shared.constants import LimitConstants

DEFAULT_DESCRIPTORS: tuple[CommandDescriptor, ...] = (
    CommandDescriptor(
        name="ping",
        description="Check bot latency",
        cooldown_seconds=LimitConstants.PING_COOLDOWN_SECONDS,
        guild_scoped=False,
    ),
    CommandDescriptor(
        name="help",
        description="Show all available commands",
        guild_scoped=False,
    ),
    CommandDescriptor(
        name="explain",
        description="Explain how TimmyBot is built",
        guild_scoped=False,
    ),
    CommandDescriptor(
        name="join",
        description="Join your voice channel",
    ),
    CommandDescriptor(
        name="leave",
        description="Leave the voice channel",
    ),
    CommandDescriptor(
        name="play",
        description="Play a song from a URL or search query",
        cooldown_seconds=LimitConstants.PLAY_COOLDOWN_SECONDS,
        parameters=("song",),
    ),
    CommandDescriptor(
        name="skip",
        description="Skip the current track",
    ),
    CommandDescriptor(
        name="current",
        description="Show the track at the front of the queue",
    ),
    CommandDescriptor(
        name="queue",
        description="Show the tracks in the queue",
    ),
    CommandDescriptor(
        name="clear",
        description="Clear the queue and stop playback",
    ),
)
