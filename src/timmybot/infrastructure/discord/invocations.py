"""Builds transport-neutral invocations from discord.py objects."""

from __future__ import annotations

import discord

from timmybot.application.dispatch.invocation import Invocation, InvocationSource
from timmybot.infrastructure.discord.reply_channels import (
    InteractionReplyChannel,
    MessageReplyChannel,
)


def _member_context(
    user: discord.abc.User | discord.Member,
) -> tuple[int | None, frozenset[str]]:
    """Voice channel and granted permission names of a guild member."""
    if not isinstance(user, discord.Member):
        return None, frozenset()

    voice_channel_id = None
    if user.voice is not None and user.voice.channel is not None:
        voice_channel_id = user.voice.channel.id

    permissions = frozenset(name for name, granted in user.guild_permissions if granted)
    return voice_channel_id, permissions


def from_interaction(
    interaction: discord.Interaction,
    command_name: str,
    parameters: dict[str, str] | None = None,
    *,
    private_defer: bool = False,
) -> Invocation:
    voice_channel_id, permissions = _member_context(interaction.user)
    return Invocation(
        command_name=command_name,
        guild_id=interaction.guild_id,
        user_id=interaction.user.id,
        parameters={k: v for k, v in (parameters or {}).items() if v is not None},
        reply_channel=InteractionReplyChannel(interaction, private_defer=private_defer),
        source=InvocationSource.SLASH,
        voice_channel_id=voice_channel_id,
        text_channel_id=interaction.channel_id,
        member_permissions=permissions,
    )


def from_message(
    message: discord.Message,
    command_name: str,
    parameters: dict[str, str] | None = None,
) -> Invocation:
    voice_channel_id, permissions = _member_context(message.author)
    return Invocation(
        command_name=command_name,
        guild_id=message.guild.id if message.guild else None,
        user_id=message.author.id,
        parameters=dict(parameters or {}),
        reply_channel=MessageReplyChannel(message),
        source=InvocationSource.PREFIX,
        voice_channel_id=voice_channel_id,
        text_channel_id=message.channel.id,
        member_permissions=permissions,
    )
