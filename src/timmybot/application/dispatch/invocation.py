"""Transport-neutral command invocations.

Slash interactions and prefix messages are both turned into an
``Invocation`` before they reach the dispatcher, so the rest of the pipeline
never needs to know where a command came from.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from timmybot.domain.shared.types import ChannelIdField, DiscordSnowflake, NonEmptyStr

if TYPE_CHECKING:
    from .catalog import CommandCatalog


class InvocationSource(Enum):
    SLASH = "slash"
    PREFIX = "prefix"


class ReplyChannel(ABC):
    """Where the reply to an invocation is delivered."""

    @abstractmethod
    async def send(self, content: str, *, ephemeral: bool) -> None:
        """Send a reply. ``ephemeral`` replies must only be visible to the invoking user."""
        ...


class Invocation(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    command_name: NonEmptyStr
    guild_id: DiscordSnowflake | None = None
    user_id: DiscordSnowflake
    parameters: dict[str, str] = Field(default_factory=dict)
    reply_channel: ReplyChannel | None = None
    source: InvocationSource = InvocationSource.SLASH

    # Context the transport knows about the invoking member
    voice_channel_id: ChannelIdField | None = None
    text_channel_id: ChannelIdField | None = None
    member_permissions: frozenset[str] = frozenset()


class ParsedPrefixCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    command_name: NonEmptyStr
    parameters: dict[str, str] = Field(default_factory=dict)


def map_positional(tokens: Sequence[str], names: Sequence[str]) -> dict[str, str]:
    """Name positional tokens after a command's declared parameters.

    The last declared parameter absorbs every remaining token, so
    ``["never", "gonna", "give"]`` against ``("song",)`` yields
    ``{"song": "never gonna give"}``. Tokens beyond a command without
    parameters are dropped.
    """
    if not names or not tokens:
        return {}

    params: dict[str, str] = {}
    for index, name in enumerate(names):
        if index >= len(tokens):
            break
        if index == len(names) - 1:
            params[name] = " ".join(tokens[index:])
        else:
            params[name] = tokens[index]
    return params


def parse_prefix_message(
    content: str, *, trigger: str, catalog: CommandCatalog
) -> ParsedPrefixCommand | None:
    """Recognize ``<trigger><command> [args...]`` in free text.

    Returns None unless the message starts with the trigger, immediately
    followed by a known command name, followed by whitespace or the end of
    the message. ``?playlist`` is therefore not ``?play``.
    """
    if not content.startswith(trigger):
        return None

    body = content[len(trigger) :]
    if not body or body[0].isspace():
        return None

    parts = body.split(maxsplit=1)
    name = parts[0]
    remainder = parts[1] if len(parts) > 1 else ""

    command = catalog.get(name)
    if command is None:
        return None

    return ParsedPrefixCommand(
        command_name=name,
        parameters=map_positional(remainder.split(), command.descriptor.parameters),
    )
