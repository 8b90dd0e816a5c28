"""Command outcomes and their mapping to transport replies.

Every command execution ends in exactly one of four outcomes. The set is
closed: ``render_reply`` matches it exhaustively, so adding a variant without
teaching the renderer about it is a type error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, assert_never

from timmybot.domain.shared.messages import DiscordUIMessages
from timmybot.utils.reply import pluralize


class FailureKind(Enum):
    """Why a command failed."""

    UNKNOWN_COMMAND = "unknown_command"
    INVALID_PARAMETERS = "invalid_parameters"
    STORE_UNAVAILABLE = "store_unavailable"
    HANDLER_FAULT = "handler_fault"
    COMMAND_FAILED = "command_failed"


@dataclass(frozen=True)
class Success:
    """The command ran. ``data`` carries structured values such as a queue position."""

    message: str | None = None
    ephemeral: bool = False
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Failure:
    message: str
    cause: BaseException | None = None
    kind: FailureKind = FailureKind.COMMAND_FAILED


@dataclass(frozen=True)
class Cooldown:
    remaining_seconds: int

    def __post_init__(self) -> None:
        if self.remaining_seconds < 1:
            raise ValueError("remaining_seconds must be at least 1")


@dataclass(frozen=True)
class Unauthorized:
    message: str


CommandResult = Success | Failure | Cooldown | Unauthorized


@dataclass(frozen=True)
class Reply:
    """What the transport should send back to the invoking user."""

    content: str
    ephemeral: bool


def render_reply(result: CommandResult) -> Reply:
    """Map a result to a reply. Everything except a public Success is private."""
    match result:
        case Success(message=message, ephemeral=ephemeral):
            return Reply(message or DiscordUIMessages.SUCCESS_GENERIC, ephemeral)
        case Failure(message=message):
            return Reply(message, True)
        case Cooldown(remaining_seconds=seconds):
            return Reply(
                DiscordUIMessages.COOLDOWN_ACTIVE.format(
                    seconds=seconds, plural=pluralize(seconds)
                ),
                True,
            )
        case Unauthorized(message=message):
            return Reply(message, True)
        case _:
            assert_never(result)
