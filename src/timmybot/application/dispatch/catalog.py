"""Command descriptors and the immutable command catalog."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, ConfigDict, field_validator

from timmybot.domain.shared.exceptions import InvalidParametersError
from timmybot.domain.shared.messages import ErrorMessages
from timmybot.domain.shared.types import (
    CommandDescriptionStr,
    CommandNameStr,
    CooldownSecondsInt,
)

if TYPE_CHECKING:
    from .invocation import Invocation
    from .results import CommandResult


class CommandDescriptor(BaseModel):
    """Static metadata for one command.

    ``guild_scoped`` commands are checked against the allowlist before they
    run; only commands that are safe anywhere (ping, help, explain) opt out.
    ``parameters`` names positional prefix arguments in order.
    """

    model_config = ConfigDict(frozen=True)

    name: CommandNameStr
    description: CommandDescriptionStr
    cooldown_seconds: CooldownSecondsInt = 0
    required_permissions: frozenset[str] = frozenset()
    guild_scoped: bool = True
    parameters: tuple[str, ...] = ()

    @field_validator("parameters")
    @classmethod
    def validate_parameters(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(v)) != len(v):
            raise ValueError("parameter names must be unique")
        return v

    @property
    def usage(self) -> str:
        return " ".join([self.name, *(f"<{p}>" for p in self.parameters)])


@dataclass(frozen=True)
class CommandContext:
    """What a handler sees of an invocation."""

    invocation: Invocation
    descriptor: CommandDescriptor

    @property
    def guild_id(self) -> int | None:
        return self.invocation.guild_id

    @property
    def user_id(self) -> int:
        return self.invocation.user_id

    def param(self, name: str, default: str | None = None) -> str | None:
        value = self.invocation.parameters.get(name)
        if value is None or not value.strip():
            return default
        return value.strip()

    def require_param(self, name: str) -> str:
        value = self.param(name)
        if value is None:
            raise InvalidParametersError(
                ErrorMessages.MISSING_PARAMETER.format(name=name), parameter=name
            )
        return value

    def require_guild_id(self) -> int:
        # The dispatcher rejects guild-scoped commands without a guild before
        # they get here; this guards handlers registered as unscoped by mistake.
        if self.invocation.guild_id is None:
            raise InvalidParametersError(ErrorMessages.GUILD_REQUIRED)
        return self.invocation.guild_id


class CommandHandler(Protocol):
    async def handle(self, ctx: CommandContext) -> CommandResult: ...


@dataclass(frozen=True)
class Command:
    descriptor: CommandDescriptor
    handler: CommandHandler

    @property
    def name(self) -> str:
        return self.descriptor.name


class CommandCatalog:
    """Read-only registry of commands, keyed by name, in registration order."""

    def __init__(self, commands: Iterable[Command]) -> None:
        by_name: dict[str, Command] = {}
        for command in commands:
            if command.name in by_name:
                raise ValueError(ErrorMessages.DUPLICATE_COMMAND.format(name=command.name))
            by_name[command.name] = command
        self._commands = MappingProxyType(by_name)

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._commands)

    @property
    def descriptors(self) -> tuple[CommandDescriptor, ...]:
        return tuple(c.descriptor for c in self._commands.values())
