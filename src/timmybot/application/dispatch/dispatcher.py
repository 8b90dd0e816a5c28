"""Single execution pipeline for every command, whatever transport it came from.

Order of checks, stopping at the first one that does not pass:

1. the command name must be in the catalog,
2. guild-scoped commands need an allowlisted guild,
3. the member must hold the command's required permissions,
4. the user must not be on cooldown for the command,
5. the handler runs; any exception becomes a ``Failure``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from timmybot.application.dispatch.catalog import Command, CommandContext
from timmybot.application.dispatch.results import (
    CommandResult,
    Cooldown,
    Failure,
    FailureKind,
    Success,
    Unauthorized,
    render_reply,
)
from timmybot.config.settings import AccessSettings
from timmybot.domain.shared.exceptions import (
    DomainError,
    InvalidParametersError,
    StoreUnavailableError,
)
from timmybot.domain.shared.messages import DiscordUIMessages, LogTemplates
from timmybot.utils.logging import command_log_context

if TYPE_CHECKING:
    from ..services.access_control import AccessControlGate
    from .catalog import CommandCatalog
    from .cooldowns import CooldownTracker
    from .invocation import Invocation

logger = logging.getLogger(__name__)


class CommandDispatcher:
    def __init__(
        self,
        *,
        catalog: CommandCatalog,
        access_gate: AccessControlGate,
        cooldowns: CooldownTracker,
        access_settings: AccessSettings | None = None,
    ) -> None:
        self._catalog = catalog
        self._gate = access_gate
        self._cooldowns = cooldowns
        self._unauthorized_message = self._build_unauthorized_message(access_settings)

    @property
    def catalog(self) -> CommandCatalog:
        return self._catalog

    @staticmethod
    def _build_unauthorized_message(settings: AccessSettings | None) -> str:
        settings = settings or AccessSettings()
        message = DiscordUIMessages.UNAUTHORIZED_GUILD.format(contact=settings.contact)
        if settings.self_host_url:
            message += "\n" + DiscordUIMessages.UNAUTHORIZED_SELF_HOST.format(
                url=settings.self_host_url
            )
        return message

    async def dispatch(self, invocation: Invocation) -> CommandResult:
        """Run an invocation through the pipeline. Never raises for handler errors."""
        with command_log_context(invocation.guild_id, invocation.command_name):
            logger.debug(
                LogTemplates.DISPATCH_RECEIVED,
                invocation.command_name,
                invocation.user_id,
                invocation.source.value,
            )
            result = await self._dispatch(invocation)
            logger.debug(
                LogTemplates.DISPATCH_COMPLETED, invocation.command_name, type(result).__name__
            )
            return result

    async def handle(self, invocation: Invocation) -> CommandResult:
        """Dispatch and deliver the reply through the invocation's reply channel."""
        result = await self.dispatch(invocation)
        reply = render_reply(result)

        if invocation.reply_channel is not None:
            try:
                await invocation.reply_channel.send(reply.content, ephemeral=reply.ephemeral)
            except Exception as e:
                logger.warning(LogTemplates.DISPATCH_REPLY_FAILED, invocation.command_name, e)

        return result

    async def _dispatch(self, invocation: Invocation) -> CommandResult:
        command = self._catalog.get(invocation.command_name)
        if command is None:
            logger.info(LogTemplates.DISPATCH_UNKNOWN_COMMAND, invocation.command_name)
            return Failure(
                DiscordUIMessages.ERROR_UNKNOWN_COMMAND.format(name=invocation.command_name),
                kind=FailureKind.UNKNOWN_COMMAND,
            )

        descriptor = command.descriptor

        if descriptor.guild_scoped:
            if invocation.guild_id is None:
                return Unauthorized(DiscordUIMessages.UNAUTHORIZED_DIRECT_MESSAGE)
            if not await self._gate.is_guild_authorized(invocation.guild_id):
                logger.info(
                    LogTemplates.DISPATCH_UNAUTHORIZED, descriptor.name, invocation.guild_id
                )
                return Unauthorized(self._unauthorized_message)

        missing = descriptor.required_permissions - invocation.member_permissions
        if missing:
            logger.info(
                LogTemplates.DISPATCH_MISSING_PERMISSIONS,
                descriptor.name,
                invocation.user_id,
                sorted(missing),
            )
            return Unauthorized(
                DiscordUIMessages.UNAUTHORIZED_PERMISSIONS.format(
                    permissions=", ".join(sorted(missing))
                )
            )

        if descriptor.cooldown_seconds <= 0:
            return await self._execute(command, invocation)

        remaining = self._cooldowns.try_acquire(
            descriptor.name, invocation.user_id, descriptor.cooldown_seconds
        )
        if remaining > 0:
            logger.debug(
                LogTemplates.DISPATCH_COOLDOWN, descriptor.name, invocation.user_id, remaining
            )
            return Cooldown(remaining)

        succeeded = False
        try:
            result = await self._execute(command, invocation)
            succeeded = isinstance(result, Success)
            return result
        finally:
            if succeeded:
                self._cooldowns.commit(
                    descriptor.name, invocation.user_id, descriptor.cooldown_seconds
                )
            else:
                self._cooldowns.release(descriptor.name, invocation.user_id)

    async def _execute(self, command: Command, invocation: Invocation) -> CommandResult:
        ctx = CommandContext(invocation=invocation, descriptor=command.descriptor)
        try:
            return await command.handler.handle(ctx)
        except InvalidParametersError as e:
            return Failure(
                DiscordUIMessages.ERROR_INVALID_PARAMETERS.format(detail=e.message),
                cause=e,
                kind=FailureKind.INVALID_PARAMETERS,
            )
        except StoreUnavailableError as e:
            logger.warning(LogTemplates.DISPATCH_STORE_UNAVAILABLE, e.operation, e.message)
            return Failure(
                DiscordUIMessages.ERROR_STORE_UNAVAILABLE,
                cause=e,
                kind=FailureKind.STORE_UNAVAILABLE,
            )
        except DomainError as e:
            return Failure(
                DiscordUIMessages.ERROR_COMMAND_FAILED.format(detail=e.message),
                cause=e,
                kind=FailureKind.COMMAND_FAILED,
            )
        except Exception as e:
            logger.exception(LogTemplates.DISPATCH_HANDLER_FAULT, command.name)
            return Failure(
                DiscordUIMessages.ERROR_HANDLER_FAULT.format(name=command.name),
                cause=e,
                kind=FailureKind.HANDLER_FAULT,
            )
