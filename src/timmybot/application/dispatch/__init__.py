"""Command dispatch: one pipeline for slash and prefix invocations."""

from timmybot.application.dispatch.catalog import (
    Command,
    CommandCatalog,
    CommandContext,
    CommandDescriptor,
    CommandHandler,
)
from timmybot.application.dispatch.cooldowns import CooldownTracker
from timmybot.application.dispatch.dispatcher import CommandDispatcher
from timmybot.application.dispatch.invocation import (
    Invocation,
    InvocationSource,
    ReplyChannel,
    parse_prefix_message,
)
from timmybot.application.dispatch.results import (
    CommandResult,
    Cooldown,
    Failure,
    FailureKind,
    Reply,
    Success,
    Unauthorized,
    render_reply,
)

__all__ = [
    "Command",
    "CommandCatalog",
    "CommandContext",
    "CommandDescriptor",
    "CommandDispatcher",
    "CommandHandler",
    "CommandResult",
    "Cooldown",
    "CooldownTracker",
    "Failure",
    "FailureKind",
    "Invocation",
    "InvocationSource",
    "Reply",
    "ReplyChannel",
    "Success",
    "Unauthorized",
    "parse_prefix_message",
    "render_reply",
]
