"""Builds the command catalog from handlers and descriptors."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from timmybot.application.commands.descriptors import DEFAULT_DESCRIPTORS
from timmybot.application.dispatch.catalog import Command, CommandCatalog
from timmybot.domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from ..dispatch.catalog import CommandDescriptor, CommandHandler


def build_catalog(
    handlers: Mapping[str, CommandHandler],
    descriptors: Iterable[CommandDescriptor] = DEFAULT_DESCRIPTORS,
) -> CommandCatalog:
    """Pair each handler with its descriptor, keeping descriptor order.

    Descriptors without a handler are left out of the catalog; a handler
    without a descriptor is a wiring mistake and raises ``ValueError``.
    """
    descriptors = tuple(descriptors)
    known = {d.name for d in descriptors}
    for name in handlers:
        if name not in known:
            raise ValueError(ErrorMessages.HANDLER_WITHOUT_DESCRIPTOR.format(name=name))

    return CommandCatalog(
        Command(descriptor=d, handler=handlers[d.name]) for d in descriptors if d.name in handlers
    )
