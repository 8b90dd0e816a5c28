"""Logging helpers: colored console output and per-command context."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_guild_id: ContextVar[int | None] = ContextVar("guild_id", default=None)
_command: ContextVar[str | None] = ContextVar("command", default=None)


class ColoredFormatter(logging.Formatter):
    """Logging formatter that applies ANSI color codes to the levelname field.

    Colors are disabled when the ``NO_COLOR`` environment variable is set or
    when the output stream is not a TTY (e.g. redirected to a file).
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = getattr(self, "_stream", None) or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self._use_color():
            color = self.COLORS.get(record.levelno, "")
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class GuildContextFilter(logging.Filter):
    """Stamps ``guild_id`` and ``command`` onto every record.

    Values come from the context bound by :func:`command_log_context`; outside
    a command both are ``"-"`` so format strings can always reference them.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        guild_id = _guild_id.get()
        command = _command.get()
        record.guild_id = "-" if guild_id is None else guild_id
        record.command = command or "-"
        return True


@contextmanager
def command_log_context(guild_id: int | None, command: str) -> Iterator[None]:
    """Bind guild and command for log records emitted inside the block."""
    guild_token = _guild_id.set(guild_id)
    command_token = _command.set(command)
    try:
        yield
    finally:
        _command.reset(command_token)
        _guild_id.reset(guild_token)
