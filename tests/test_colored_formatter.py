"""Tests for the logging helpers: ColoredFormatter and per-command context."""

import logging
from io import StringIO
from unittest.mock import patch

import pytest

from timmybot.utils.logging import ColoredFormatter, GuildContextFilter, command_log_context

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _make_record(level: int = logging.INFO, message: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="timmybot.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


def _formatter(tty: bool) -> ColoredFormatter:
    fmt = ColoredFormatter("%(levelname)s | %(message)s")
    stream = StringIO()
    stream.isatty = lambda: tty  # type: ignore[attr-defined]
    fmt._stream = stream  # type: ignore[attr-defined]
    return fmt


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    @pytest.mark.parametrize("level", list(LEVEL_COLORS))
    def test_color_applied_per_level(self, level: int):
        output = _formatter(tty=True).format(_make_record(level))

        assert LEVEL_COLORS[level] in output
        assert RESET in output

    def test_no_color_when_no_color_env_set(self):
        with patch.dict("os.environ", {"NO_COLOR": "1"}):
            output = _formatter(tty=True).format(_make_record())

        assert "\033[" not in output

    def test_no_color_when_stream_not_tty(self):
        output = _formatter(tty=False).format(_make_record(logging.ERROR, "boom"))

        assert output == "ERROR | boom"

    def test_original_record_not_mutated(self):
        record = _make_record(logging.WARNING)

        _formatter(tty=True).format(record)

        assert record.levelname == "WARNING"


class TestGuildContextFilter:
    """Tests for GuildContextFilter and command_log_context."""

    def test_defaults_outside_command(self):
        record = _make_record()

        assert GuildContextFilter().filter(record) is True
        assert record.guild_id == "-"
        assert record.command == "-"

    def test_stamps_bound_context(self):
        record = _make_record()

        with command_log_context(111, "play"):
            GuildContextFilter().filter(record)

        assert record.guild_id == 111
        assert record.command == "play"

    def test_direct_message_has_no_guild(self):
        record = _make_record()

        with command_log_context(None, "help"):
            GuildContextFilter().filter(record)

        assert record.guild_id == "-"
        assert record.command == "help"

    def test_context_is_restored(self):
        with command_log_context(111, "play"):
            with command_log_context(222, "skip"):
                pass
            inner_record = _make_record()
            GuildContextFilter().filter(inner_record)

        outer_record = _make_record()
        GuildContextFilter().filter(outer_record)

        assert (inner_record.guild_id, inner_record.command) == (111, "play")
        assert (outer_record.guild_id, outer_record.command) == ("-", "-")

    def test_formatter_with_context_fields(self):
        fmt = logging.Formatter("guild=%(guild_id)s cmd=%(command)s | %(message)s")
        record = _make_record(message="hello")

        with command_log_context(42, "queue"):
            GuildContextFilter().filter(record)

        assert fmt.format(record) == "guild=42 cmd=queue | hello"
