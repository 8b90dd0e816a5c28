"""
Tests for main.py - Main Entry Point

Covers logging setup from logging_config.json, the missing-token check,
the startup sequence and exit codes.
"""

import json
import logging
from unittest.mock import MagicMock, mock_open, patch

import pytest
from pydantic import SecretStr

from timmybot.main import _LOGGING_CONFIG_PATH, cli, main, setup_logging

_SETTINGS = "timmybot.config.settings.get_settings"
_CONTAINER = "timmybot.config.container.create_container"
_BOT = "timmybot.infrastructure.discord.bot.create_bot"


def _settings(token: str = "test_token_123") -> MagicMock:
    settings = MagicMock()
    settings.discord.token = SecretStr(token)
    settings.log_level = "INFO"
    settings.environment = "test"
    return settings


class TestLoggingSetup:
    """Tests for logging configuration."""

    def test_shipped_config_exists(self):
        """The repository ships the JSON config main() loads."""
        config = json.loads(_LOGGING_CONFIG_PATH.read_text())

        assert config["version"] == 1
        assert "guild_context" in config["filters"]
        assert config["loggers"]["discord"]["level"] == "WARNING"

    def test_dictconfig_called_when_json_exists(self):
        config = {"version": 1, "disable_existing_loggers": False, "root": {"level": "INFO"}}
        with (
            patch("builtins.open", mock_open(read_data=json.dumps(config))),
            patch("logging.config.dictConfig") as mock_dc,
        ):
            setup_logging()

        mock_dc.assert_called_once_with(config)

    @pytest.mark.parametrize(
        "open_patch",
        [
            {"side_effect": FileNotFoundError},
            {"new": mock_open(read_data="{invalid json")},
        ],
    )
    def test_fallback_to_basicconfig(self, open_patch):
        with (
            patch("builtins.open", **open_patch),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging()

        mock_bc.assert_called_once()
        assert mock_bc.call_args.kwargs["level"] == logging.INFO

    def test_root_level_follows_settings(self):
        with (
            patch("builtins.open", mock_open(read_data='{"version": 1}')),
            patch("logging.config.dictConfig"),
            patch("logging.getLogger") as mock_get_logger,
        ):
            setup_logging("DEBUG")

        mock_get_logger.return_value.setLevel.assert_called_once_with(logging.DEBUG)

    def test_rejected_config_falls_back(self):
        with (
            patch("builtins.open", mock_open(read_data='{"version": 99}')),
            patch("logging.config.dictConfig", side_effect=ValueError("bad version")),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging("WARNING")

        assert mock_bc.call_args.kwargs["level"] == logging.WARNING


class TestMainFunction:
    """Tests for the main() entry point."""

    def test_missing_token_exits_with_error(self):
        with patch(_SETTINGS, return_value=_settings("")), patch("timmybot.main.setup_logging"):
            assert main() == 1

    def test_successful_run(self):
        settings = _settings()
        container = MagicMock()
        bot = MagicMock()

        with (
            patch(_SETTINGS, return_value=settings),
            patch("timmybot.main.setup_logging"),
            patch(_CONTAINER, return_value=container) as mock_container,
            patch(_BOT, return_value=bot) as mock_bot,
        ):
            assert main() == 0

        mock_container.assert_called_once_with(settings)
        mock_bot.assert_called_once_with(container, settings)
        bot.run_with_graceful_shutdown.assert_called_once_with("test_token_123")

    @pytest.mark.parametrize(
        ("error", "expected"), [(KeyboardInterrupt(), 0), (RuntimeError("crashed"), 1)]
    )
    def test_run_errors(self, error, expected):
        bot = MagicMock()
        bot.run_with_graceful_shutdown.side_effect = error

        with (
            patch(_SETTINGS, return_value=_settings()),
            patch("timmybot.main.setup_logging"),
            patch(_CONTAINER),
            patch(_BOT, return_value=bot),
        ):
            assert main() == expected

    def test_startup_order(self):
        calls = []

        def record(name, value=None):
            def side_effect(*args, **kwargs):
                calls.append(name)
                return value if value is not None else MagicMock()

            return side_effect

        with (
            patch(_SETTINGS, side_effect=record("get_settings", _settings())),
            patch("timmybot.main.setup_logging", side_effect=record("setup_logging")),
            patch(_CONTAINER, side_effect=record("create_container")),
            patch(_BOT, side_effect=record("create_bot")),
        ):
            main()

        assert calls == ["get_settings", "setup_logging", "create_container", "create_bot"]

    def test_cli_exits_with_main_result(self):
        with patch("timmybot.main.main", return_value=1), pytest.raises(SystemExit) as exc:
            cli()

        assert exc.value.code == 1
