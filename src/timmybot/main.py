#!/usr/bin/env python3
"""TimmyBot entry point: configure logging, wire the container, run the bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from timmybot.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from timmybot.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

_FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _read_logging_config(path: Path) -> dict[str, Any] | None:
    try:
        with open(path) as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return None


def setup_logging(log_level: str = "INFO") -> None:
    """Apply ``logging_config.json``, or a plain console config if it is unusable.

    ``log_level`` always wins over the root level of the JSON file.
    """
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    config = _read_logging_config(_LOGGING_CONFIG_PATH)
    applied = False
    if config is not None:
        try:
            logging.config.dictConfig(config)
            applied = True
        except ValueError:
            pass

    if not applied:
        logging.basicConfig(level=resolved_level, format=_FALLBACK_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        logging.warning("Could not load %s, using basic console logging", _LOGGING_CONFIG_PATH)

    logging.getLogger().setLevel(resolved_level)


def _run(settings: Settings, token: str) -> int:
    from timmybot.config.container import create_container
    from timmybot.infrastructure.discord.bot import create_bot

    logger = logging.getLogger(__name__)

    container = create_container(settings)
    bot = create_bot(container, settings)

    try:
        logger.info(LogTemplates.BOT_STARTING_RUN)
        bot.run_with_graceful_shutdown(token)
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1

    logger.info(LogTemplates.BOT_STOPPED)
    return 0


def main() -> int:
    from timmybot.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)

    token = settings.discord.token.get_secret_value()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(
        LogTemplates.BOT_STARTING,
        settings.environment,
        settings.discord.command_prefix,
        settings.database.url,
    )
    return _run(settings, token)


def cli() -> None:
    """Console script entry point (``timmybot``)."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
