"""Shared validators for settings and domain models."""

import re

from timmybot.domain.shared.messages import ErrorMessages

_SQL_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Discord snowflake IDs are 64-bit unsigned integers representing unique
    identifiers for users, guilds, channels, messages, etc.

    Args:
        value: The snowflake ID to validate.

    Returns:
        The validated snowflake ID.

    Raises:
        ValueError: If the snowflake ID is invalid.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def validate_sql_identifier(value: str) -> str:
    """Validate that a configured table name can be interpolated into SQL.

    Raises:
        ValueError: If the name contains anything besides letters, digits and
            underscores, or starts with a digit.
    """
    if not _SQL_IDENTIFIER.match(value):
        raise ValueError(ErrorMessages.INVALID_SQL_IDENTIFIER.format(name=value))
    return value
