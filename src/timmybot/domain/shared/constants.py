"""Centralized constants for configuration keys, database schema, and other shared values."""

from __future__ import annotations


class DatabaseTables:
    """Default database table names.

    The actual names are configurable via ``DatabaseSettings``; these are the
    defaults and the names used by tests.
    """

    GUILD_QUEUES = "guild_queues"
    SERVER_ALLOWLIST = "server_allowlist"


class SQLPragmas:
    """SQLite PRAGMA statements applied to each connection."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"


class DatabaseURLSchemes:
    """Valid database URL schemes for validation."""

    SQLITE = "sqlite://"

    # For in-memory testing
    MEMORY = ":memory:"
    MEMORY_SHARED_URI = "file:timmybot-{name}?mode=memory&cache=shared"


class AudioConstants:
    """Audio and FFmpeg configuration constants."""

    FFMPEG_BEFORE_OPTIONS_DEFAULT = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    FFMPEG_OPTIONS_DEFAULT = "-vn"
    YTDLP_FORMAT_DEFAULT = "bestaudio/best"
    DEFAULT_VOLUME = 0.5
    CONNECT_TIMEOUT_SECONDS = 10.0


class LimitConstants:
    """Numeric limits and defaults."""

    # Queue store
    DEFAULT_MAX_BATCH_DELETE = 25
    DEFAULT_STORE_TIMEOUT_SECONDS = 2.5
    MAX_TRACK_REF_LENGTH = 2000

    # Command defaults from the command catalog
    PLAY_COOLDOWN_SECONDS = 2
    PING_COOLDOWN_SECONDS = 5

    # Queue listing
    QUEUE_LIST_LIMIT = 10

    # Discord limits
    MAX_MESSAGE_LENGTH = 2000
