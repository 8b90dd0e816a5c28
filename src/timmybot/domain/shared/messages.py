"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Field Validation Errors (templates)

    # Settings Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_SQL_IDENTIFIER = "Invalid table name '{name}'"

    # Catalog Errors
    DUPLICATE_COMMAND = "Command '{name}' is registered more than once"
    HANDLER_WITHOUT_DESCRIPTOR = "No descriptor for handler '{name}'"

    # Parameter Errors
    MISSING_PARAMETER = "Missing required parameter '{name}'"
    TRACK_REF_TOO_LONG = "Track reference exceeds {limit} characters"
    GUILD_REQUIRED = "This command can only be used inside a server."

    # Store Errors
    BATCH_TOO_LARGE = "Batch of {size} exceeds the store limit of {limit}"
    STORE_TIMEOUT = "Store did not answer within {timeout}s during '{operation}'"

    # Authentication/Security Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Maintenance
    MAINTENANCE_STARTED = "Maintenance job started"
    MAINTENANCE_STOPPED = "Maintenance job stopped"
    MAINTENANCE_ALREADY_RUNNING = "Maintenance job is already running"
    MAINTENANCE_CYCLE_RUNNING = "Running maintenance cycle"
    MAINTENANCE_COMPLETED = (
        "Maintenance completed: %s cooldowns swept, %s guild caches evicted, "
        "%s playback locks pruned"
    )
    MAINTENANCE_COOLDOWNS_FAILED = "Failed to sweep cooldowns: %r"
    MAINTENANCE_CACHE_FAILED = "Failed to evict idle queue caches: %r"
    MAINTENANCE_LOCKS_FAILED = "Failed to prune playback locks: %r"

    # Access Control
    ACCESS_CHECK_FAILED = "Allowlist lookup failed for guild %s, denying: %r"
    ACCESS_DENIED = "Guild %s is not on the allowlist"
    ALLOWLIST_ADDED = "Added guild %s to the allowlist"
    ALLOWLIST_REMOVED = "Removed guild %s from the allowlist"

    # Dispatch
    DISPATCH_RECEIVED = "Dispatching '%s' from user %s (source=%s)"
    DISPATCH_UNKNOWN_COMMAND = "Unknown command '%s'"
    DISPATCH_UNAUTHORIZED = "Command '%s' rejected for guild %s"
    DISPATCH_MISSING_PERMISSIONS = "Command '%s' rejected for user %s: missing %s"
    DISPATCH_COOLDOWN = "Command '%s' on cooldown for user %s (%ss left)"
    DISPATCH_COMPLETED = "Command '%s' finished with %s"
    DISPATCH_HANDLER_FAULT = "Unhandled error in command '%s'"
    DISPATCH_STORE_UNAVAILABLE = "Store unavailable during '%s': %s"
    DISPATCH_REPLY_FAILED = "Failed to deliver reply for '%s': %r"

    # Cooldowns
    COOLDOWN_SWEPT = "Swept %d expired cooldown records"

    # Queue Operations
    QUEUE_ENQUEUED = "Enqueued '%s' at position %s in guild %s"
    QUEUE_DEQUEUED = "Dequeued '%s' from position %s in guild %s"
    QUEUE_CLEARED = "Cleared %s tracks from queue in guild %s"
    QUEUE_CACHE_LOADED = "Loaded %s queue entries for guild %s from store"
    QUEUE_CACHE_INVALIDATED = "Invalidated queue cache for guild %s"
    QUEUE_CACHE_EVICTED = "Evicted %d idle guild queue caches"
    GUILD_LOCKS_PRUNED = "Pruned %d unused guild locks"
    QUEUE_POSITION_CONFLICT = "Position conflict in guild %s, cache invalidated"
    QUEUE_CLEAR_FAILED = "Clear failed midway in guild %s after %s deletions"

    # Store Operations
    STORE_TIMEOUT = "Store operation '%s' timed out after %ss"
    STORE_ERROR = "Store operation '%s' failed: %r"

    # Voice/Audio Operations
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_MOVE_TIMEOUT = "Timeout moving to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_NOT_CONNECTED = "Not connected to voice in guild %s"
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_FAILED_START = "Failed to start playback: %s"
    PLAYBACK_UNRESOLVED = "Could not resolve '%s' to a stream in guild %s"
    PLAYBACK_NO_CALLBACK = "No track end callback set for guild %s"
    PLAYBACK_CALLBACK_ERROR = "Error in track end callback for guild %s: %s"
    PLAYBACK_ADVANCE_FAILED = "Could not advance queue in guild %s: %s"
    PLAYBACK_SKIP_FOLLOWUP_FAILED = "Skipped track in guild %s but could not start the next one: %s"
    PLAYBACK_RESOLVE_RETRY = "Dropped unplayable track '%s' in guild %s (attempt %d/%d)"
    PLAYBACK_RESOLVE_RETRIES_EXHAUSTED = "Gave up after %d unplayable tracks in guild %s"
    TRACK_ENDED = "Track ended in guild %s"
    TRACK_SUPPRESSED_END = "Ignoring end event for replaced track in guild %s"
    QUEUE_EXHAUSTED = "Queue exhausted in guild %s"

    # Resolver
    YTDLP_FAILED_EXTRACT = "yt-dlp extraction failed for '%s'"
    YTDLP_NO_STREAM_URL = "No stream URL for '%s'"
    CACHE_HIT = "Cache hit for '%s'"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired cache entries"

    # Application Lifecycle
    BOT_STARTING = "Starting TimmyBot in %s mode (prefix %r, database %s)"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt"
    BOT_FATAL_ERROR = "Fatal error: %s"

    # Bot Lifecycle
    BOT_SETUP = "Setting up bot..."
    BOT_CONTAINER_INITIALIZED = "Container initialized"
    BOT_CONTAINER_INIT_FAILED = "Failed to initialize container: %s"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_READY = "Logged in as %s (ID: %s)"
    BOT_CONNECTED_GUILDS = "Connected to %d guilds, %d allowlisted"
    BOT_ALLOWLIST_COUNT_FAILED = "Could not read the allowlist: %r"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %.0fs"
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error shutting down container: %s"
    BOT_MAINTENANCE_START_FAILED = "Failed to start maintenance job: %s"
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Loaded %d cogs, %d failed"
    BOT_SLASH_COMMAND_ERROR = "Slash command error in /%s: %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"

    # Bot Command Sync
    BOT_SYNC_ON_STARTUP_FAILED = "Failed to sync commands on startup: %s"
    BOT_SYNCED_GUILD = "Synced %d commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %d commands globally"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync commands globally: %s"

    # Guild Events
    GUILD_JOINED = "Joined guild: %s (%s), allowlisted=%s"
    GUILD_NOT_ALLOWLISTED_HINT = (
        "Guild %s is not allowlisted; run 'timmybot-allowlist add %s' to enable its commands"
    )
    GUILD_REMOVED = "Removed from guild: %s (%s)"
    VOICE_FORCED_DISCONNECT = "Removed from voice channel %s in guild %s"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in Discord interactions.
    Keep them concise, friendly, and include appropriate emoji.
    """

    # Generic results
    SUCCESS_GENERIC = "✅ Command executed successfully"
    COOLDOWN_ACTIVE = "⏱️ Command on cooldown. Try again in {seconds} second{plural}."

    # Access Control
    UNAUTHORIZED_GUILD = "❌ This server is not authorized to use TimmyBot. {contact}"
    UNAUTHORIZED_SELF_HOST = "You can also run your own copy: {url}"
    UNAUTHORIZED_DIRECT_MESSAGE = "❌ This command can only be used inside a server."
    UNAUTHORIZED_PERMISSIONS = "❌ You need the {permissions} permission to use this command."

    # Dispatch Errors
    ERROR_UNKNOWN_COMMAND = "❌ Unknown command `{name}`."
    ERROR_STORE_UNAVAILABLE = "❌ The queue is temporarily unavailable. Please try again shortly."
    ERROR_HANDLER_FAULT = "❌ Something went wrong while running `{name}`."
    ERROR_INVALID_PARAMETERS = "❌ {detail}"
    ERROR_UNEXPECTED = "❌ An unexpected error occurred. Please try again."
    ERROR_COMMAND_FAILED = "❌ {detail}"

    # Voice
    ERROR_NOT_IN_VOICE = "❌ You need to be in a voice channel to use this command!"
    ERROR_VOICE_CONNECT = "❌ I need permission to connect and speak in your voice channel!"
    ERROR_NOT_CONNECTED = "❌ I'm not connected to a voice channel."
    SUCCESS_JOINED = "✅ Joined <#{channel_id}>! Ready to play music."
    SUCCESS_LEFT = "👋 Left the voice channel."

    # Queue
    SUCCESS_ENQUEUED = "🎵 Added **{track}** to the queue at position {position}."
    SUCCESS_NOW_PLAYING = "🎶 Now playing **{track}**."
    SUCCESS_SKIPPED = "⏭️ **Track skipped!**\n📊 **Tracks remaining in queue:** {remaining}"
    SUCCESS_SKIPPED_EMPTY = "⏭️ **Track skipped!** Queue is now empty."
    SUCCESS_QUEUE_CLEARED = (
        "🗑️ **Queue cleared!**\n📊 **Removed {count} track{plural}** from the queue "
        "and stopped playback."
    )
    STATE_QUEUE_EMPTY = "📭 The queue is empty."
    STATE_QUEUE_ALREADY_EMPTY = "📭 The queue is already empty."
    STATE_NOTHING_TO_SKIP = "❌ There are no tracks in the queue to skip!"
    STATE_CURRENT_TRACK = "🎶 Current track: **{track}**"
    STATE_QUEUE_HEADER = "📜 **Queue** ({total} track{plural})"
    STATE_QUEUE_LINE = "`{index}.` {track}"
    STATE_QUEUE_MORE = "…and {more} more"

    # Info
    SUCCESS_PONG = "🏓 Pong!\n📡 Latency: {latency_ms}ms"
    HELP_HEADER = "📖 **TimmyBot commands** (slash `/name` or prefix `{prefix}name`)"
    HELP_LINE = "`{usage}` - {description}{cooldown}"
    HELP_COOLDOWN_SUFFIX = " ({seconds}s cooldown)"
    EXPLAIN_TEXT = (
        "🏗️ **TimmyBot Architecture**\n"
        "🔧 discord.py with slash and `{prefix}` prefix commands sharing one dispatcher\n"
        "🔐 Guild allowlist checked before every guild command, denying on any lookup error\n"
        "💾 Per-guild queues in SQLite with an in-process write-through cache\n"
        "🎵 Audio through FFmpeg with yt-dlp stream resolution"
    )
