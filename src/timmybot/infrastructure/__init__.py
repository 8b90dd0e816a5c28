"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite queue store and allowlist)
- Discord (bot, cogs, voice adapter, reply channels)
- Audio (yt-dlp, FFmpeg)
- Background maintenance
"""

from timmybot.infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter
from timmybot.infrastructure.discord.bot import create_bot
from timmybot.infrastructure.persistence.database import Database

__all__ = [
    "create_bot",
    "DiscordVoiceAdapter",
    "Database",
]
