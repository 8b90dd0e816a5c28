"""discord.py implementation of VoiceAdapter: one voice client per guild, FFmpeg playback."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import discord

from timmybot.application.interfaces.voice_adapter import VoiceAdapter
from timmybot.config.settings import AudioSettings
from timmybot.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ....application.interfaces.audio_resolver import ResolvedStream

logger = logging.getLogger(__name__)

VoiceChannelLike = discord.VoiceChannel | discord.StageChannel


class DiscordVoiceAdapter(VoiceAdapter):
    def __init__(self, bot: discord.Client, settings: AudioSettings | None = None) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()
        self._on_track_end: Callable[[int], Awaitable[None]] | None = None

    # ─────────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────────

    def _voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        vc = guild.voice_client if guild else None
        return vc if isinstance(vc, discord.VoiceClient) else None

    def _voice_channel(self, guild_id: int, channel_id: int) -> VoiceChannelLike | None:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            return None

        channel = guild.get_channel(channel_id)
        if isinstance(channel, VoiceChannelLike):
            return channel
        logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
        return None

    # ─────────────────────────────────────────────────────────────────
    # Connection
    # ─────────────────────────────────────────────────────────────────

    async def _attempt(self, action: Awaitable[object], channel_id: int, timeout_log: str) -> bool:
        """Await a connect or move, mapping every failure to False."""
        try:
            async with asyncio.timeout(self._settings.connect_timeout_s):
                await action
        except TimeoutError:
            logger.error(timeout_log, channel_id)
            return False
        except discord.Forbidden:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            return False
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False
        except Exception:
            logger.exception("Voice operation on channel %s failed", channel_id)
            return False
        return True

    async def connect(self, guild_id: int, channel_id: int) -> bool:
        channel = self._voice_channel(guild_id, channel_id)
        if channel is None:
            return False

        # Deafened: the bot never listens.
        joined = await self._attempt(
            channel.connect(self_deaf=True), channel_id, LogTemplates.VOICE_CONNECTION_TIMEOUT
        )
        if joined:
            logger.info(LogTemplates.VOICE_CONNECTED, channel.name, channel.guild.name)
        return joined

    async def move_to(self, guild_id: int, channel_id: int) -> bool:
        vc = self._voice_client(guild_id)
        if vc is None:
            return await self.connect(guild_id, channel_id)

        channel = self._voice_channel(guild_id, channel_id)
        if channel is None:
            return False

        moved = await self._attempt(vc.move_to(channel), channel_id, LogTemplates.VOICE_MOVE_TIMEOUT)
        if moved:
            logger.info(LogTemplates.VOICE_MOVED, channel.name)
        return moved

    async def ensure_connected(self, guild_id: int, channel_id: int) -> bool:
        """Join ``channel_id``, moving from another channel or replacing a dead client."""
        vc = self._voice_client(guild_id)

        if vc is not None and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild_id)
            await self.disconnect(guild_id)
            vc = None

        if vc is None or vc.channel is None:
            return await self.connect(guild_id, channel_id)
        if vc.channel.id == channel_id:
            return True
        return await self.move_to(guild_id, channel_id)

    async def disconnect(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        if vc is None:
            return True

        try:
            await vc.disconnect(force=True)
        except Exception:
            logger.exception("Failed to disconnect from voice")
            return False
        logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
        return True

    # ─────────────────────────────────────────────────────────────────
    # Playback
    # ─────────────────────────────────────────────────────────────────

    def _build_source(self, stream: ResolvedStream) -> discord.AudioSource:
        ffmpeg = self._settings.ffmpeg_options
        source = discord.FFmpegPCMAudio(
            stream.stream_url,
            before_options=ffmpeg.get("before_options", ""),
            options=ffmpeg.get("options", ""),
        )
        return discord.PCMVolumeTransformer(source, volume=self._settings.default_volume)

    def _after_playing(self, guild_id: int) -> Callable[[Exception | None], None]:
        def _after(error: Exception | None = None) -> None:
            # Audio player thread: hop back onto the bot's loop.
            if error:
                logger.warning(LogTemplates.PLAYBACK_ERROR, guild_id, error)
            asyncio.run_coroutine_threadsafe(self._handle_track_end(guild_id), self._bot.loop)

        return _after

    async def play(self, guild_id: int, stream: ResolvedStream) -> bool:
        vc = self._voice_client(guild_id)
        if vc is None:
            logger.warning(LogTemplates.VOICE_NOT_CONNECTED, guild_id)
            return False

        try:
            vc.play(self._build_source(stream), after=self._after_playing(guild_id))
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False
        except Exception as e:
            logger.error(LogTemplates.PLAYBACK_FAILED_START, e)
            return False
        return True

    async def stop(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        if vc is None or not (vc.is_playing() or vc.is_paused()):
            return False
        vc.stop()
        return True

    def is_connected(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        return vc is not None and vc.is_connected()

    def is_playing(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        return vc is not None and (vc.is_playing() or vc.is_paused())

    def set_on_track_end_callback(self, callback: Callable[[int], Awaitable[None]]) -> None:
        self._on_track_end = callback

    async def _handle_track_end(self, guild_id: int) -> None:
        if self._on_track_end is None:
            logger.warning(LogTemplates.PLAYBACK_NO_CALLBACK, guild_id)
            return

        try:
            await self._on_track_end(guild_id)
        except Exception as e:
            logger.error(LogTemplates.PLAYBACK_CALLBACK_ERROR, guild_id, e)
