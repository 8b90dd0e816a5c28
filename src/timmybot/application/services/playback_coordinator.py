"""Playback Coordinator - keeps the voice connection playing the front of each guild queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from timmybot.domain.shared.exceptions import DomainError
from timmybot.domain.shared.messages import LogTemplates
from timmybot.domain.shared.types import DiscordSnowflake, NonNegativeInt
from timmybot.utils.keyed_lock import KeyedLock

if TYPE_CHECKING:
    from ..interfaces.audio_resolver import AudioResolver, ResolvedStream
    from ..interfaces.voice_adapter import VoiceAdapter
    from .queue_manager import GuildQueueManager

logger = logging.getLogger(__name__)


class SkipOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    skipped: str
    next_track: str | None = None
    remaining: NonNegativeInt = 0


class PlaybackCoordinator:
    """Plays the front entry of a guild queue and advances when it ends.

    The front of the queue is the track being played; it is removed from the
    queue when the track ends or is skipped, never when it starts.
    """

    _MAX_RESOLVE_RETRIES: int = 3

    def __init__(
        self,
        *,
        queue_manager: GuildQueueManager,
        voice_adapter: VoiceAdapter,
        audio_resolver: AudioResolver,
    ) -> None:
        self._queue = queue_manager
        self._voice = voice_adapter
        self._resolver = audio_resolver
        self._locks: KeyedLock[DiscordSnowflake] = KeyedLock()

        # discord.py fires the "after" callback for tracks we stop on purpose too.
        # Suppress the next event per guild so a skip does not advance twice.
        self._ignore_next_track_end: set[DiscordSnowflake] = set()

        self._voice.set_on_track_end_callback(self.on_track_end)

    def is_playing(self, guild_id: DiscordSnowflake) -> bool:
        return self._voice.is_playing(guild_id)

    async def start_if_idle(self, guild_id: DiscordSnowflake) -> str | None:
        """Start the front track unless something is already playing.

        Returns the title that started, or None when nothing was started. Store
        failures are logged, not raised: the caller's write already succeeded.
        """
        async with self._locks.hold(guild_id):
            if self._voice.is_playing(guild_id):
                return None
            try:
                return await self._play_front(guild_id)
            except DomainError as e:
                logger.warning(LogTemplates.PLAYBACK_ADVANCE_FAILED, guild_id, e)
                return None

    async def on_track_end(self, guild_id: DiscordSnowflake) -> None:
        if guild_id in self._ignore_next_track_end:
            self._ignore_next_track_end.discard(guild_id)
            logger.debug(LogTemplates.TRACK_SUPPRESSED_END, guild_id)
            return

        logger.debug(LogTemplates.TRACK_ENDED, guild_id)
        async with self._locks.hold(guild_id):
            try:
                await self._queue.dequeue(guild_id)
                await self._play_front(guild_id)
            except DomainError as e:
                logger.warning(LogTemplates.PLAYBACK_ADVANCE_FAILED, guild_id, e)

    async def skip(self, guild_id: DiscordSnowflake) -> SkipOutcome | None:
        """Drop the front track and start the next one.

        Returns None when the queue is empty. A store error before the front
        track is removed propagates. Once it is removed the skip has happened,
        so later failures only leave ``next_track`` unset.
        """
        async with self._locks.hold(guild_id):
            if await self._queue.size(guild_id) == 0:
                return None

            await self._stop_voice(guild_id)
            try:
                skipped = await self._queue.dequeue(guild_id)
            except Exception:
                self._ignore_next_track_end.discard(guild_id)
                raise

            next_track: str | None = None
            remaining = 0
            try:
                next_track = await self._play_front(guild_id)
                remaining = await self._queue.size(guild_id)
            except DomainError as e:
                logger.warning(LogTemplates.PLAYBACK_SKIP_FOLLOWUP_FAILED, guild_id, e)

            return SkipOutcome(
                skipped=skipped or "",
                next_track=next_track,
                remaining=remaining,
            )

    def prune_locks(self) -> int:
        """Drop the locks of guilds with no playback operation running or waiting."""
        return self._locks.prune()

    async def stop(self, guild_id: DiscordSnowflake) -> bool:
        """Stop playback without touching the queue."""
        async with self._locks.hold(guild_id):
            return await self._stop_voice(guild_id)

    async def _stop_voice(self, guild_id: DiscordSnowflake) -> bool:
        if not self._voice.is_playing(guild_id):
            return False

        self._ignore_next_track_end.add(guild_id)
        try:
            stopped = await self._voice.stop(guild_id)
        except Exception:
            # Stop failed, so the callback may still fire normally.
            self._ignore_next_track_end.discard(guild_id)
            logger.exception("Error stopping playback")
            return False

        if not stopped:
            self._ignore_next_track_end.discard(guild_id)
            return False

        logger.info(LogTemplates.PLAYBACK_STOPPED, guild_id)
        return True

    async def _play_front(self, guild_id: DiscordSnowflake) -> str | None:
        """Must be called with the guild's lock held."""
        if not self._voice.is_connected(guild_id):
            return None

        for attempt in range(self._MAX_RESOLVE_RETRIES):
            track_ref = await self._queue.peek_front(guild_id)
            if track_ref is None:
                logger.info(LogTemplates.QUEUE_EXHAUSTED, guild_id)
                return None

            stream = await self._resolve(guild_id, track_ref)
            if stream is not None and await self._voice.play(guild_id, stream):
                logger.info(LogTemplates.PLAYBACK_STARTED, stream.title, guild_id)
                return stream.title

            logger.warning(
                LogTemplates.PLAYBACK_RESOLVE_RETRY,
                track_ref,
                guild_id,
                attempt + 1,
                self._MAX_RESOLVE_RETRIES,
            )
            await self._queue.dequeue(guild_id)

        logger.error(
            LogTemplates.PLAYBACK_RESOLVE_RETRIES_EXHAUSTED, self._MAX_RESOLVE_RETRIES, guild_id
        )
        return None

    async def _resolve(self, guild_id: DiscordSnowflake, track_ref: str) -> ResolvedStream | None:
        try:
            stream = await self._resolver.resolve(track_ref)
        except Exception:
            logger.exception("Failed to resolve stream URL")
            return None

        if stream is None:
            logger.warning(LogTemplates.PLAYBACK_UNRESOLVED, track_ref, guild_id)
        return stream
