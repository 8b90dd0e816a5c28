"""
Tests for PlaybackCoordinator

Covers:
- Starting the front track only when idle
- Advancing on natural track end
- Skip without double advancement
- Dropping unplayable tracks
- Store failures during background advancement and after a skip
- Pruning idle locks
"""

from unittest.mock import AsyncMock

import pytest

from timmybot.application.services.playback_coordinator import PlaybackCoordinator
from timmybot.domain.shared.exceptions import StoreUnavailableError

GUILD_ID = 111
CHANNEL_ID = 333


async def _connect_and_queue(voice, queue_manager, *songs):
    await voice.connect(GUILD_ID, CHANNEL_ID)
    for song in songs:
        await queue_manager.enqueue(GUILD_ID, song)


class TestStartIfIdle:
    """Tests for starting playback."""

    @pytest.mark.asyncio
    async def test_starts_front_track(self, coordinator, voice, queue_manager):
        await _connect_and_queue(voice, queue_manager, "songA", "songB")

        assert await coordinator.start_if_idle(GUILD_ID) == "songA"
        assert voice.played == [(GUILD_ID, "songA")]
        # The playing track stays at the front.
        assert await queue_manager.peek_front(GUILD_ID) == "songA"

    @pytest.mark.asyncio
    async def test_noop_while_playing(self, coordinator, voice, queue_manager):
        await _connect_and_queue(voice, queue_manager, "songA", "songB")
        await coordinator.start_if_idle(GUILD_ID)

        assert await coordinator.start_if_idle(GUILD_ID) is None
        assert len(voice.played) == 1

    @pytest.mark.asyncio
    async def test_noop_when_not_connected(self, coordinator, voice, queue_manager):
        await queue_manager.enqueue(GUILD_ID, "songA")

        assert await coordinator.start_if_idle(GUILD_ID) is None
        assert voice.played == []

    @pytest.mark.asyncio
    async def test_empty_queue(self, coordinator, voice):
        await voice.connect(GUILD_ID, CHANNEL_ID)

        assert await coordinator.start_if_idle(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_store_error_is_logged_not_raised(self, voice, resolver):
        queue_manager = AsyncMock()
        queue_manager.peek_front.side_effect = StoreUnavailableError("query")
        coordinator = PlaybackCoordinator(
            queue_manager=queue_manager, voice_adapter=voice, audio_resolver=resolver
        )
        await voice.connect(GUILD_ID, CHANNEL_ID)

        assert await coordinator.start_if_idle(GUILD_ID) is None


class TestTrackEnd:
    """Tests for advancing when a track finishes."""

    @pytest.mark.asyncio
    async def test_natural_end_advances(self, coordinator, voice, queue_manager):
        await _connect_and_queue(voice, queue_manager, "songA", "songB")
        await coordinator.start_if_idle(GUILD_ID)

        voice.finish_track(GUILD_ID)
        await voice.drain()

        assert voice.played[-1] == (GUILD_ID, "songB")
        assert await queue_manager.peek_front(GUILD_ID) == "songB"

    @pytest.mark.asyncio
    async def test_last_track_end_empties_queue(self, coordinator, voice, queue_manager):
        await _connect_and_queue(voice, queue_manager, "songA")
        await coordinator.start_if_idle(GUILD_ID)

        voice.finish_track(GUILD_ID)
        await voice.drain()

        assert await queue_manager.size(GUILD_ID) == 0
        assert not voice.is_playing(GUILD_ID)


class TestSkip:
    """Tests for skipping."""

    @pytest.mark.asyncio
    async def test_skip_advances_exactly_once(self, coordinator, voice, queue_manager):
        """The end event fired by stopping the old track must not advance again."""
        await _connect_and_queue(voice, queue_manager, "songA", "songB", "songC")
        await coordinator.start_if_idle(GUILD_ID)

        outcome = await coordinator.skip(GUILD_ID)
        await voice.drain()

        assert outcome.skipped == "songA"
        assert outcome.next_track == "songB"
        assert outcome.remaining == 2
        assert [title for _, title in voice.played] == ["songA", "songB"]
        assert await queue_manager.peek_front(GUILD_ID) == "songB"

    @pytest.mark.asyncio
    async def test_skip_empty_queue(self, coordinator):
        assert await coordinator.skip(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_skip_while_idle_drops_front(self, coordinator, queue_manager):
        """Skipping works without a voice connection; nothing starts."""
        await queue_manager.enqueue(GUILD_ID, "songA")
        await queue_manager.enqueue(GUILD_ID, "songB")

        outcome = await coordinator.skip(GUILD_ID)

        assert outcome.skipped == "songA"
        assert outcome.next_track is None
        assert await queue_manager.peek_front(GUILD_ID) == "songB"

    @pytest.mark.asyncio
    async def test_stop_then_natural_end_of_next(self, coordinator, voice, queue_manager):
        """After a skip, the next track's own end still advances."""
        await _connect_and_queue(voice, queue_manager, "songA", "songB", "songC")
        await coordinator.start_if_idle(GUILD_ID)
        await coordinator.skip(GUILD_ID)
        await voice.drain()

        voice.finish_track(GUILD_ID)
        await voice.drain()

        assert voice.played[-1] == (GUILD_ID, "songC")

    @pytest.mark.asyncio
    async def test_store_failure_after_dequeue_still_reports_skip(
        self, coordinator, voice, queue_manager
    ):
        """Once the front is removed the skip stands, even if the next track cannot start."""
        await _connect_and_queue(voice, queue_manager, "songA", "songB")
        await coordinator.start_if_idle(GUILD_ID)
        queue_manager.peek_front = AsyncMock(side_effect=StoreUnavailableError("query"))

        outcome = await coordinator.skip(GUILD_ID)

        assert outcome.skipped == "songA"
        assert outcome.next_track is None
        assert outcome.remaining == 0
        assert [e.track_ref for e in await queue_manager.snapshot(GUILD_ID)] == ["songB"]


class TestUnplayableTracks:
    """Tests for tracks the resolver cannot play."""

    @pytest.mark.asyncio
    async def test_unplayable_front_is_dropped(self, coordinator, voice, queue_manager, resolver):
        resolver.unplayable.add("broken")
        await _connect_and_queue(voice, queue_manager, "broken", "songB")

        assert await coordinator.start_if_idle(GUILD_ID) == "songB"
        assert await queue_manager.peek_front(GUILD_ID) == "songB"

    @pytest.mark.asyncio
    async def test_gives_up_after_three(self, coordinator, voice, queue_manager, resolver):
        resolver.unplayable.update({"b1", "b2", "b3"})
        await _connect_and_queue(voice, queue_manager, "b1", "b2", "b3", "songD")

        assert await coordinator.start_if_idle(GUILD_ID) is None
        assert voice.played == []
        assert await queue_manager.peek_front(GUILD_ID) == "songD"

    @pytest.mark.asyncio
    async def test_resolver_exception_counts_as_unplayable(self, voice, queue_manager):
        resolver = AsyncMock()
        resolver.resolve.side_effect = RuntimeError("network down")
        coordinator = PlaybackCoordinator(
            queue_manager=queue_manager, voice_adapter=voice, audio_resolver=resolver
        )
        await _connect_and_queue(voice, queue_manager, "songA")

        assert await coordinator.start_if_idle(GUILD_ID) is None
        assert await queue_manager.size(GUILD_ID) == 0


class TestStop:
    """Tests for stopping playback."""

    @pytest.mark.asyncio
    async def test_stop_keeps_queue(self, coordinator, voice, queue_manager):
        await _connect_and_queue(voice, queue_manager, "songA", "songB")
        await coordinator.start_if_idle(GUILD_ID)

        assert await coordinator.stop(GUILD_ID) is True
        await voice.drain()

        assert not voice.is_playing(GUILD_ID)
        assert await queue_manager.size(GUILD_ID) == 2

    @pytest.mark.asyncio
    async def test_stop_when_idle(self, coordinator):
        assert await coordinator.stop(GUILD_ID) is False


class TestLockPruning:
    """Tests for dropping per-guild playback locks."""

    @pytest.mark.asyncio
    async def test_idle_locks_are_pruned(self, coordinator, voice, queue_manager):
        await _connect_and_queue(voice, queue_manager, "songA")
        await coordinator.start_if_idle(GUILD_ID)
        await coordinator.stop(GUILD_ID + 1)

        assert coordinator.prune_locks() == 2
        assert coordinator.prune_locks() == 0
        # Playback keeps working with a fresh lock.
        assert await coordinator.stop(GUILD_ID) is True
        await voice.drain()
