"""Tests for CooldownTracker."""

import pytest

from timmybot.application.dispatch.cooldowns import CooldownTracker


class FakeClock:
    def __init__(self, now: int = 1_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(clock):
    return CooldownTracker(clock=clock)


class TestCooldownTracker:
    """Tests for reservation, commit and expiry."""

    def test_first_acquire_succeeds(self, tracker):
        assert tracker.try_acquire("play", 1, 2) == 0

    def test_commit_starts_cooldown(self, tracker):
        tracker.try_acquire("play", 1, 2)
        tracker.commit("play", 1, 2)

        assert tracker.try_acquire("play", 1, 2) == 2
        assert tracker.remaining_seconds("play", 1) == 2

    def test_release_does_not_start_cooldown(self, tracker):
        """A failed execution leaves the user free to retry."""
        tracker.try_acquire("play", 1, 2)
        tracker.release("play", 1)

        assert tracker.try_acquire("play", 1, 2) == 0

    def test_pending_reservation_blocks_with_full_cooldown(self, tracker):
        """A second invocation while the first still runs sees the full cooldown."""
        tracker.try_acquire("ping", 1, 5)

        assert tracker.try_acquire("ping", 1, 5) == 5

    def test_remaining_rounds_up(self, tracker, clock):
        tracker.try_acquire("ping", 1, 5)
        tracker.commit("ping", 1, 5)
        clock.now += 4_001

        assert tracker.remaining_seconds("ping", 1) == 1

    def test_expires(self, tracker, clock):
        tracker.try_acquire("ping", 1, 5)
        tracker.commit("ping", 1, 5)
        clock.now += 5_000

        assert tracker.remaining_seconds("ping", 1) == 0
        assert tracker.try_acquire("ping", 1, 5) == 0

    def test_keys_are_per_user_and_command(self, tracker):
        tracker.try_acquire("play", 1, 2)
        tracker.commit("play", 1, 2)

        assert tracker.try_acquire("play", 2, 2) == 0
        assert tracker.try_acquire("ping", 1, 5) == 0

    def test_sweep_removes_only_expired(self, tracker, clock):
        for user_id, seconds in ((1, 1), (2, 10)):
            tracker.try_acquire("ping", user_id, seconds)
            tracker.commit("ping", user_id, seconds)
        clock.now += 2_000

        assert tracker.sweep() == 1
        assert len(tracker) == 1
        assert tracker.remaining_seconds("ping", 2) == 8
