"""Tests for the periodic maintenance job."""

import asyncio
from unittest.mock import MagicMock

import pytest

from timmybot.application.dispatch.cooldowns import CooldownTracker
from timmybot.config.settings import MaintenanceSettings, StoreSettings
from timmybot.infrastructure.maintenance import MaintenanceJob, MaintenanceStats


@pytest.fixture
def queue_manager():
    manager = MagicMock()
    manager.evict_idle.return_value = 0
    return manager


@pytest.fixture
def clock():
    return MagicMock(return_value=0)


@pytest.fixture
def job(queue_manager, clock):
    return MaintenanceJob(
        cooldowns=CooldownTracker(clock=clock),
        queue_manager=queue_manager,
        settings=MaintenanceSettings(interval_minutes=1),
        store_settings=StoreSettings(cache_idle_minutes=5),
    )


class TestRunMaintenance:
    """Tests for a single maintenance cycle."""

    @pytest.mark.asyncio
    async def test_sweeps_expired_cooldowns(self, job, clock):
        job._cooldowns.try_acquire("play", 1, 2)
        job._cooldowns.commit("play", 1, 2)
        clock.return_value = 5_000

        stats = await job.run_maintenance()

        assert stats.cooldowns_swept == 1
        assert len(job._cooldowns) == 0

    @pytest.mark.asyncio
    async def test_evicts_idle_caches(self, job, queue_manager):
        queue_manager.evict_idle.return_value = 3

        stats = await job.run_maintenance()

        queue_manager.evict_idle.assert_called_once_with(300)
        assert stats.caches_evicted == 3
        assert stats.total == 3

    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_the_other(self, job, queue_manager):
        queue_manager.evict_idle.side_effect = RuntimeError("boom")

        stats = await job.run_maintenance()

        assert stats == MaintenanceStats()

    @pytest.mark.asyncio
    async def test_prunes_playback_locks(self, queue_manager):
        coordinator = MagicMock()
        coordinator.prune_locks.return_value = 2
        job = MaintenanceJob(
            cooldowns=CooldownTracker(),
            queue_manager=queue_manager,
            settings=MaintenanceSettings(interval_minutes=1),
            store_settings=StoreSettings(cache_idle_minutes=5),
            playback_coordinator=coordinator,
        )

        stats = await job.run_maintenance()

        coordinator.prune_locks.assert_called_once_with()
        assert stats.locks_pruned == 2
        assert stats.total == 2


class TestLifecycle:
    """Tests for start/stop."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, job, queue_manager):
        job.start()
        assert job.is_running
        await asyncio.sleep(0)

        await job.stop()

        assert not job.is_running
        queue_manager.evict_idle.assert_called_once()

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_task(self, job):
        job.start()
        task = job._task

        job.start()

        assert job._task is task
        await job.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, job):
        await job.stop()

        assert not job.is_running
