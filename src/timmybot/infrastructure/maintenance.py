"""Periodic sweep of expired cooldowns, idle guild queue caches and unused playback locks."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel

from timmybot.domain.shared.messages import LogTemplates
from timmybot.domain.shared.types import NonNegativeInt

if TYPE_CHECKING:
    from ..application.dispatch.cooldowns import CooldownTracker
    from ..application.services.playback_coordinator import PlaybackCoordinator
    from ..application.services.queue_manager import GuildQueueManager
    from ..config.settings import MaintenanceSettings, StoreSettings

logger = logging.getLogger(__name__)


class MaintenanceJob:
    def __init__(
        self,
        *,
        cooldowns: CooldownTracker,
        queue_manager: GuildQueueManager,
        settings: MaintenanceSettings,
        store_settings: StoreSettings,
        playback_coordinator: PlaybackCoordinator | None = None,
    ) -> None:
        self._cooldowns = cooldowns
        self._queue_manager = queue_manager
        self._settings = settings
        self._store_settings = store_settings
        self._playback_coordinator = playback_coordinator
        self._running = False
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        if self._running:
            logger.warning(LogTemplates.MAINTENANCE_ALREADY_RUNNING)
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(LogTemplates.MAINTENANCE_STARTED)

    async def stop(self) -> None:
        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(LogTemplates.MAINTENANCE_STOPPED)

    async def _run_loop(self) -> None:
        interval_seconds = self._settings.interval_minutes * 60

        while self._running:
            try:
                await self.run_maintenance()
            except Exception:
                logger.exception("Error during maintenance")

            try:
                await asyncio.sleep(interval_seconds)
            except asyncio.CancelledError:
                break

    async def run_maintenance(self) -> MaintenanceStats:
        stats = MaintenanceStats()

        logger.debug(LogTemplates.MAINTENANCE_CYCLE_RUNNING)

        try:
            stats.cooldowns_swept = self._cooldowns.sweep()
        except Exception as e:
            logger.error(LogTemplates.MAINTENANCE_COOLDOWNS_FAILED, e)

        try:
            stats.caches_evicted = self._queue_manager.evict_idle(
                self._store_settings.cache_idle_minutes * 60
            )
        except Exception as e:
            logger.error(LogTemplates.MAINTENANCE_CACHE_FAILED, e)

        if self._playback_coordinator is not None:
            try:
                stats.locks_pruned = self._playback_coordinator.prune_locks()
            except Exception as e:
                logger.error(LogTemplates.MAINTENANCE_LOCKS_FAILED, e)

        if stats.total > 0:
            logger.info(
                LogTemplates.MAINTENANCE_COMPLETED,
                stats.cooldowns_swept,
                stats.caches_evicted,
                stats.locks_pruned,
            )

        return stats

    @property
    def is_running(self) -> bool:
        return self._running


class MaintenanceStats(BaseModel):
    cooldowns_swept: NonNegativeInt = 0
    caches_evicted: NonNegativeInt = 0
    locks_pruned: NonNegativeInt = 0

    @property
    def total(self) -> int:
        return self.cooldowns_swept + self.caches_evicted + self.locks_pruned
