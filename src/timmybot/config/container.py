"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the database, repositories, services, adapters,
command handlers and the dispatcher. Components are created on first access
and cached for reuse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from timmybot.domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.dispatch.catalog import CommandCatalog, CommandHandler
    from ..application.dispatch.cooldowns import CooldownTracker
    from ..application.dispatch.dispatcher import CommandDispatcher
    from ..application.interfaces.audio_resolver import AudioResolver
    from ..application.interfaces.voice_adapter import VoiceAdapter
    from ..application.services.access_control import AccessControlGate
    from ..application.services.playback_coordinator import PlaybackCoordinator
    from ..application.services.queue_manager import GuildQueueManager
    from ..domain.access.repository import AllowlistRepository
    from ..domain.queue.repository import QueueStore
    from ..infrastructure.maintenance import MaintenanceJob
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    The voice adapter, the playback coordinator and the ping handler need the
    bot; everything else can be built and used without one.
    """

    settings: Settings
    _bot: Bot | None = None

    # Persistence layer
    _database: Database | None = None
    _queue_store: QueueStore | None = None
    _allowlist_repository: AllowlistRepository | None = None

    # Infrastructure adapters
    _audio_resolver: AudioResolver | None = None
    _voice_adapter: VoiceAdapter | None = None

    # Application services
    _queue_manager: GuildQueueManager | None = None
    _access_gate: AccessControlGate | None = None
    _playback_coordinator: PlaybackCoordinator | None = None

    # Dispatch
    _cooldowns: CooldownTracker | None = None
    _catalog: CommandCatalog | None = None
    _dispatcher: CommandDispatcher | None = None

    # Background jobs
    _maintenance_job: MaintenanceJob | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Database ===

    @property
    def database(self) -> Database:
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    # === Repositories ===

    @property
    def queue_store(self) -> QueueStore:
        if self._queue_store is None:
            from ..infrastructure.persistence.repositories.queue_store import SQLiteQueueStore

            self._queue_store = SQLiteQueueStore(
                self.database,
                max_batch_size=self.settings.store.max_batch_delete,
            )
        return self._queue_store

    @property
    def allowlist_repository(self) -> AllowlistRepository:
        if self._allowlist_repository is None:
            from ..infrastructure.persistence.repositories.allowlist_repository import (
                SQLiteAllowlistRepository,
            )

            self._allowlist_repository = SQLiteAllowlistRepository(self.database)
        return self._allowlist_repository

    # === Infrastructure Adapters ===

    @property
    def audio_resolver(self) -> AudioResolver:
        if self._audio_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._audio_resolver = YtDlpResolver(self.settings.audio)
        return self._audio_resolver

    @property
    def voice_adapter(self) -> VoiceAdapter:
        if self._voice_adapter is None:
            from ..infrastructure.discord.adapters.voice_adapter import (
                DiscordVoiceAdapter,
            )

            self._voice_adapter = DiscordVoiceAdapter(self.bot, self.settings.audio)
        return self._voice_adapter

    # === Application Services ===

    @property
    def queue_manager(self) -> GuildQueueManager:
        if self._queue_manager is None:
            from ..application.services.queue_manager import GuildQueueManager

            self._queue_manager = GuildQueueManager(
                self.queue_store,
                operation_timeout_s=self.settings.store.operation_timeout_s,
            )
        return self._queue_manager

    @property
    def access_gate(self) -> AccessControlGate:
        if self._access_gate is None:
            from ..application.services.access_control import AccessControlGate

            self._access_gate = AccessControlGate(
                allowlist_repository=self.allowlist_repository,
                timeout_s=self.settings.store.operation_timeout_s,
            )
        return self._access_gate

    @property
    def playback_coordinator(self) -> PlaybackCoordinator:
        if self._playback_coordinator is None:
            from ..application.services.playback_coordinator import PlaybackCoordinator

            self._playback_coordinator = PlaybackCoordinator(
                queue_manager=self.queue_manager,
                voice_adapter=self.voice_adapter,
                audio_resolver=self.audio_resolver,
            )
        return self._playback_coordinator

    # === Dispatch ===

    @property
    def cooldowns(self) -> CooldownTracker:
        if self._cooldowns is None:
            from ..application.dispatch.cooldowns import CooldownTracker

            self._cooldowns = CooldownTracker()
        return self._cooldowns

    def build_handlers(self) -> dict[str, CommandHandler]:
        """Create one handler per built-in command, keyed by command name."""
        from ..application.commands.clear_queue import ClearQueueHandler
        from ..application.commands.descriptors import DEFAULT_DESCRIPTORS
        from ..application.commands.play_track import PlayTrackHandler
        from ..application.commands.skip_track import SkipTrackHandler
        from ..application.commands.voice_channel import JoinVoiceHandler, LeaveVoiceHandler
        from ..application.queries.get_current import GetCurrentTrackHandler
        from ..application.queries.get_queue import GetQueueHandler
        from ..application.queries.info import ExplainHandler, HelpHandler, PingHandler

        prefix = self.settings.discord.command_prefix
        return {
            "ping": PingHandler(latency_provider=lambda: self.bot.latency),
            "help": HelpHandler(descriptors=DEFAULT_DESCRIPTORS, prefix=prefix),
            "explain": ExplainHandler(prefix=prefix),
            "join": JoinVoiceHandler(voice_adapter=self.voice_adapter),
            "leave": LeaveVoiceHandler(
                voice_adapter=self.voice_adapter,
                playback_coordinator=self.playback_coordinator,
            ),
            "play": PlayTrackHandler(
                queue_manager=self.queue_manager,
                playback_coordinator=self.playback_coordinator,
                voice_adapter=self.voice_adapter,
            ),
            "skip": SkipTrackHandler(playback_coordinator=self.playback_coordinator),
            "current": GetCurrentTrackHandler(queue_manager=self.queue_manager),
            "queue": GetQueueHandler(queue_manager=self.queue_manager),
            "clear": ClearQueueHandler(
                queue_manager=self.queue_manager,
                playback_coordinator=self.playback_coordinator,
            ),
        }

    @property
    def catalog(self) -> CommandCatalog:
        if self._catalog is None:
            from ..application.commands.registry import build_catalog

            self._catalog = build_catalog(self.build_handlers())
        return self._catalog

    @property
    def dispatcher(self) -> CommandDispatcher:
        if self._dispatcher is None:
            from ..application.dispatch.dispatcher import CommandDispatcher

            self._dispatcher = CommandDispatcher(
                catalog=self.catalog,
                access_gate=self.access_gate,
                cooldowns=self.cooldowns,
                access_settings=self.settings.access,
            )
        return self._dispatcher

    # === Background Jobs ===

    @property
    def maintenance_job(self) -> MaintenanceJob:
        if self._maintenance_job is None:
            from ..infrastructure.maintenance import MaintenanceJob

            self._maintenance_job = MaintenanceJob(
                cooldowns=self.cooldowns,
                queue_manager=self.queue_manager,
                settings=self.settings.maintenance,
                store_settings=self.settings.store,
                # Playback needs the bot; a container without one has no playback locks.
                playback_coordinator=self.playback_coordinator if self._bot is not None else None,
            )
        return self._maintenance_job

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        await self.database.initialize()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._maintenance_job is not None and self._maintenance_job.is_running:
            await self._maintenance_job.stop()

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
