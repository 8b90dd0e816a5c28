import asyncio

import pytest
import pytest_asyncio

from timmybot.application.interfaces.audio_resolver import AudioResolver, ResolvedStream
from timmybot.application.interfaces.voice_adapter import VoiceAdapter
from timmybot.application.dispatch.invocation import ReplyChannel

# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from timmybot.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def queue_store(in_memory_database):
    """Create a queue store with in-memory database."""
    from timmybot.infrastructure.persistence.repositories.queue_store import SQLiteQueueStore

    return SQLiteQueueStore(in_memory_database)


@pytest_asyncio.fixture
async def allowlist_repository(in_memory_database):
    """Create an allowlist repository with in-memory database."""
    from timmybot.infrastructure.persistence.repositories.allowlist_repository import (
        SQLiteAllowlistRepository,
    )

    return SQLiteAllowlistRepository(in_memory_database)


@pytest_asyncio.fixture
async def queue_manager(queue_store):
    """Create a queue manager over the in-memory queue store."""
    from timmybot.application.services.queue_manager import GuildQueueManager

    return GuildQueueManager(queue_store)


# ============================================================================
# Fake Adapters
# ============================================================================


class FakeVoiceAdapter(VoiceAdapter):
    """In-memory voice adapter.

    Like discord.py, stopping a track still fires the track-end callback;
    the event is delivered on a separate task, awaited by ``drain()``.
    """

    def __init__(self) -> None:
        self.channels: dict[int, int] = {}
        self.playing: dict[int, ResolvedStream] = {}
        self.played: list[tuple[int, str]] = []
        self.fail_connect = False
        self._callback = None
        self._pending: list[asyncio.Task] = []

    async def connect(self, guild_id, channel_id):
        if self.fail_connect:
            return False
        self.channels[guild_id] = channel_id
        return True

    async def disconnect(self, guild_id):
        self.playing.pop(guild_id, None)
        return self.channels.pop(guild_id, None) is not None

    async def ensure_connected(self, guild_id, channel_id):
        if self.channels.get(guild_id) == channel_id:
            return True
        return await self.connect(guild_id, channel_id)

    async def move_to(self, guild_id, channel_id):
        return await self.connect(guild_id, channel_id)

    async def play(self, guild_id, stream):
        if guild_id not in self.channels:
            return False
        self.playing[guild_id] = stream
        self.played.append((guild_id, stream.title))
        return True

    async def stop(self, guild_id):
        if self.playing.pop(guild_id, None) is None:
            return False
        self._emit_end(guild_id)
        return True

    def is_connected(self, guild_id):
        return guild_id in self.channels

    def is_playing(self, guild_id):
        return guild_id in self.playing

    def set_on_track_end_callback(self, callback):
        self._callback = callback

    def finish_track(self, guild_id: int) -> None:
        """Simulate the current track ending on its own."""
        self.playing.pop(guild_id, None)
        self._emit_end(guild_id)

    def _emit_end(self, guild_id: int) -> None:
        if self._callback is not None:
            self._pending.append(asyncio.create_task(self._callback(guild_id)))

    async def drain(self) -> None:
        while self._pending:
            await self._pending.pop(0)


class FakeResolver(AudioResolver):
    """Resolves every query to a stream titled after it, except ``unplayable`` ones."""

    def __init__(self, unplayable: set[str] | None = None) -> None:
        self.unplayable = set(unplayable or ())
        self.calls: list[str] = []

    async def resolve(self, query):
        self.calls.append(query)
        if query in self.unplayable:
            return None
        return ResolvedStream(title=query, stream_url=f"https://cdn.example/{len(self.calls)}")

    def is_url(self, query):
        return query.startswith("http")


class FakeReplyChannel(ReplyChannel):
    def __init__(self) -> None:
        self.sent: list[tuple[str, bool]] = []

    async def send(self, content: str, *, ephemeral: bool) -> None:
        self.sent.append((content, ephemeral))

    @property
    def last(self) -> tuple[str, bool]:
        return self.sent[-1]


@pytest.fixture
def voice():
    return FakeVoiceAdapter()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def reply_channel():
    return FakeReplyChannel()


@pytest_asyncio.fixture
async def coordinator(queue_manager, voice, resolver):
    """Playback coordinator wired to the fake voice adapter and resolver."""
    from timmybot.application.services.playback_coordinator import PlaybackCoordinator

    return PlaybackCoordinator(
        queue_manager=queue_manager,
        voice_adapter=voice,
        audio_resolver=resolver,
    )


# ============================================================================
# Invocation Fixtures
# ============================================================================


@pytest.fixture
def make_invocation(reply_channel):
    """Factory for invocations from a guild member sitting in voice channel 333."""
    from timmybot.application.dispatch.invocation import Invocation

    def _make(command_name: str, guild_id: int | None = 111, **overrides) -> Invocation:
        fields = {
            "command_name": command_name,
            "guild_id": guild_id,
            "user_id": 222,
            "reply_channel": reply_channel,
            "voice_channel_id": 333,
        }
        fields.update(overrides)
        return Invocation(**fields)

    return _make


@pytest.fixture
def make_context(make_invocation):
    """Factory for handler contexts built from an invocation."""
    from timmybot.application.commands.descriptors import DEFAULT_DESCRIPTORS
    from timmybot.application.dispatch.catalog import CommandContext

    descriptors = {d.name: d for d in DEFAULT_DESCRIPTORS}

    def _make(command_name: str, **overrides) -> CommandContext:
        return CommandContext(
            invocation=make_invocation(command_name, **overrides),
            descriptor=descriptors[command_name],
        )

    return _make
