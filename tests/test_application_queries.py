"""
Unit Tests for Application Layer Queries

Tests for:
- GetCurrentTrackHandler
- GetQueueHandler
- PingHandler, HelpHandler, ExplainHandler
"""

import math

import pytest

from timmybot.application.commands.descriptors import DEFAULT_DESCRIPTORS
from timmybot.application.dispatch.results import Success
from timmybot.application.queries.get_current import GetCurrentTrackHandler
from timmybot.application.queries.get_queue import GetQueueHandler
from timmybot.application.queries.info import ExplainHandler, HelpHandler, PingHandler
from timmybot.domain.shared.messages import DiscordUIMessages

GUILD_ID = 111


class TestGetCurrentTrackHandler:
    """Tests for the front-of-queue query."""

    @pytest.mark.asyncio
    async def test_returns_front(self, queue_manager, make_context):
        await queue_manager.enqueue(GUILD_ID, "songA")
        await queue_manager.enqueue(GUILD_ID, "songB")

        result = await GetCurrentTrackHandler(queue_manager=queue_manager).handle(
            make_context("current")
        )

        assert result.data == {"track_ref": "songA"}
        assert "songA" in result.message
        assert result.ephemeral is False

    @pytest.mark.asyncio
    async def test_empty_queue(self, queue_manager, make_context):
        result = await GetCurrentTrackHandler(queue_manager=queue_manager).handle(
            make_context("current")
        )

        assert result == Success(
            DiscordUIMessages.STATE_QUEUE_EMPTY, ephemeral=True, data={"track_ref": None}
        )


class TestGetQueueHandler:
    """Tests for the queue listing."""

    @pytest.mark.asyncio
    async def test_lists_in_order(self, queue_manager, make_context):
        for song in ("a", "b", "c"):
            await queue_manager.enqueue(GUILD_ID, song)

        result = await GetQueueHandler(queue_manager=queue_manager).handle(make_context("queue"))

        assert result.data == {"tracks": ["a", "b", "c"]}
        lines = result.message.splitlines()
        assert "3 tracks" in lines[0]
        assert lines[1:] == ["`1.` a", "`2.` b", "`3.` c"]

    @pytest.mark.asyncio
    async def test_truncates_long_queue(self, queue_manager, make_context):
        for i in range(5):
            await queue_manager.enqueue(GUILD_ID, f"song{i}")

        result = await GetQueueHandler(queue_manager=queue_manager, limit=2).handle(
            make_context("queue")
        )

        assert result.message.splitlines()[-1] == "…and 3 more"
        assert len(result.data["tracks"]) == 5

    @pytest.mark.asyncio
    async def test_empty_queue(self, queue_manager, make_context):
        result = await GetQueueHandler(queue_manager=queue_manager).handle(make_context("queue"))

        assert result.ephemeral is True
        assert result.data == {"tracks": []}

    @pytest.mark.asyncio
    async def test_message_fits_discord_limit(self, queue_manager, make_context):
        for i in range(10):
            await queue_manager.enqueue(GUILD_ID, f"{i}-" + "x" * 400)

        result = await GetQueueHandler(queue_manager=queue_manager).handle(make_context("queue"))

        assert len(result.message) <= 2000


class TestInfoHandlers:
    """Tests for ping, help and explain."""

    @pytest.mark.asyncio
    async def test_ping_reports_latency(self, make_context):
        result = await PingHandler(latency_provider=lambda: 0.0423).handle(make_context("ping"))

        assert result.data == {"latency_ms": 42}
        assert "42ms" in result.message

    @pytest.mark.asyncio
    async def test_ping_before_first_heartbeat(self, make_context):
        result = await PingHandler(latency_provider=lambda: math.nan).handle(make_context("ping"))

        assert result.data == {"latency_ms": None}
        assert "?ms" in result.message

    @pytest.mark.asyncio
    async def test_help_lists_every_command(self, make_context):
        result = await HelpHandler(descriptors=DEFAULT_DESCRIPTORS, prefix="?").handle(
            make_context("help")
        )

        assert result.ephemeral is True
        for descriptor in DEFAULT_DESCRIPTORS:
            assert f"`{descriptor.usage}`" in result.message
        assert "`play <song>`" in result.message
        assert "(5s cooldown)" in result.message

    @pytest.mark.asyncio
    async def test_explain_mentions_prefix(self, make_context):
        result = await ExplainHandler(prefix="tb!").handle(make_context("explain"))

        assert "`tb!`" in result.message
        assert result.ephemeral is True
