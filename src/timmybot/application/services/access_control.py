"""Guild allowlist gate for guild-scoped commands."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from timmybot.domain.shared.constants import LimitConstants
from timmybot.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.access.repository import AllowlistRepository

logger = logging.getLogger(__name__)


class AccessControlGate:
    """Answers whether a guild may run guild-scoped commands.

    The gate fails closed: a missing record, an unapproved record, a backend
    error, and a lookup that exceeds the timeout all mean "not authorized".
    It never raises.
    """

    def __init__(
        self,
        *,
        allowlist_repository: AllowlistRepository,
        timeout_s: float = LimitConstants.DEFAULT_STORE_TIMEOUT_SECONDS,
    ) -> None:
        self._repo = allowlist_repository
        self._timeout = timeout_s

    async def is_guild_authorized(self, guild_id: int) -> bool:
        try:
            async with asyncio.timeout(self._timeout):
                entry = await self._repo.get(guild_id)
        except Exception as e:
            logger.error(LogTemplates.ACCESS_CHECK_FAILED, guild_id, e)
            return False

        if entry is None or not entry.approved:
            logger.debug(LogTemplates.ACCESS_DENIED, guild_id)
            return False
        return True
