"""Per-user, per-command cooldown bookkeeping.

Records live in process memory only and vanish on restart. A record is
written only after a successful execution; failed or rejected invocations
never start a cooldown.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from timmybot.domain.queue.entities import now_millis
from timmybot.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

CooldownKey = tuple[str, int]


class CooldownTracker:
    """Tracks ``(command_name, user_id) -> expires_at`` in epoch milliseconds.

    ``try_acquire`` and ``commit``/``release`` never await, so a check and the
    reservation that follows it cannot interleave with another task on the
    event loop. While a reservation is held, concurrent invocations of the
    same command by the same user are answered with the full cooldown.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or now_millis
        self._expires_at: dict[CooldownKey, int] = {}
        self._pending: set[CooldownKey] = set()

    def remaining_seconds(self, command_name: str, user_id: int) -> int:
        """Whole seconds left on an active cooldown, rounded up; 0 when none."""
        key = (command_name, user_id)
        expires_at = self._expires_at.get(key)
        if expires_at is None:
            return 0

        remaining_ms = expires_at - self._clock()
        if remaining_ms <= 0:
            del self._expires_at[key]
            return 0
        return math.ceil(remaining_ms / 1000)

    def try_acquire(self, command_name: str, user_id: int, cooldown_seconds: int) -> int:
        """Reserve the key for one execution.

        Returns:
            0 if the reservation was taken and the command may run, otherwise
            the number of seconds the caller has to wait.
        """
        key = (command_name, user_id)
        if key in self._pending:
            return max(cooldown_seconds, 1)

        remaining = self.remaining_seconds(command_name, user_id)
        if remaining > 0:
            return remaining

        self._pending.add(key)
        return 0

    def commit(self, command_name: str, user_id: int, cooldown_seconds: int) -> None:
        """Start the cooldown after a successful execution."""
        key = (command_name, user_id)
        self._pending.discard(key)
        self._expires_at[key] = self._clock() + cooldown_seconds * 1000

    def release(self, command_name: str, user_id: int) -> None:
        """Drop a reservation without starting a cooldown."""
        self._pending.discard((command_name, user_id))

    def sweep(self) -> int:
        """Remove every expired record. Returns the number removed."""
        now = self._clock()
        expired = [key for key, expires_at in self._expires_at.items() if expires_at <= now]
        for key in expired:
            del self._expires_at[key]
        if expired:
            logger.debug(LogTemplates.COOLDOWN_SWEPT, len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._expires_at)
