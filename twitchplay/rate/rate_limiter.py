"""Outbound chat throttling.

Only chat lines pass through here. PASS/NICK/JOIN/PART/PONG are written by the
connection worker directly and are never delayed.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable

from ..logs.logger import logger


class ChatRateLimiter:
    """Releases at most one chat line per ``min_interval`` seconds.

    Time between calls accumulates into a budget capped at one interval, so a
    burst after a quiet period sends one line immediately and the rest follow
    at the configured cadence. Lines that are not yet eligible stay queued in
    submission order; nothing is dropped.
    """

    def __init__(
        self,
        min_interval: float = 0.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        username: str | None = None,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self.username = username
        self._clock = clock
        self._pending: deque[str] = deque()
        self._budget = min_interval
        self._last_tick = clock()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def submit(self, line: str) -> None:
        self._pending.append(line)
        if self.min_interval > 0 and len(self._pending) > 1:
            logger.log_event(
                "rate",
                "deferred",
                level=logging.DEBUG,
                user=self.username,
                pending=len(self._pending),
                interval=self.min_interval,
            )

    def _tick(self, now: float) -> None:
        elapsed = max(0.0, now - self._last_tick)
        self._last_tick = now
        self._budget = min(self._budget + elapsed, self.min_interval)

    def release(self, now: float | None = None) -> list[str]:
        """Return the lines allowed to go out this cycle, oldest first."""
        now = self._clock() if now is None else now
        if self.min_interval <= 0:
            released = list(self._pending)
            self._pending.clear()
            return released
        self._tick(now)
        ready: list[str] = []
        while self._pending and self._budget >= self.min_interval:
            ready.append(self._pending.popleft())
            self._budget -= self.min_interval
        return ready

    def clear(self) -> None:
        self._pending.clear()

    def snapshot(self) -> dict[str, object]:
        """Return a serializable snapshot of limiter state for debugging."""
        return {
            "username": self.username,
            "min_interval": self.min_interval,
            "budget": self._budget,
            "pending": len(self._pending),
        }
