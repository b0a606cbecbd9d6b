"""In-process fixed-window rate limiting."""

import asyncio
import math
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of counting one request against a key."""

    allowed: bool
    remaining: int
    retry_after: int


@dataclass
class _Window:
    started_at: float
    count: int


class FixedWindowRateLimiter:
    """Counts requests per key in fixed windows.

    The first request for a key opens a window of ``window_seconds``. At
    most ``max_requests`` are allowed inside it; a request at or after the
    window's end opens a fresh one. Expired windows are dropped lazily.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = asyncio.Lock()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    async def hit(self, key: str) -> RateLimitDecision:
        """Count one request for ``key`` and decide whether it may proceed."""
        async with self._lock:
            now = self._clock()
            self._prune(now)

            window = self._windows.get(key)
            if window is None or now >= window.started_at + self._window_seconds:
                window = _Window(started_at=now, count=0)
                self._windows[key] = window

            if window.count >= self._max_requests:
                retry_after = window.started_at + self._window_seconds - now
                return RateLimitDecision(
                    allowed=False,
                    remaining=0,
                    retry_after=max(1, math.ceil(retry_after)),
                )

            window.count += 1
            return RateLimitDecision(
                allowed=True,
                remaining=self._max_requests - window.count,
                retry_after=0,
            )

    async def reset(self) -> None:
        """Forget all windows."""
        async with self._lock:
            self._windows.clear()

    def _prune(self, now: float) -> None:
        expired = [
            key
            for key, window in self._windows.items()
            if now >= window.started_at + self._window_seconds
        ]
        for key in expired:
            del self._windows[key]
