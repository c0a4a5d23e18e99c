"""Sliding-window rate limiter keyed by client identity."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RateLimitDecision:
    """Admission result for one request."""

    allowed: bool
    reason: str | None = None
    remaining: int = 0


class SlidingWindowRateLimiter:
    """In-memory per-client limiter over a trailing time window."""

    def __init__(
        self,
        *,
        window_ms: int,
        max_requests: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self._window = window_ms / 1000.0
        self._max_requests = max_requests
        self._clock = clock
        self._history: dict[str, list[float]] = {}

    def admit(self, client_id: str) -> RateLimitDecision:
        """Record and allow one request, or deny without recording it."""
        now = self._clock()
        history = [ts for ts in self._history.get(client_id, []) if now - ts < self._window]
        if len(history) >= self._max_requests:
            self._history[client_id] = history
            return RateLimitDecision(
                allowed=False,
                reason=(
                    f"Rate limit exceeded: {self._max_requests} requests per "
                    f"{int(self._window * 1000)}ms"
                ),
            )
        history.append(now)
        self._history[client_id] = history
        return RateLimitDecision(allowed=True, remaining=self._max_requests - len(history))

    def reset(self) -> None:
        self._history.clear()
