from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    started_at: float
    count: int


class RateLimiter:
    """
    Fixed-window attempt counter, kept in process memory.

    Keys should include both scope and identity (e.g. "login:ip:1.2.3.4").
    Counters are per process: several gateway instances each enforce their
    own limit, so a cluster needs a shared counter store instead.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def hit(self, key: str, *, limit: int, per_seconds: int) -> tuple[bool, int]:
        """Count one attempt for ``key``.

        Returns
        -------
        (allowed, retry_after) where retry_after is the number of seconds
        until the current window resets (0 when allowed)
        """
        now = self._clock()
        self._evict_expired(now, per_seconds)

        window = self._windows.get(key)
        if window is None or now - window.started_at >= per_seconds:
            window = _Window(started_at=now, count=0)
            self._windows[key] = window

        if window.count >= limit:
            retry_after = max(1, int(window.started_at + per_seconds - now))
            logger.warning("Rate limit exceeded for %s", key)
            return False, retry_after

        window.count += 1
        return True, 0

    def allow(self, key: str, *, limit: int, per_seconds: int) -> bool:
        allowed, _ = self.hit(key, limit=limit, per_seconds=per_seconds)
        return allowed

    def _evict_expired(self, now: float, per_seconds: int) -> None:
        stale = [k for k, w in self._windows.items() if now - w.started_at >= per_seconds]
        for key in stale:
            del self._windows[key]
