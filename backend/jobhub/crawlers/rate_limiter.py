from __future__ import annotations
import threading
import time
from collections import deque
from typing import Callable

from jobhub.crawlers.errors import RateLimitExceeded


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class RateLimiter:
    """Sliding-window admission control for one job board.

    Keeps the timestamps of granted requests inside the trailing window.
    Old entries are pruned on every check, so memory stays bounded by
    ``requests`` no matter how long the process runs.
    """

    def __init__(self, requests: int, window_ms: int, source: str = "", clock: Callable[[], float] = _monotonic_ms):
        self.requests = requests
        self.window_ms = window_ms
        self.source = source
        self._clock = clock
        self._granted: deque[float] = deque()
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_ms
        while self._granted and self._granted[0] <= cutoff:
            self._granted.popleft()

    def check_limit(self) -> bool:
        with self._lock:
            now = self._clock()
            self._prune(now)
            if len(self._granted) >= self.requests:
                raise RateLimitExceeded(self.source)
            self._granted.append(now)
            return True

    def remaining(self) -> int:
        with self._lock:
            self._prune(self._clock())
            return max(0, self.requests - len(self._granted))
