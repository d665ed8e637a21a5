import logging
import threading
import time
from typing import Callable

logger = logging.getLogger("dingrobot.ratelimit")

DEFAULT_MAX_CALLS = 20
DEFAULT_WINDOW_SECONDS = 60.0


class WindowRateLimiter:
    """Counts sends and pauses once ``max_calls`` land inside one window.

    When the counter reaches ``max_calls`` the limiter sleeps for whatever is
    left of the window (if anything), then starts a fresh window from the
    current clock reading. The lock is held across the pause so threads
    sharing one limiter queue behind it.
    """

    def __init__(
        self,
        max_calls: int = DEFAULT_MAX_CALLS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_calls < 1:
            raise ValueError("max_calls must be at least 1")
        if window_seconds < 0:
            raise ValueError("window_seconds must not be negative")
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._count = 0
        self._window_start = clock()

    @property
    def count(self) -> int:
        return self._count

    @property
    def window_start(self) -> float:
        return self._window_start

    def acquire(self) -> float:
        with self._lock:
            self._count += 1
            if self._count < self.max_calls:
                return 0.0

            paused = 0.0
            elapsed = self._clock() - self._window_start
            if elapsed < self.window_seconds:
                paused = self.window_seconds - elapsed
                logger.debug(
                    "Rate limit hit (%s calls in %.2fs), pausing %.2fs",
                    self._count,
                    elapsed,
                    paused,
                )
                self._sleep(paused)
            self._count = 0
            self._window_start = self._clock()
            return paused
