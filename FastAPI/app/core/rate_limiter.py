import threading
import time


class InMemoryRateLimiter:
    """
    Fixed-window request counter per key (client ip + path).
    State lives in process memory, so limits are per instance.
    """

    def __init__(self, clock=time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, tuple[int, float]] = {}

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """Count one hit for key. Returns (allowed, retry_after_seconds)."""
        now = self._clock()
        with self._lock:
            hits, started = self._windows.get(key, (0, now))
            elapsed = now - started
            if elapsed >= window_seconds:
                hits, started, elapsed = 0, now, 0.0
            if hits >= limit:
                return False, max(1, int(window_seconds - elapsed))
            self._windows[key] = (hits + 1, started)
            return True, 0

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)


rate_limiter = InMemoryRateLimiter()
