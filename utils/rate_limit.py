import threading
import time

class SpacedLimiter:
    """Serialize calls and enforce a minimum interval between starts."""
    def __init__(self, min_interval_s: float = 0.2):
        self.min_interval = float(min_interval_s)
        self._lock = threading.Lock()
        self._last_start = None  # monotonic seconds of the previous call

    @classmethod
    def per_second(cls, calls: float) -> "SpacedLimiter":
        if calls <= 0:
            raise ValueError("calls per second must be positive")
        return cls(min_interval_s=1.0 / calls)

    def acquire(self):
        with self._lock:
            if self._last_start is not None:
                wait = self.min_interval - (time.monotonic() - self._last_start)
                if wait > 0:
                    time.sleep(wait)
            self._last_start = time.monotonic()
