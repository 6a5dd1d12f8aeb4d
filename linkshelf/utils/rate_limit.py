from datetime import UTC, datetime, timedelta
from math import ceil
from threading import Lock
from typing import Protocol


class TimePort(Protocol):
    """Protocol for time operations (enables testing with deterministic time)."""

    def now(self) -> datetime:
        """Return current UTC time."""
        ...


class SystemTimeAdapter:
    """Production time adapter using system clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class RateLimiter:
    """
    Sliding-window attempt counter keyed by an arbitrary string.

    Attempts older than ``decay_seconds`` stop counting. State lives in the
    process, guarded by a lock so concurrent requests see consistent counts.
    """

    def __init__(self, decay_seconds: int, time_port: TimePort | None = None):
        self.decay_seconds = decay_seconds
        self._time = time_port if time_port is not None else SystemTimeAdapter()
        self._history: dict[str, list[datetime]] = {}
        self._lock = Lock()

    def _cleanup(self, key: str) -> None:
        cutoff = self._time.now() - timedelta(seconds=self.decay_seconds)
        if key in self._history:
            self._history[key] = [t for t in self._history[key] if t > cutoff]
            if not self._history[key]:
                del self._history[key]

    def _sweep(self) -> None:
        """Drop every key whose attempts have all left the window."""
        cutoff = self._time.now() - timedelta(seconds=self.decay_seconds)
        stale = [key for key, history in self._history.items() if history[-1] <= cutoff]
        for key in stale:
            del self._history[key]

    def attempts(self, key: str) -> int:
        with self._lock:
            self._cleanup(key)
            return len(self._history.get(key, []))

    def hit(self, key: str) -> int:
        """Record one attempt and return the number of attempts in the window."""
        with self._lock:
            self._sweep()
            self._cleanup(key)
            self._history.setdefault(key, []).append(self._time.now())
            return len(self._history[key])

    def too_many_attempts(self, key: str, max_attempts: int) -> bool:
        return self.attempts(key) >= max_attempts

    def available_in(self, key: str) -> int:
        """Seconds until the oldest counted attempt leaves the window."""
        with self._lock:
            self._cleanup(key)
            history = self._history.get(key)
            if not history:
                return 0
            expires = history[0] + timedelta(seconds=self.decay_seconds)
            return max(1, ceil((expires - self._time.now()).total_seconds()))

    def clear(self, key: str) -> None:
        with self._lock:
            self._history.pop(key, None)

    def reset(self) -> None:
        with self._lock:
            self._history.clear()


def login_throttle_key(email: str, ip: str | None) -> str:
    return f"{email}|{ip or ''}".lower()
