"""Request Throttle: fixed-window per-client request counter.

Invariants:
    - First request from a key opens a window (count=1) and is allowed
    - Inside the window: allowed while count < limit; denied requests do NOT increment
    - At or after window_seconds from window_start: window resets (count=1) and is allowed
    - sweep() drops entries whose last-seen age exceeds idle_seconds
    - Every read/mutation of _visitors happens under _lock; no I/O inside the lock
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from roster.core.domain_types import Admission, ClientKey

DEFAULT_WINDOW_SECONDS: float = 60.0
DEFAULT_IDLE_SECONDS: float = 180.0


@dataclass
class VisitorEntry:
    """Per-client counter for the current window."""
    count: int
    window_start: float
    last_seen: float


class RequestThrottle:
    """Process-wide admission control keyed by client address."""

    def __init__(
        self,
        requests_per_minute: int,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        idle_seconds: float = DEFAULT_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be >= 1")
        self.limit = requests_per_minute
        self.window_seconds = window_seconds
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._visitors: dict[ClientKey, VisitorEntry] = {}

    def admit(self, client_key: ClientKey) -> Admission:
        """Count one request from client_key and decide whether it may proceed."""
        now = self._clock()
        with self._lock:
            entry = self._visitors.get(client_key)
            if entry is None:
                self._visitors[client_key] = VisitorEntry(
                    count=1, window_start=now, last_seen=now,
                )
                return Admission.ALLOW

            if now - entry.window_start >= self.window_seconds:
                entry.count = 1
                entry.window_start = now
                entry.last_seen = now
                return Admission.ALLOW

            if entry.count >= self.limit:
                return Admission.DENY

            entry.count += 1
            entry.last_seen = now
            return Admission.ALLOW

    def sweep(self) -> int:
        """Remove idle visitors. Returns how many entries were dropped."""
        now = self._clock()
        with self._lock:
            stale = [
                key for key, entry in self._visitors.items()
                if now - entry.last_seen > self.idle_seconds
            ]
            for key in stale:
                del self._visitors[key]
        return len(stale)

    def snapshot(self, client_key: ClientKey) -> VisitorEntry | None:
        """Copy of the entry for client_key (None if unknown)."""
        with self._lock:
            entry = self._visitors.get(client_key)
            if entry is None:
                return None
            return VisitorEntry(entry.count, entry.window_start, entry.last_seen)

    def __len__(self) -> int:
        with self._lock:
            return len(self._visitors)
