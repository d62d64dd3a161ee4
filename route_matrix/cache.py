"""In-memory TTL cache for Routes API responses."""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

CACHE_TTL_MS = 5 * 60 * 1000

Clock = Callable[[], int]

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class CacheEntry:
    payload: Any
    created_at: int

    def age(self, now: int) -> int:
        return now - self.created_at


class CacheStore:
    """Thread-safe mapping from request fingerprint to upstream payload.

    Entries older than ``ttl_ms`` are never served, whether or not the sweeper
    has reclaimed them yet.
    """

    def __init__(self, ttl_ms: int = CACHE_TTL_MS, clock: Optional[Clock] = None) -> None:
        self.ttl_ms = ttl_ms
        self._clock: Clock = clock or _now_ms
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, fingerprint: str) -> Optional[CacheEntry]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(fingerprint)
        if entry is None or entry.age(now) >= self.ttl_ms:
            return None
        return entry

    def put(self, fingerprint: str, payload: Any) -> CacheEntry:
        entry = CacheEntry(payload=payload, created_at=self._clock())
        with self._lock:
            self._entries[fingerprint] = entry
        return entry

    def sweep(self) -> int:
        """Drop entries whose age exceeds the TTL and return how many went."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.age(now) > self.ttl_ms]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %s expired route-matrix entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CacheSweeper:
    """Background thread that calls :meth:`CacheStore.sweep` every interval."""

    def __init__(self, store: CacheStore, interval_seconds: Optional[float] = None) -> None:
        self.store = store
        self.interval_seconds = interval_seconds if interval_seconds is not None else store.ttl_ms / 1000
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="route-matrix-cache-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self.store.sweep()
            except Exception:  # pylint: disable=broad-except
                logger.exception("Route-matrix cache sweep failed")
