"""
In-memory response cache with a time-to-live.

Entries live for the life of the process and are never persisted. A
background thread sweeps expired entries on a fixed interval; its lifecycle is
explicit (start/stop) and owned by the app bootstrap, so tests can build an
isolated cache and drive the clock themselves.

Concurrent misses for the same key are not coalesced: both callers invoke
the model and both write, last write wins. Payloads for identical input are
interchangeable, so this is accepted rather than locked against.
"""

from __future__ import annotations

import copy
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..shared.config import CACHE_SWEEP_INTERVAL_SECONDS, CACHE_TTL_SECONDS
from ..shared.logger import get_logger

logger = get_logger("assistant", __name__)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    created_at: float

    def age(self, now: float) -> float:
        return now - self.created_at


class ResponseCache:
    """Key -> payload store with TTL eviction and a cancellable sweep thread."""

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        sweep_interval_seconds: float = CACHE_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if sweep_interval_seconds <= 0:
            raise ValueError("sweep_interval_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ---------- Public API ----------
    def get(self, key: str) -> Optional[CacheEntry]:
        """Return a copy of the live entry for key, or None if absent or expired."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.age(now) >= self.ttl_seconds:
                del self._entries[key]
                return None
        return CacheEntry(key=entry.key, payload=copy.deepcopy(entry.payload), created_at=entry.created_at)

    def put(self, key: str, payload: Any) -> CacheEntry:
        """Store a private copy of payload under key, replacing any previous entry."""
        entry = CacheEntry(key=key, payload=copy.deepcopy(payload), created_at=self._clock())
        with self._lock:
            self._entries[key] = entry
        return entry

    def sweep(self, now: Optional[float] = None) -> int:
        """Remove every entry with age >= TTL. Returns the number removed."""
        current = self._clock() if now is None else now
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.age(current) >= self.ttl_seconds]
            for key in expired:
                del self._entries[key]
            remaining = len(self._entries)
        if expired:
            logger.info(
                "Response cache sweep evicted entries",
                extra={"payload": {"evicted": len(expired), "remaining": remaining}},
            )
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    # ---------- Lifecycle ----------
    def start(self) -> None:
        """Start the background sweep thread (no-op if already running)."""
        if self.is_running():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._sweep_loop, name="response-cache-sweeper", daemon=True)
        self._thread.start()
        logger.info(
            "Response cache sweeper started",
            extra={"payload": {"ttl_seconds": self.ttl_seconds, "interval_seconds": self.sweep_interval_seconds}},
        )

    def stop(self, timeout: float = 5.0) -> None:
        """Signal the sweep thread to exit and wait for it."""
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        thread.join(timeout=timeout)
        self._thread = None
        logger.info("Response cache sweeper stopped")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    # ---------- Internal helpers ----------
    def _sweep_loop(self) -> None:
        while not self._stop_event.wait(self.sweep_interval_seconds):
            try:
                self.sweep()
            except Exception as exc:  # pragma: no cover - background guardrail
                logger.warning("Response cache sweep failed", extra={"payload": {"error": str(exc)}})
