"""Short-lived in-memory cache keyed by string.

Entries expire two ways: lazily, when ``get``/``has`` find them stale, and
through a timer armed by ``set`` that removes the entry once its TTL elapses.
The timer handle lives on the entry and is cancelled whenever the entry is
replaced, deleted or cleared, so a stale timer never removes a newer value.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, TypeVar

from ..core.constants import DEFAULT_CACHE_TTL_MS

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class ScheduledTask(Protocol):
    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], ScheduledTask]


def now_ms() -> float:
    return time.time() * 1000


def start_timer(delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
    timer = threading.Timer(delay_seconds, callback)
    timer.daemon = True
    timer.start()
    return timer


@dataclass
class CacheEntry:
    key: str
    value: Any
    created_at: float
    ttl: int
    timer: Optional[ScheduledTask] = field(default=None, repr=False, compare=False)

    def is_stale(self, now: float) -> bool:
        return now - self.created_at > self.ttl


class CacheService:
    """Thread-safe TTL cache with a get-or-compute helper.

    ``clock`` returns the current time in milliseconds and ``timer_factory``
    arms the scheduled eviction; both are injectable so tests can drive time.
    """

    def __init__(
        self,
        *,
        default_ttl: int = DEFAULT_CACHE_TTL_MS,
        clock: Callable[[], float] = now_ms,
        timer_factory: TimerFactory = start_timer,
    ):
        self.default_ttl = int(default_ttl)
        self._clock = clock
        self._timer_factory = timer_factory
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = self.default_ttl if ttl is None else int(ttl)
        entry = CacheEntry(key=key, value=value, created_at=self._clock(), ttl=ttl)

        with self._lock:
            self._discard(key)
            self._entries[key] = entry
            entry.timer = self._timer_factory(ttl / 1000.0, lambda: self._expire(entry))

        logger.debug("Cache set: %s (TTL: %sms)", key, ttl)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._fresh_entry(key)
            if entry is None:
                return default

        logger.debug("Cache hit: %s", key)
        return entry.value

    def has(self, key: str) -> bool:
        with self._lock:
            return self._fresh_entry(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            deleted = self._discard(key)
        if deleted:
            logger.debug("Cache deleted: %s", key)
        return deleted

    def clear(self) -> None:
        with self._lock:
            for entry in self._entries.values():
                if entry.timer is not None:
                    entry.timer.cancel()
            self._entries.clear()
        logger.debug("Cache cleared")

    def size(self) -> int:
        """Raw entry count; stale entries count until a read or timer evicts them."""
        with self._lock:
            return len(self._entries)

    def get_or_set(self, key: str, factory: Callable[[], T], ttl: Optional[int] = None) -> T:
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        logger.debug("Cache miss: %s, fetching data", key)
        value = factory()
        self.set(key, value, ttl)
        return value

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            keys: List[str] = list(self._entries.keys())
        return {"size": len(keys), "keys": keys}

    def _fresh_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_stale(self._clock()):
            self._discard(key)
            logger.debug("Cache expired: %s", key)
            return None
        return entry

    def _discard(self, key: str) -> bool:
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        if entry.timer is not None:
            entry.timer.cancel()
        return True

    def _expire(self, entry: CacheEntry) -> None:
        with self._lock:
            # The slot may already hold a newer entry if cancel lost the race.
            if self._entries.get(entry.key) is not entry:
                return
            del self._entries[entry.key]
        logger.debug("Cache evicted on schedule: %s", entry.key)
