from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, Set

from order_processing.core.domain.model.order import now_utc
from order_processing.core.ports.outbound.dedup import DeduplicationCache

DEFAULT_WINDOW = timedelta(minutes=5)


@dataclass
class InMemoryDeduplicationCache(DeduplicationCache):
    """
    Process-local dedup map guarded by one lock.

    Stale entries are dropped when they are read; nothing sweeps the map.
    A single lock serializes all keys, which is fine while every critical
    section is a couple of dict operations.
    """

    window: timedelta = DEFAULT_WINDOW
    clock: Callable[[], datetime] = now_utc
    _entries: Dict[str, datetime] = field(default_factory=dict)
    _in_flight: Set[str] = field(default_factory=set)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_duplicate(self, order_id: str) -> bool:
        with self._lock:
            return self._is_fresh(order_id)

    def record(self, order_id: str, timestamp: datetime | None = None) -> None:
        with self._lock:
            self._entries[order_id] = timestamp or self.clock()
            self._in_flight.discard(order_id)

    def claim(self, order_id: str) -> bool:
        with self._lock:
            if order_id in self._in_flight or self._is_fresh(order_id):
                return False
            self._in_flight.add(order_id)
            return True

    def release(self, order_id: str) -> None:
        with self._lock:
            self._in_flight.discard(order_id)

    # caller holds the lock
    def _is_fresh(self, order_id: str) -> bool:
        last = self._entries.get(order_id)
        if last is None:
            return False
        if self.clock() - last < self.window:
            return True
        del self._entries[order_id]
        return False
