from __future__ import annotations

from datetime import datetime
from typing import Protocol


class DeduplicationCache(Protocol):
    """
    Recently processed order ids with a fixed time-to-live.

    claim() must be atomic: of several concurrent callers for the same id,
    at most one gets True until that id is recorded or released.
    """

    def is_duplicate(self, order_id: str) -> bool: ...

    def record(self, order_id: str, timestamp: datetime | None = None) -> None: ...

    def claim(self, order_id: str) -> bool:
        """Not a duplicate and not in flight -> mark in flight and return True."""
        ...

    def release(self, order_id: str) -> None: ...
