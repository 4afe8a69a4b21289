from __future__ import annotations

from typing import Protocol


class NotificationService(Protocol):
    async def notify(self, email: str, order_id: str) -> bool: ...
