from __future__ import annotations

from typing import Protocol


class InventoryService(Protocol):
    """Per-product stock. Implementations may raise ``TransportError``."""

    async def check_availability(self, product_id: str, quantity: int) -> bool: ...

    async def decrement(self, product_id: str, quantity: int) -> bool: ...
