from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict

from order_processing.core.ports.outbound.inventory import InventoryService

logger = logging.getLogger(__name__)


def default_stock() -> Dict[str, int]:
    return {"PRODUCT-001": 100, "PRODUCT-002": 50, "PRODUCT-003": 25}


@dataclass
class MockInventoryService(InventoryService):
    stock_by_product: Dict[str, int] = field(default_factory=default_stock)
    latency_seconds: float = 0.1
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def check_availability(self, product_id: str, quantity: int) -> bool:
        await asyncio.sleep(self.latency_seconds)
        async with self._lock:
            available = self.stock_by_product.get(product_id)
        if available is None:
            logger.warning("Product %s not found in inventory", product_id)
            return False
        logger.info(
            "Inventory check: product %s has %d units, requesting %d",
            product_id,
            available,
            quantity,
        )
        return available >= quantity

    async def decrement(self, product_id: str, quantity: int) -> bool:
        await asyncio.sleep(self.latency_seconds / 2)
        async with self._lock:
            if product_id not in self.stock_by_product:
                logger.error("Failed to update inventory for product %s", product_id)
                return False
            # may go negative: the check and the decrement are separate calls
            self.stock_by_product[product_id] -= quantity
        logger.info("Inventory updated: product %s reduced by %d", product_id, quantity)
        return True
