from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from order_processing.core.domain.model.errors import TransportError
from order_processing.core.ports.outbound.inventory import InventoryService

logger = logging.getLogger(__name__)


@dataclass
class HttpInventoryService(InventoryService):
    client: httpx.AsyncClient
    base_url: str

    async def check_availability(self, product_id: str, quantity: int) -> bool:
        try:
            resp = await self.client.get(f"{self.base_url}/api/check/{product_id}")
        except httpx.HTTPError as e:
            raise TransportError(f"inventory check failed: {e}") from e

        if not resp.is_success:
            logger.error(
                "Inventory check for product %s returned %d", product_id, resp.status_code
            )
            return False

        try:
            payload = resp.json()
            available = int(payload.get("available", payload.get("Available", 0)))
        except (ValueError, TypeError, AttributeError) as e:
            raise TransportError(f"invalid inventory response: {e}") from e
        return available >= quantity

    async def decrement(self, product_id: str, quantity: int) -> bool:
        body = {"productId": product_id, "quantity": -quantity}
        try:
            resp = await self.client.post(f"{self.base_url}/api/update", json=body)
        except httpx.HTTPError as e:
            raise TransportError(f"inventory update failed: {e}") from e

        if not resp.is_success:
            logger.error(
                "Failed to update inventory for product %s. Status: %d",
                product_id,
                resp.status_code,
            )
        return resp.is_success
