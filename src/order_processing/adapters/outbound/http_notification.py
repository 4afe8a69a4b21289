from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from order_processing.core.domain.model.errors import TransportError
from order_processing.core.ports.outbound.notification import NotificationService

logger = logging.getLogger(__name__)


@dataclass
class HttpNotificationService(NotificationService):
    client: httpx.AsyncClient
    base_url: str

    async def notify(self, email: str, order_id: str) -> bool:
        if not email:
            logger.warning("No email provided for order %s", order_id)
            return False

        body = {
            "to": email,
            "subject": f"Order Confirmation - {order_id}",
            "body": f"Your order {order_id} has been processed successfully.",
        }
        try:
            resp = await self.client.post(f"{self.base_url}/api/send", json=body)
        except httpx.HTTPError as e:
            raise TransportError(f"email service unreachable: {e}") from e

        if not resp.is_success:
            logger.error(
                "Failed to send confirmation email for order %s. Status: %d",
                order_id,
                resp.status_code,
            )
        return resp.is_success
