from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from order_processing.core.ports.outbound.notification import NotificationService

logger = logging.getLogger(__name__)


@dataclass
class MockNotificationService(NotificationService):
    latency_seconds: float = 0.15
    sent: List[Tuple[str, str]] = field(default_factory=list)

    async def notify(self, email: str, order_id: str) -> bool:
        await asyncio.sleep(self.latency_seconds)

        if "invalid" in email:
            logger.error("Failed to send email to %s", email)
            return False

        self.sent.append((email, order_id))
        logger.info("Confirmation email sent to %s for order %s", email, order_id)
        return True
