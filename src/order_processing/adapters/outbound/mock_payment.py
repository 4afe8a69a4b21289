from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass

from order_processing.core.domain.model.order import PaymentInstrument, PaymentOutcome
from order_processing.core.ports.outbound.payment import PaymentService

logger = logging.getLogger(__name__)


@dataclass
class MockPaymentService(PaymentService):
    """Approves everything except card numbers ending in ``decline_suffix``."""

    decline_suffix: str = "0000"
    latency_seconds: float = 0.2

    async def authorize(self, instrument: PaymentInstrument) -> PaymentOutcome:
        await asyncio.sleep(self.latency_seconds)

        if instrument.card_number.endswith(self.decline_suffix):
            return PaymentOutcome.declined("Invalid card number")

        payment_id = f"PAY-{uuid.uuid4().hex[:8]}"
        logger.info("Payment processed successfully: %s", payment_id)
        return PaymentOutcome.approved(payment_id)
