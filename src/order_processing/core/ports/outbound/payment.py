from __future__ import annotations

from typing import Protocol

from order_processing.core.domain.model.order import PaymentInstrument, PaymentOutcome


class PaymentService(Protocol):
    async def authorize(self, instrument: PaymentInstrument) -> PaymentOutcome: ...
