from __future__ import annotations

from dataclasses import dataclass

import httpx

from order_processing.core.domain.model.errors import TransportError
from order_processing.core.domain.model.order import PaymentInstrument, PaymentOutcome
from order_processing.core.ports.outbound.payment import PaymentService


@dataclass
class HttpPaymentService(PaymentService):
    """
    Payment gateway client.

    Any response other than a 2xx JSON document is a transport failure;
    a parsed response with a status other than ``approved`` is a decline.
    """

    client: httpx.AsyncClient
    base_url: str

    async def authorize(self, instrument: PaymentInstrument) -> PaymentOutcome:
        body = {
            "amount": str(instrument.amount),
            "currency": instrument.currency,
            "cardNumber": instrument.card_number,
            "expiryDate": instrument.expiry_date,
            "cvv": instrument.cvv,
        }
        try:
            resp = await self.client.post(f"{self.base_url}/api/process", json=body)
        except httpx.HTTPError as e:
            raise TransportError(f"payment gateway unreachable: {e}") from e

        if not resp.is_success:
            raise TransportError(f"Payment service returned {resp.status_code}")

        try:
            payload = resp.json()
            status = str(payload.get("status", ""))
        except (ValueError, AttributeError) as e:
            raise TransportError("Invalid payment response") from e

        if status == "approved":
            return PaymentOutcome.approved(str(payload.get("transactionId", "")))
        return PaymentOutcome.declined(str(payload.get("message") or f"payment {status}"))
