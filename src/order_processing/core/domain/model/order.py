from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Tuple

PROCESSED = "Processed"


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class PaymentInstrument:
    amount: Decimal
    currency: str = "USD"
    card_number: str = field(default="", repr=False)
    expiry_date: str = field(default="", repr=False)
    cvv: str = field(default="", repr=False)

    def masked_card(self) -> str:
        tail = self.card_number[-4:] if len(self.card_number) >= 4 else ""
        return f"****{tail}"


@dataclass(frozen=True)
class OrderRequest:
    order_id: str
    customer_email: str
    items: Tuple[OrderItem, ...]
    payment: PaymentInstrument


@dataclass(frozen=True)
class PaymentOutcome:
    success: bool
    payment_id: str | None = None
    error_message: str | None = None

    @staticmethod
    def approved(payment_id: str) -> "PaymentOutcome":
        return PaymentOutcome(success=True, payment_id=payment_id)

    @staticmethod
    def declined(error_message: str) -> "PaymentOutcome":
        return PaymentOutcome(success=False, error_message=error_message)


@dataclass(frozen=True)
class OrderResult:
    order_id: str
    status: str
    processed_at: datetime
    payment_id: str
    email_sent: bool


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
