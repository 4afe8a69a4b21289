from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OrderError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class InvalidRequest(OrderError):
    pass


@dataclass(frozen=True)
class DuplicateOrder(OrderError):
    order_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"duplicate_order: {self.order_id} ({self.message})"


@dataclass(frozen=True)
class InsufficientInventory(OrderError):
    product_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class PaymentDeclined(OrderError):
    reason: str = ""


@dataclass(frozen=True)
class PaymentServiceUnavailable(OrderError):
    pass


@dataclass(frozen=True)
class NotificationFailed(OrderError):
    """Recorded as ``email_sent=False``; never returned as a failure."""

    order_id: str = ""


@dataclass(frozen=True)
class InternalError(OrderError):
    pass


class TransportError(Exception):
    """Raised by collaborator adapters when the remote call itself fails."""
