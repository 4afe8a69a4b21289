from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, Callable, List, Sequence, Tuple, TypeVar

from returns.result import Failure, Result, Success

from order_processing.core.domain.model.errors import (
    DuplicateOrder,
    InsufficientInventory,
    InternalError,
    InvalidRequest,
    NotificationFailed,
    OrderError,
    PaymentDeclined,
    PaymentServiceUnavailable,
    TransportError,
)
from order_processing.core.domain.model.order import (
    PROCESSED,
    OrderItem,
    OrderRequest,
    OrderResult,
    PaymentInstrument,
    now_utc,
)
from order_processing.core.ports.inbound.process_order import ProcessOrderUseCase
from order_processing.core.ports.outbound.dedup import DeduplicationCache
from order_processing.core.ports.outbound.inventory import InventoryService
from order_processing.core.ports.outbound.notification import NotificationService
from order_processing.core.ports.outbound.payment import PaymentService

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class OrderProcessorDeps:
    inventory: InventoryService
    payment: PaymentService
    notification: NotificationService
    dedup: DeduplicationCache
    call_timeout_seconds: float = 30.0
    max_fan_out: int | None = None  # None: one task per item, unbounded
    clock: Callable[[], datetime] = now_utc


@dataclass
class _Progress:
    claimed: bool = False
    payment_id: str | None = None
    recorded: bool = False


@dataclass(frozen=True)
class OrderProcessor(ProcessOrderUseCase):
    """
    Runs one order through: validate -> dedup -> stock check -> payment ->
    stock decrement -> confirmation email -> dedup record.

    Every step gates the next. Collaborator failures are converted to
    results at the call site; only the decrement and the email are allowed
    to fail without failing the order.
    """

    deps: OrderProcessorDeps

    async def process(self, request: OrderRequest) -> Result[OrderResult, OrderError]:
        logger.info("Processing order request started")

        progress = _Progress()
        try:
            result = await self._run(request, progress)
        except Exception:  # noqa: BLE001
            logger.exception("Error processing order %s", request.order_id)
            result = Failure(InternalError(message="Internal server error"))
        finally:
            if progress.claimed and not progress.recorded:
                if progress.payment_id is not None:
                    # already charged: a retry must not charge again
                    self.deps.dedup.record(request.order_id)
                else:
                    self.deps.dedup.release(request.order_id)

        return result

    async def _run(
        self, request: OrderRequest, progress: _Progress
    ) -> Result[OrderResult, OrderError]:
        v = _validate_request(request)
        if isinstance(v, Failure):
            logger.warning("Rejected invalid order request: %s", v.failure())
            return v

        order_id = request.order_id
        if not self.deps.dedup.claim(order_id):
            logger.warning("Duplicate order detected: %s", order_id)
            return Failure(DuplicateOrder(message="Duplicate order", order_id=order_id))
        progress.claimed = True

        unavailable = await self._validate_inventory(request.items)
        if unavailable:
            logger.warning(
                "Insufficient inventory for order %s: %s", order_id, ", ".join(unavailable)
            )
            return Failure(
                InsufficientInventory(
                    message="Insufficient inventory", product_ids=unavailable
                )
            )

        paid = await self._authorize(request.payment)
        if isinstance(paid, Failure):
            return paid
        progress.payment_id = paid.unwrap()

        drifted = await self._update_inventory(request.items)
        if drifted:
            # no compensation: the order is paid, stock is left to reconcile
            logger.warning(
                "Some inventory updates failed for order %s: %s",
                order_id,
                ", ".join(drifted),
            )

        notified = await self._send_confirmation(request.customer_email, order_id)
        if isinstance(notified, Failure):
            logger.warning(
                "Order %s processed without confirmation: %s", order_id, notified.failure()
            )

        self.deps.dedup.record(order_id)
        progress.recorded = True

        logger.info("Order %s processed (payment %s)", order_id, progress.payment_id)
        return Success(
            OrderResult(
                order_id=order_id,
                status=PROCESSED,
                processed_at=self.deps.clock(),
                payment_id=progress.payment_id,
                email_sent=isinstance(notified, Success),
            )
        )

    # ---- steps -------------------------------------------------------------

    async def _validate_inventory(self, items: Sequence[OrderItem]) -> Tuple[str, ...]:
        async def check(item: OrderItem) -> bool:
            try:
                return bool(
                    await self._bounded(
                        self.deps.inventory.check_availability(
                            item.product_id, item.quantity
                        )
                    )
                )
            except asyncio.TimeoutError:
                logger.error("Timeout validating inventory for product %s", item.product_id)
            except TransportError as e:
                logger.error(
                    "Failed to validate inventory for product %s: %s", item.product_id, e
                )
            except Exception:  # noqa: BLE001
                logger.exception(
                    "Failed to validate inventory for product %s", item.product_id
                )
            return False

        results = await self._fan_out(items, check)
        return tuple(it.product_id for it, ok in zip(items, results) if not ok)

    async def _authorize(self, instrument: PaymentInstrument) -> Result[str, OrderError]:
        card = instrument.masked_card()
        unavailable = Failure(
            PaymentServiceUnavailable(message="Payment service unavailable")
        )
        try:
            outcome = await self._bounded(self.deps.payment.authorize(instrument))
        except asyncio.TimeoutError:
            logger.error("Payment processing timed out (card %s)", card)
            return unavailable
        except TransportError as e:
            logger.error("Payment processing failed (card %s): %s", card, e)
            message = str(e) or "Payment service unavailable"
            return Failure(PaymentServiceUnavailable(message=message))
        except Exception:  # noqa: BLE001
            logger.exception("Payment processing failed (card %s)", card)
            return unavailable

        if not outcome.success:
            reason = outcome.error_message or "Payment declined"
            logger.warning("Payment declined (card %s): %s", card, reason)
            return Failure(PaymentDeclined(message=reason, reason=reason))
        if not outcome.payment_id:
            logger.error("Payment approved without a payment id")
            return Failure(PaymentServiceUnavailable(message="Invalid payment response"))
        return Success(outcome.payment_id)

    async def _update_inventory(self, items: Sequence[OrderItem]) -> Tuple[str, ...]:
        async def decrement(item: OrderItem) -> bool:
            try:
                return bool(
                    await self._bounded(
                        self.deps.inventory.decrement(item.product_id, item.quantity)
                    )
                )
            except asyncio.TimeoutError:
                logger.error("Timeout updating inventory for product %s", item.product_id)
            except Exception:  # noqa: BLE001
                logger.exception("Error updating inventory for product %s", item.product_id)
            return False

        results = await self._fan_out(items, decrement)
        return tuple(it.product_id for it, ok in zip(items, results) if not ok)

    async def _send_confirmation(
        self, email: str, order_id: str
    ) -> Result[None, NotificationFailed]:
        try:
            sent = await self._bounded(self.deps.notification.notify(email, order_id))
        except asyncio.TimeoutError:
            logger.error("Timeout sending confirmation email for order %s", order_id)
            return Failure(
                NotificationFailed(message="notification timed out", order_id=order_id)
            )
        except Exception as e:  # noqa: BLE001
            logger.exception("Exception sending confirmation email for order %s", order_id)
            return Failure(NotificationFailed(message=str(e), order_id=order_id))

        if not sent:
            return Failure(
                NotificationFailed(message="notification rejected", order_id=order_id)
            )
        return Success(None)

    # ---- concurrency helpers -----------------------------------------------

    async def _bounded(self, call: Awaitable[T]) -> T:
        return await asyncio.wait_for(call, timeout=self.deps.call_timeout_seconds)

    async def _fan_out(
        self,
        items: Sequence[OrderItem],
        call: Callable[[OrderItem], Awaitable[bool]],
    ) -> List[bool]:
        """One task per item, all awaited; ``call`` must not raise."""
        limit = self.deps.max_fan_out
        if limit is None:
            return list(await asyncio.gather(*(call(it) for it in items)))

        sem = asyncio.Semaphore(limit)

        async def bounded(item: OrderItem) -> bool:
            async with sem:
                return await call(item)

        return list(await asyncio.gather(*(bounded(it) for it in items)))


# ---- pure helpers ----------------------------------------------------------


def _validate_request(request: OrderRequest) -> Result[OrderRequest, OrderError]:
    if not isinstance(request.order_id, str) or not request.order_id.strip():
        return Failure(InvalidRequest("Invalid request format"))
    if not request.items:
        return Failure(InvalidRequest("at least one line item is required"))

    for i, it in enumerate(request.items):
        if not isinstance(it.product_id, str) or not it.product_id.strip():
            return Failure(InvalidRequest(f"items[{i}].product_id is required"))
        if it.quantity <= 0:
            return Failure(InvalidRequest(f"items[{i}].quantity must be > 0"))

    amount = Decimal(request.payment.amount)
    if not amount.is_finite():
        return Failure(InvalidRequest("payment amount must be a finite number"))
    if amount < 0:
        return Failure(InvalidRequest("payment amount must be >= 0"))

    return Success(request)
