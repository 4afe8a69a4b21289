"""
Shared fakes for the collaborator ports.

Each fake records its calls so tests can assert which steps ran.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Set, Tuple

import pytest

from order_processing.adapters.outbound.in_memory_dedup import InMemoryDeduplicationCache
from order_processing.core.domain.model.errors import TransportError
from order_processing.core.domain.model.order import (
    OrderItem,
    OrderRequest,
    PaymentInstrument,
    PaymentOutcome,
)
from order_processing.core.domain.service.process_order_service import (
    OrderProcessor,
    OrderProcessorDeps,
)


@dataclass
class FakeInventory:
    stock: Dict[str, int] = field(default_factory=lambda: {"P1": 10, "P2": 5, "P3": 1})
    broken_checks: Set[str] = field(default_factory=set)
    broken_decrements: Set[str] = field(default_factory=set)
    delay: float = 0.0
    decrement_delay: Optional[float] = None  # None: same as delay
    checks: List[Tuple[str, int]] = field(default_factory=list)
    decrements: List[Tuple[str, int]] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0

    async def _enter(self, delay: float) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(delay)
        self.in_flight -= 1

    async def check_availability(self, product_id: str, quantity: int) -> bool:
        self.checks.append((product_id, quantity))
        await self._enter(self.delay)
        if product_id in self.broken_checks:
            raise TransportError("inventory down")
        return self.stock.get(product_id, 0) >= quantity

    async def decrement(self, product_id: str, quantity: int) -> bool:
        self.decrements.append((product_id, quantity))
        delay = self.delay if self.decrement_delay is None else self.decrement_delay
        await self._enter(delay)
        if product_id in self.broken_decrements:
            raise TransportError("inventory down")
        if product_id not in self.stock:
            return False
        self.stock[product_id] -= quantity
        return True


@dataclass
class FakePayment:
    outcome: Optional[PaymentOutcome] = field(
        default_factory=lambda: PaymentOutcome.approved("PAY-12345678")
    )
    error: Optional[Exception] = None
    delay: float = 0.0
    calls: List[PaymentInstrument] = field(default_factory=list)

    async def authorize(self, instrument: PaymentInstrument) -> PaymentOutcome:
        self.calls.append(instrument)
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.outcome


@dataclass
class FakeNotification:
    result: bool = True
    error: Optional[Exception] = None
    delay: float = 0.0
    calls: List[Tuple[str, str]] = field(default_factory=list)

    async def notify(self, email: str, order_id: str) -> bool:
        self.calls.append((email, order_id))
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def build_order(
    order_id: str = "O1",
    items: Tuple[Tuple[str, int], ...] = (("P1", 2),),
    email: str = "a@b.com",
    card_number: str = "4111111111111111",
    amount: str = "59.90",
) -> OrderRequest:
    return OrderRequest(
        order_id=order_id,
        customer_email=email,
        items=tuple(OrderItem(product_id=p, quantity=q) for p, q in items),
        payment=PaymentInstrument(
            amount=Decimal(amount),
            currency="USD",
            card_number=card_number,
            expiry_date="12/30",
            cvv="123",
        ),
    )


@dataclass
class Harness:
    inventory: FakeInventory
    payment: FakePayment
    notification: FakeNotification
    dedup: InMemoryDeduplicationCache
    clock: FakeClock

    def processor(self, **overrides) -> OrderProcessor:
        params = dict(
            inventory=self.inventory,
            payment=self.payment,
            notification=self.notification,
            dedup=self.dedup,
            call_timeout_seconds=1.0,
            clock=self.clock,
        )
        params.update(overrides)
        return OrderProcessor(OrderProcessorDeps(**params))

    def untouched(self) -> bool:
        return not (
            self.inventory.checks
            or self.inventory.decrements
            or self.payment.calls
            or self.notification.calls
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def harness(clock: FakeClock) -> Harness:
    return Harness(
        inventory=FakeInventory(),
        payment=FakePayment(),
        notification=FakeNotification(),
        dedup=InMemoryDeduplicationCache(clock=clock),
        clock=clock,
    )


@pytest.fixture
def make_order():
    return build_order
