from __future__ import annotations

from decimal import Decimal

import pytest

from order_processing.adapters.outbound.mock_inventory import MockInventoryService
from order_processing.adapters.outbound.mock_notification import MockNotificationService
from order_processing.adapters.outbound.mock_payment import MockPaymentService
from order_processing.core.domain.model.order import PaymentInstrument


class TestMockInventoryService:
    @pytest.mark.asyncio
    async def test_default_stock(self):
        inv = MockInventoryService(latency_seconds=0)

        assert await inv.check_availability("PRODUCT-003", 25) is True
        assert await inv.check_availability("PRODUCT-003", 26) is False

    @pytest.mark.asyncio
    async def test_unknown_product(self):
        inv = MockInventoryService(latency_seconds=0)

        assert await inv.check_availability("PRODUCT-999", 1) is False
        assert await inv.decrement("PRODUCT-999", 1) is False

    @pytest.mark.asyncio
    async def test_decrement_reduces_stock(self):
        inv = MockInventoryService(stock_by_product={"A": 3}, latency_seconds=0)

        assert await inv.decrement("A", 2) is True
        assert inv.stock_by_product["A"] == 1
        assert await inv.check_availability("A", 2) is False


class TestMockPaymentService:
    @pytest.mark.asyncio
    async def test_approves_regular_card(self):
        pay = MockPaymentService(latency_seconds=0)

        outcome = await pay.authorize(
            PaymentInstrument(amount=Decimal("10"), card_number="4111111111111111")
        )

        assert outcome.success is True
        assert outcome.payment_id.startswith("PAY-")
        assert len(outcome.payment_id) == len("PAY-") + 8
        assert outcome.error_message is None

    @pytest.mark.asyncio
    async def test_declines_card_ending_in_zeros(self):
        pay = MockPaymentService(latency_seconds=0)

        outcome = await pay.authorize(
            PaymentInstrument(amount=Decimal("10"), card_number="4111111111110000")
        )

        assert outcome.success is False
        assert outcome.payment_id is None
        assert outcome.error_message == "Invalid card number"


class TestMockNotificationService:
    @pytest.mark.asyncio
    async def test_sends(self):
        mail = MockNotificationService(latency_seconds=0)

        assert await mail.notify("a@b.com", "O1") is True
        assert mail.sent == [("a@b.com", "O1")]

    @pytest.mark.asyncio
    async def test_invalid_address_fails(self):
        mail = MockNotificationService(latency_seconds=0)

        assert await mail.notify("invalid@b.com", "O1") is False
        assert mail.sent == []


def test_instrument_repr_hides_card_data():
    instrument = PaymentInstrument(
        amount=Decimal("1"), card_number="4111111111111234", cvv="999"
    )

    assert "4111111111111234" not in repr(instrument)
    assert "999" not in repr(instrument)
    assert instrument.masked_card() == "****1234"
