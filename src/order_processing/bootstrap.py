from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

import httpx

from order_processing.adapters.outbound.http_inventory import HttpInventoryService
from order_processing.adapters.outbound.http_notification import HttpNotificationService
from order_processing.adapters.outbound.http_payment import HttpPaymentService
from order_processing.adapters.outbound.in_memory_dedup import InMemoryDeduplicationCache
from order_processing.adapters.outbound.mock_inventory import MockInventoryService
from order_processing.adapters.outbound.mock_notification import MockNotificationService
from order_processing.adapters.outbound.mock_payment import MockPaymentService
from order_processing.config import Settings, load_settings
from order_processing.core.domain.service.process_order_service import (
    OrderProcessor,
    OrderProcessorDeps,
)
from order_processing.core.ports.outbound.inventory import InventoryService
from order_processing.core.ports.outbound.notification import NotificationService
from order_processing.core.ports.outbound.payment import PaymentService

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Collaborators:
    inventory: InventoryService
    payment: PaymentService
    notification: NotificationService
    client: httpx.AsyncClient | None = None


@dataclass(frozen=True)
class Application:
    processor: OrderProcessor
    client: httpx.AsyncClient | None = None

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def build_collaborators(settings: Settings) -> Collaborators:
    # chosen once here; the processor never knows which family it got
    if settings.services_mode == "http":
        client = httpx.AsyncClient(timeout=settings.call_timeout_seconds)
        return Collaborators(
            inventory=HttpInventoryService(client, settings.inventory_service_url),
            payment=HttpPaymentService(client, settings.payment_service_url),
            notification=HttpNotificationService(client, settings.email_service_url),
            client=client,
        )

    latency = settings.mock_latency_seconds
    return Collaborators(
        inventory=MockInventoryService(latency_seconds=latency),
        payment=MockPaymentService(latency_seconds=latency * 2),
        notification=MockNotificationService(latency_seconds=latency * 1.5),
    )


def build_application(settings: Settings | None = None) -> Application:
    settings = settings or load_settings()
    collaborators = build_collaborators(settings)
    dedup = InMemoryDeduplicationCache(
        window=timedelta(seconds=settings.dedup_window_seconds)
    )
    processor = OrderProcessor(
        OrderProcessorDeps(
            inventory=collaborators.inventory,
            payment=collaborators.payment,
            notification=collaborators.notification,
            dedup=dedup,
            call_timeout_seconds=settings.call_timeout_seconds,
            max_fan_out=settings.max_fan_out,
        )
    )
    logger.info("Order processor wired with %s services", settings.services_mode)
    return Application(processor=processor, client=collaborators.client)


def build_processor(settings: Settings | None = None) -> OrderProcessor:
    # CLI 用（単体）。HTTP 用は build_application() を使う
    return build_application(settings).processor
