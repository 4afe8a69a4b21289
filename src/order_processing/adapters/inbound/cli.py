from __future__ import annotations

import asyncio

from pydantic import ValidationError
from returns.result import Success

from order_processing.adapters.inbound.web.fastapi_app import (
    OrderRequestIn,
    to_order_request,
)
from order_processing.core.ports.inbound.process_order import ProcessOrderUseCase


def run_cli(usecase: ProcessOrderUseCase, raw: str) -> int:
    """
    raw: JSON string, same body as ``POST /orders``.
    Example:
      {"orderId":"O1","customerEmail":"a@b.com",
       "items":[{"productId":"PRODUCT-001","quantity":2}],
       "paymentInfo":{"amount":"59.90","currency":"USD","cardNumber":"4111111111111111"}}
    """
    try:
        request = to_order_request(OrderRequestIn.model_validate_json(raw))
    except ValidationError as e:
        print(f"invalid_input: {e.error_count()} error(s): {_first_error(e)}")
        return 2

    result = asyncio.run(usecase.process(request))

    if isinstance(result, Success):
        r = result.unwrap()
        print(
            "[ok]",
            {
                "orderId": r.order_id,
                "status": r.status,
                "processedAt": r.processed_at.isoformat(),
                "paymentId": r.payment_id,
                "emailSent": r.email_sent,
            },
        )
        return 0

    err = result.failure()
    print("[ng]", f"{type(err).__name__}: {err.message}")
    return 1


def _first_error(e: ValidationError) -> str:
    first = e.errors()[0]
    loc = ".".join(str(part) for part in first["loc"])
    return f"{loc}: {first['msg']}" if loc else first["msg"]
