from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from returns.result import Success

from order_processing.core.domain.model.errors import (
    DuplicateOrder,
    InsufficientInventory,
    InternalError,
    InvalidRequest,
    OrderError,
    PaymentDeclined,
    PaymentServiceUnavailable,
)
from order_processing.core.domain.model.order import (
    OrderItem,
    OrderRequest,
    PaymentInstrument,
    now_utc,
)
from order_processing.core.ports.inbound.process_order import ProcessOrderUseCase

logger = logging.getLogger(__name__)

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderItemIn(_CamelModel):
    product_id: str = Field(examples=["PRODUCT-001"])
    quantity: int = Field(examples=[2])


class PaymentInfoIn(_CamelModel):
    amount: Decimal = Field(examples=["59.90"])
    currency: str = Field(default="USD", examples=["USD"])
    card_number: str = Field(default="", examples=["4111111111111111"])
    expiry_date: str = Field(default="", examples=["12/30"])
    cvv: str = Field(default="", examples=["123"])


class OrderRequestIn(_CamelModel):
    order_id: str = Field(default="", examples=["O1"])
    customer_email: str = Field(default="", examples=["a@b.com"])
    items: list[OrderItemIn] = Field(default_factory=list)
    payment_info: PaymentInfoIn


class OrderResultResponse(_CamelModel):
    order_id: str
    status: str
    processed_at: datetime
    payment_id: str
    email_sent: bool


class ErrorResponse(BaseModel):
    error: str
    timestamp: datetime


def _error_body(message: str) -> dict[str, Any]:
    return ErrorResponse(error=message, timestamp=now_utc()).model_dump(mode="json")


def _map_error_to_http(err: OrderError) -> tuple[int, dict[str, Any]]:
    if isinstance(err, (InvalidRequest, InsufficientInventory)):
        return 400, _error_body(err.message)

    if isinstance(err, DuplicateOrder):
        return 409, _error_body(err.message)

    if isinstance(err, (PaymentDeclined, PaymentServiceUnavailable)):
        return 402, _error_body(err.message)

    if isinstance(err, InternalError):
        return 500, _error_body(err.message)

    return 500, _error_body("Internal server error")


def to_order_request(req: OrderRequestIn) -> OrderRequest:
    p = req.payment_info
    return OrderRequest(
        order_id=req.order_id,
        customer_email=req.customer_email,
        items=tuple(
            OrderItem(product_id=it.product_id, quantity=it.quantity) for it in req.items
        ),
        payment=PaymentInstrument(
            amount=p.amount,
            currency=p.currency,
            card_number=p.card_number,
            expiry_date=p.expiry_date,
            cvv=p.cvv,
        ),
    )


def create_app(
    process_order_uc: ProcessOrderUseCase,
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if on_shutdown is not None:
            await on_shutdown()

    app = FastAPI(title="order_processing", lifespan=lifespan)

    # --- exception handlers (統一エラー応答) ---------------------------------

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # 入力不正は 400 に寄せる
        return JSONResponse(status_code=400, content=_error_body("Invalid request format"))

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error: %s", type(exc).__name__)
        return JSONResponse(status_code=500, content=_error_body("Internal server error"))

    # --- routes --------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(
        "/orders",
        response_model=OrderResultResponse,
        response_model_by_alias=True,
        responses={
            400: {"model": ErrorResponse},
            402: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    async def process_order(req: OrderRequestIn) -> Any:
        result = await process_order_uc.process(to_order_request(req))

        if isinstance(result, Success):
            r = result.unwrap()
            return OrderResultResponse(
                order_id=r.order_id,
                status=r.status,
                processed_at=r.processed_at,
                payment_id=r.payment_id,
                email_sent=r.email_sent,
            )

        status, body = _map_error_to_http(result.failure())
        return JSONResponse(status_code=status, content=body)

    return app
