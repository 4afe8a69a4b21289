from __future__ import annotations

from typing import Protocol

from returns.result import Result

from order_processing.core.domain.model.errors import OrderError
from order_processing.core.domain.model.order import OrderRequest, OrderResult


class ProcessOrderUseCase(Protocol):
    async def process(self, request: OrderRequest) -> Result[OrderResult, OrderError]: ...
