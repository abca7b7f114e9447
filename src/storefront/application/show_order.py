"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, to_order_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        currency_symbol: str = "$",
        processing_name: str = "processing",
    ) -> None:
        self._order_repo = order_repo
        self._currency_symbol = currency_symbol
        self._processing_name = processing_name

    def handle(self, order_number: str, customer_id: str | None = None) -> OrderDTO:
        order = self._order_repo.get_by_number(order_number)
        if order is None or (customer_id is not None and order.customer_id != customer_id):
            raise EntityNotFoundError(f"Order {order_number} not found")
        return to_order_dto(order, self._currency_symbol, self._processing_name)
