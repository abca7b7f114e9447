"""Application service: List Orders use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.status_labels import display_name
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.pricing import format_money


@dataclass(frozen=True)
class OrderSummaryDTO:
    order_number: str
    customer_name: str
    status: str
    item_count: int
    total: str
    created_at: str


class ListOrdersHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        currency_symbol: str = "$",
        processing_name: str = "processing",
    ) -> None:
        self._order_repo = order_repo
        self._currency_symbol = currency_symbol
        self._processing_name = processing_name

    def handle(
        self,
        customer_id: str | None = None,
        status: OrderStatus | None = None,
    ) -> list[OrderSummaryDTO]:
        """Newest first. Filter by customer, by status, or both."""
        if customer_id is not None:
            orders = self._order_repo.list_by_customer(customer_id)
            if status is not None:
                orders = [o for o in orders if o.status is status]
        else:
            orders = self._order_repo.list_by_status(status)

        return [
            OrderSummaryDTO(
                order_number=o.order_number,
                customer_name=o.customer_name,
                status=display_name(o.status, self._processing_name),
                item_count=o.item_count,
                total=format_money(o.total, self._currency_symbol),
                created_at=o.created_at.strftime("%Y-%m-%d"),
            )
            for o in orders
        ]
