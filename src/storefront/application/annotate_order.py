"""Application service: Annotate Order use case (operator notes)."""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.order_repository import OrderRepository


class AnnotateOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_number: str, notes: str) -> None:
        order = self._order_repo.get_by_number(order_number)
        if order is None:
            raise EntityNotFoundError(f"Order {order_number} not found")
        order.annotate(notes)
        self._order_repo.save(order)
