"""Application service: Cancel Order use case.

Used both by the store operator and by the customer who owns the order
(self-service). Either way the order must still be cancellation-eligible:
once it is processing, cancelling is rejected.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import Order
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        order_number: str,
        reason: str = "",
        customer_id: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Cancel an order.

        Pass ``customer_id`` for a self-service cancellation; it must match
        the order's owner. Someone else's order is reported as not found.
        """
        order = self._order_repo.get_by_number(order_number)
        if order is None or (customer_id is not None and order.customer_id != customer_id):
            raise EntityNotFoundError(f"Order {order_number} not found")

        if not reason.strip():
            reason = "Cancelled by customer" if customer_id is not None else "Cancelled by admin"

        order.cancel(reason, now=now)
        self._order_repo.save(order)

        logger.info(
            "order_cancelled",
            order_number=order.order_number,
            by="customer" if customer_id is not None else "operator",
            reason=reason,
        )
        return order
