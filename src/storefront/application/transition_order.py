"""Application service: Transition Order use case (operator action).

The operator names the status they want; the Order aggregate decides
whether that is legal. A rejected request raises before anything is
written, so the stored order is never partially updated.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from storefront.domain.exceptions import EntityNotFoundError, OrderStageConflict
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import TrackingInfo
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class TransitionOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        order_number: str,
        next_status: OrderStatus,
        note: str = "",
        tracking: TrackingInfo | None = None,
        now: datetime | None = None,
    ) -> Order:
        order = self._order_repo.get_by_number(order_number)
        if order is None:
            raise EntityNotFoundError(f"Order {order_number} not found")

        if next_status is OrderStatus.CANCELLED and not note.strip():
            note = "Cancelled by admin"

        previous = order.status
        order.transition(next_status, note=note, tracking=tracking, now=now)
        self._order_repo.save(order)

        logger.info(
            "order_transitioned",
            order_number=order.order_number,
            from_status=previous.value,
            to_status=order.status.value,
        )
        return order


class AdvanceOrderHandler:
    """Move an order one step along the happy path."""

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        order_number: str,
        note: str = "",
        tracking: TrackingInfo | None = None,
        now: datetime | None = None,
    ) -> Order:
        order = self._order_repo.get_by_number(order_number)
        if order is None:
            raise EntityNotFoundError(f"Order {order_number} not found")
        if order.next_status is None:
            raise OrderStageConflict(
                f"Order {order_number} is {order.status.value}; no further steps"
            )

        return TransitionOrderHandler(self._order_repo).handle(
            order_number, order.next_status, note=note, tracking=tracking, now=now
        )
