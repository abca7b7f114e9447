"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns an immutable snapshot of the
cart's line items and the shipping address. After checkout it changes only
through the fulfillment state machine below, which is driven by explicit
operator (or, for cancellation, owner) actions:

    pending_review -> invoice_sent -> payment_received -> processing
        -> shipped -> delivered

``cancelled`` is a side exit from the first three states. ``delivered``
and ``cancelled`` are terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

from storefront.domain.exceptions import OrderStageConflict, ValidationError
from storefront.domain.model.cart import LineItem
from storefront.domain.model.value_objects import ShippingAddress, TrackingInfo


class OrderStatus(Enum):
    PENDING_REVIEW = "pending_review"
    INVOICE_SENT = "invoice_sent"
    PAYMENT_RECEIVED = "payment_received"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------
CANCELLABLE_STATUSES = frozenset(
    {
        OrderStatus.PENDING_REVIEW,
        OrderStatus.INVOICE_SENT,
        OrderStatus.PAYMENT_RECEIVED,
    }
)

# Happy-path successor of each status; terminal statuses have none
NEXT_STATUS: dict[OrderStatus, OrderStatus | None] = {
    OrderStatus.PENDING_REVIEW: OrderStatus.INVOICE_SENT,
    OrderStatus.INVOICE_SENT: OrderStatus.PAYMENT_RECEIVED,
    OrderStatus.PAYMENT_RECEIVED: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
    OrderStatus.DELIVERED: None,
    OrderStatus.CANCELLED: None,
}

TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    status: frozenset(
        ({successor} if successor else set())
        | ({OrderStatus.CANCELLED} if status in CANCELLABLE_STATUSES else set())
    )
    for status, successor in NEXT_STATUS.items()
}

TERMINAL_STATUSES = frozenset(s for s, allowed in TRANSITIONS.items() if not allowed)

PAYMENT_TERMS = timedelta(days=14)
ORDER_PLACED_NOTE = "Order placed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StatusHistoryEntry:
    status: OrderStatus
    timestamp: datetime
    note: str = ""


@dataclass
class Order:
    """Aggregate root for submitted orders.

    Use the ``Order.create()`` factory for new orders; it enforces the
    pricing invariant and seeds the status history. The ``__init__`` is
    intentionally simple so the repository can reconstitute persisted
    orders without re-validating.
    """

    id: int | None
    order_number: str
    customer_id: str
    customer_email: str
    customer_name: str
    items: tuple[LineItem, ...]
    shipping_address: ShippingAddress
    subtotal: int
    shipping_cost: int
    discount_code: str
    discount_amount: int
    total: int
    status: OrderStatus = OrderStatus.PENDING_REVIEW
    status_history: list[StatusHistoryEntry] = field(default_factory=list)
    tracking: TrackingInfo | None = None
    invoice_sent_at: datetime | None = None
    payment_due_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str = ""
    admin_notes: str = ""
    created_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        customer_id: str,
        customer_email: str,
        customer_name: str,
        items: list[LineItem] | tuple[LineItem, ...],
        shipping_address: ShippingAddress,
        subtotal: int,
        shipping_cost: int,
        discount_amount: int,
        total: int,
        discount_code: str = "",
        now: datetime | None = None,
    ) -> Order:
        """Create a new order in ``pending_review``, enforcing all invariants."""
        if not items:
            raise ValidationError("Order must contain at least one item", fields=["items"])
        if not customer_id:
            raise ValidationError("Customer is required", fields=["customer"])
        if min(subtotal, shipping_cost, discount_amount, total) < 0:
            raise ValidationError("Order amounts cannot be negative")
        if total != max(0, subtotal + shipping_cost - discount_amount):
            raise ValidationError(
                f"Order total {total} does not equal subtotal + shipping - discount"
            )

        now = now or _utcnow()
        return Order(
            id=None,
            order_number=order_number,
            customer_id=customer_id,
            customer_email=customer_email,
            customer_name=customer_name,
            items=tuple(items),
            shipping_address=shipping_address,
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            discount_code=discount_code,
            discount_amount=discount_amount,
            total=total,
            status_history=[
                StatusHistoryEntry(OrderStatus.PENDING_REVIEW, now, ORDER_PLACED_NOTE)
            ],
            created_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def transition(
        self,
        next_status: OrderStatus,
        note: str = "",
        tracking: TrackingInfo | None = None,
        now: datetime | None = None,
    ) -> StatusHistoryEntry:
        """Move the order to ``next_status``.

        Everything is validated before the first mutation, so a rejected
        request leaves the order exactly as it was. Returns the history
        entry that was appended.
        """
        if next_status is OrderStatus.CANCELLED:
            return self.cancel(note, now=now)

        if next_status not in TRANSITIONS[self.status]:
            raise OrderStageConflict(
                f"Cannot move order {self.order_number} from "
                f"{self.status.value} to {next_status.value}"
            )
        if next_status is OrderStatus.SHIPPED and (tracking is None or not tracking.is_complete):
            raise ValidationError(
                "Tracking carrier and number are required to mark an order shipped",
                fields=["tracking"],
            )

        now = now or _utcnow()
        entry = self._append(next_status, now, note)

        if next_status is OrderStatus.INVOICE_SENT:
            self.invoice_sent_at = now
            self.payment_due_at = now + PAYMENT_TERMS
        elif next_status is OrderStatus.SHIPPED:
            self.tracking = tracking
        return entry

    def cancel(self, reason: str = "", now: datetime | None = None) -> StatusHistoryEntry:
        """Transition a cancellation-eligible order to CANCELLED."""
        if self.status is OrderStatus.CANCELLED:
            raise OrderStageConflict(f"Order {self.order_number} is already cancelled")
        if not self.can_cancel:
            raise OrderStageConflict(
                f"Order {self.order_number} cannot be cancelled once it is "
                f"{self.status.value}"
            )

        now = now or _utcnow()
        reason = reason.strip() or "Cancelled"
        entry = self._append(OrderStatus.CANCELLED, now, reason)
        self.cancelled_at = now
        self.cancellation_reason = reason
        return entry

    def annotate(self, notes: str) -> None:
        """Replace the operator's internal notes. Does not touch status."""
        self.admin_notes = notes

    # --- Computed properties --------------------------------------------------

    @property
    def can_cancel(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def next_status(self) -> OrderStatus | None:
        return NEXT_STATUS[self.status]

    @property
    def allowed_transitions(self) -> frozenset[OrderStatus]:
        return TRANSITIONS[self.status]

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    # --- Internal helpers -----------------------------------------------------

    def _append(self, status: OrderStatus, now: datetime, note: str) -> StatusHistoryEntry:
        entry = StatusHistoryEntry(status=status, timestamp=now, note=note)
        self.status_history.append(entry)
        self.status = status
        return entry
