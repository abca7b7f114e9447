"""Display labels and colours for order statuses.

Kept apart from the state machine's transition table: changing a label
never changes what an operator is allowed to do.
"""

from __future__ import annotations

from storefront.domain.model.order import OrderStatus

_LABELS = {
    OrderStatus.PENDING_REVIEW: "Pending Review",
    OrderStatus.INVOICE_SENT: "Invoice Sent",
    OrderStatus.PAYMENT_RECEIVED: "Payment Received",
    OrderStatus.SHIPPED: "Shipped",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}

_COLORS = {
    OrderStatus.PENDING_REVIEW: "#EAB308",
    OrderStatus.INVOICE_SENT: "#3B82F6",
    OrderStatus.PAYMENT_RECEIVED: "#06B6D4",
    OrderStatus.PROCESSING: "#8B5CF6",
    OrderStatus.SHIPPED: "#F97316",
    OrderStatus.DELIVERED: "#22C55E",
    OrderStatus.CANCELLED: "#EF4444",
}

DEFAULT_COLOR = "#6B7280"

# Operator-facing verb for moving to each status
ACTION_LABELS = {
    OrderStatus.INVOICE_SENT: "Send Invoice",
    OrderStatus.PAYMENT_RECEIVED: "Mark Payment Received",
    OrderStatus.PROCESSING: "Start Processing",
    OrderStatus.SHIPPED: "Mark Shipped",
    OrderStatus.DELIVERED: "Mark Delivered",
    OrderStatus.CANCELLED: "Cancel Order",
}


def display_name(status: OrderStatus, processing_name: str = "processing") -> str:
    """Human label for ``status``; the processing stage name is store-configurable."""
    if status is OrderStatus.PROCESSING:
        return processing_name[:1].upper() + processing_name[1:]
    return _LABELS[status]


def color(status: OrderStatus) -> str:
    return _COLORS.get(status, DEFAULT_COLOR)
