"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world. Money is pre-formatted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from storefront.application.status_labels import ACTION_LABELS, color, display_name
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.service.pricing import format_money

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_name: str
    variants: str  # e.g. "color: Blue / size: L"
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class StatusHistoryDTO:
    status: str
    timestamp: str
    note: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    order_number: str
    customer_name: str
    customer_email: str
    status: str
    status_label: str
    status_color: str  # hex, for badges
    items: list[OrderLineItemDTO]
    subtotal: str
    shipping_cost: str
    discount_code: str
    discount_amount: str
    total: str
    shipping_address: str
    created_at: str
    history: list[StatusHistoryDTO]
    tracking: str | None = None
    payment_due_at: str | None = None
    cancellation_reason: str = ""
    admin_notes: str = ""
    available_actions: list[str] = field(default_factory=list)


def _fmt_time(value: datetime | None) -> str | None:
    return value.strftime(TIMESTAMP_FORMAT) if value is not None else None


def to_order_dto(
    order: Order,
    currency_symbol: str = "$",
    processing_name: str = "processing",
) -> OrderDTO:
    address = order.shipping_address
    street = f"{address.street}, {address.apt}" if address.apt else address.street
    tracking = None
    if order.tracking is not None:
        tracking = f"{order.tracking.carrier} {order.tracking.number}"
        if order.tracking.url:
            tracking += f" ({order.tracking.url})"

    return OrderDTO(
        order_number=order.order_number,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        status=order.status.value,
        status_label=display_name(order.status, processing_name),
        status_color=color(order.status),
        items=[
            OrderLineItemDTO(
                product_name=item.product_name,
                variants=item.variant_label,
                quantity=item.quantity,
                unit_price=format_money(item.unit_price, currency_symbol),
                line_total=format_money(item.line_total, currency_symbol),
            )
            for item in order.items
        ],
        subtotal=format_money(order.subtotal, currency_symbol),
        shipping_cost=format_money(order.shipping_cost, currency_symbol),
        discount_code=order.discount_code,
        discount_amount=format_money(order.discount_amount, currency_symbol),
        total=format_money(order.total, currency_symbol),
        shipping_address=(
            f"{address.name}, {street}, {address.city}, {address.state} "
            f"{address.zip}, {address.country}"
        ),
        created_at=_fmt_time(order.created_at),
        history=[
            StatusHistoryDTO(
                status=display_name(entry.status, processing_name),
                timestamp=_fmt_time(entry.timestamp),
                note=entry.note,
            )
            for entry in order.status_history
        ],
        tracking=tracking,
        payment_due_at=_fmt_time(order.payment_due_at),
        cancellation_reason=order.cancellation_reason,
        admin_notes=order.admin_notes,
        available_actions=[
            ACTION_LABELS[status] for status in OrderStatus if status in order.allowed_transitions
        ],
    )
