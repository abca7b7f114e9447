"""Domain service: Pricing.

Pure functions over integer minor units (cents). Nothing here has side
effects and nothing produces a fractional cent: percentage discounts are
rounded half-up to a whole cent.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import LineItem
from storefront.domain.model.discount import Discount, DiscountKind
from storefront.domain.model.value_objects import require_int


@dataclass(frozen=True)
class ShippingRates:
    """Flat-rate shipping with an optional free-shipping threshold.

    A threshold of ``0`` disables free shipping entirely.
    """

    flat_rate: int = 500
    free_shipping_threshold: int = 5000

    def __post_init__(self) -> None:
        require_int(self.flat_rate, "flat_rate")
        require_int(self.free_shipping_threshold, "free_shipping_threshold")
        if self.flat_rate < 0 or self.free_shipping_threshold < 0:
            raise ValidationError("Shipping rates cannot be negative")


def line_total(item: LineItem) -> int:
    return item.unit_price * item.quantity


def subtotal(items: Iterable[LineItem]) -> int:
    return sum(line_total(item) for item in items)


def item_count(items: Iterable[LineItem]) -> int:
    return sum(item.quantity for item in items)


def shipping_cost(order_subtotal: int, rates: ShippingRates) -> int:
    if rates.free_shipping_threshold > 0 and order_subtotal >= rates.free_shipping_threshold:
        return 0
    return rates.flat_rate


def discount_amount(discount: Discount, order_subtotal: int) -> int:
    """Amount taken off ``order_subtotal``; never more than the subtotal itself."""
    if discount.kind is DiscountKind.PERCENTAGE:
        raw = Decimal(order_subtotal) * Decimal(discount.value) / Decimal(100)
        return int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return min(discount.value, order_subtotal)


def grand_total(order_subtotal: int, shipping: int, discount: int) -> int:
    return max(0, order_subtotal + shipping - discount)


def format_money(cents: int, symbol: str = "$") -> str:
    """Render cents for display, e.g. ``1234 -> "$12.34"``."""
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    return f"{sign}{symbol}{whole:,}.{frac:02d}"
