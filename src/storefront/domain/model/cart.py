"""Cart and LineItem: the shopper's in-progress selection.

Both are immutable: the Cart Store replaces the whole Cart on every
mutation, so a snapshot handed to a subscriber can never change under it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Quantity, require_int

ItemKey = tuple[str, frozenset]


def item_key(product_id: str, variants: Mapping[str, str] | None = None) -> ItemKey:
    """Identity of a cart line: product plus its exact variant choices.

    Key order of ``variants`` does not matter.
    """
    return product_id, frozenset((variants or {}).items())


@dataclass(frozen=True)
class LineItem:
    """One product/variant selection with its unit price snapshot."""

    product_id: str
    product_name: str
    unit_price: int
    quantity: int = 1
    variants: Mapping[str, str] = field(default_factory=dict)
    sku: str = ""

    def __post_init__(self) -> None:
        if not self.product_id:
            raise ValidationError("Line item requires a product ID")
        if isinstance(self.unit_price, bool) or not isinstance(self.unit_price, int):
            raise ValidationError(
                f"Unit price must be an integer number of cents, got {self.unit_price!r}"
            )
        if self.unit_price < 0:
            raise ValidationError("Unit price cannot be negative")
        Quantity(self.quantity)
        # Copy so the caller's dict cannot leak mutations into the snapshot
        object.__setattr__(
            self, "variants", MappingProxyType({str(k): str(v) for k, v in self.variants.items()})
        )

    @property
    def key(self) -> ItemKey:
        return item_key(self.product_id, self.variants)

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

    @property
    def variant_label(self) -> str:
        """e.g. ``"color: Blue / size: L"``; empty when there are no variants."""
        return " / ".join(f"{k}: {v}" for k, v in sorted(self.variants.items()))

    def with_quantity(self, quantity: int) -> LineItem:
        return replace(self, quantity=quantity, variants=dict(self.variants))

    def __copy__(self) -> LineItem:
        return self

    def __deepcopy__(self, memo: dict) -> LineItem:
        # Immutable; a mappingproxy cannot be deep-copied anyway
        return self


@dataclass(frozen=True)
class Cart:
    """Snapshot of a cart: ordered line items plus the cached discount."""

    items: tuple[LineItem, ...] = ()
    discount_code: str = ""
    discount_amount: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        require_int(self.discount_amount, "discount_amount")
        if self.discount_amount < 0:
            raise ValidationError("Discount amount cannot be negative")

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: str, variants: Mapping[str, str] | None = None) -> LineItem | None:
        wanted = item_key(product_id, variants)
        for item in self.items:
            if item.key == wanted:
                return item
        return None
