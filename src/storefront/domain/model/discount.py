"""Discount aggregate: a promotional code created by the store operator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import require_int


class DiscountKind(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_code(code: str) -> str:
    """Codes are compared case-insensitively and stored upper-case."""
    return code.strip().upper()


@dataclass
class Discount:
    """A promo code.

    ``value`` is a percentage in ``[0, 100]`` for PERCENTAGE discounts and
    an amount in cents for FIXED ones. ``max_uses == 0`` means unlimited;
    ``min_order_value == 0`` means no minimum.
    """

    code: str
    kind: DiscountKind
    value: int
    min_order_value: int = 0
    max_uses: int = 0
    used_count: int = 0
    expires_at: datetime | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        self.code = normalize_code(self.code)
        if not self.code:
            raise ValidationError("Discount code is required", fields=["code"])
        for name in ("value", "min_order_value", "max_uses", "used_count"):
            require_int(getattr(self, name), name)
        if self.expires_at is not None and self.expires_at.tzinfo is None:
            # Naive expiry times are taken to be UTC
            self.expires_at = self.expires_at.replace(tzinfo=timezone.utc)
        if self.value < 0:
            raise ValidationError("Discount value cannot be negative", fields=["value"])
        if self.kind is DiscountKind.PERCENTAGE and self.value > 100:
            raise ValidationError(
                f"Percentage discount must be between 0 and 100, got {self.value}",
                fields=["value"],
            )
        for name in ("min_order_value", "max_uses", "used_count"):
            if getattr(self, name) < 0:
                raise ValidationError(f"{name} cannot be negative", fields=[name])

    # --- Queries --------------------------------------------------------------

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    @property
    def is_exhausted(self) -> bool:
        return self.max_uses > 0 and self.used_count >= self.max_uses

    def meets_minimum(self, order_subtotal: int) -> bool:
        return self.min_order_value <= 0 or order_subtotal >= self.min_order_value

    # --- Mutations ------------------------------------------------------------

    def record_use(self) -> None:
        """Count one redemption. No cap check: see DiscountRepository.increment_usage."""
        self.used_count += 1
