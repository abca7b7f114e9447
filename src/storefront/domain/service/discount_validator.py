"""Domain service: Discount validation.

Decides whether a promo code applies to an order subtotal. A code that
does not apply is an ordinary outcome, so ``validate`` returns a
``DiscountValidation`` instead of raising. Only a failure of the
persistence collaborator itself propagates.

Validation is read-only: redeeming a code (``used_count += 1``) is a
separate step taken after an order is durably created.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

import structlog

from storefront.domain.model.discount import Discount, normalize_code
from storefront.domain.repository.discount_repository import DiscountRepository
from storefront.domain.service import pricing

logger = structlog.get_logger(__name__)


class RejectionReason(Enum):
    NOT_FOUND = "not found"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    EXHAUSTED = "usage limit reached"
    BELOW_MINIMUM = "order below minimum value"


@dataclass(frozen=True)
class DiscountValidation:
    code: str
    discount: Discount | None = None
    reason: RejectionReason | None = None
    amount: int = 0

    @property
    def is_valid(self) -> bool:
        return self.reason is None and self.discount is not None


class DiscountValidator:

    def __init__(self, discount_repo: DiscountRepository) -> None:
        self._discount_repo = discount_repo

    def validate(
        self,
        code: str,
        order_subtotal: int,
        now: datetime | None = None,
    ) -> DiscountValidation:
        """Check ``code`` against ``order_subtotal``.

        Rejects when the code is unknown, inactive, expired, used up, or the
        subtotal is below the code's minimum. On success ``amount`` holds the
        discount computed by the pricing service.
        """
        code = normalize_code(code)
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        discount = self._discount_repo.get_by_code(code) if code else None
        reason = self._rejection_reason(discount, order_subtotal, now)

        if reason is not None:
            logger.info(
                "discount_rejected",
                code=code,
                reason=reason.value,
                order_subtotal=order_subtotal,
            )
            return DiscountValidation(code=code, discount=discount, reason=reason)

        return DiscountValidation(
            code=code,
            discount=discount,
            amount=pricing.discount_amount(discount, order_subtotal),
        )

    @staticmethod
    def _rejection_reason(
        discount: Discount | None, order_subtotal: int, now: datetime
    ) -> RejectionReason | None:
        if discount is None:
            return RejectionReason.NOT_FOUND
        if not discount.is_active:
            return RejectionReason.INACTIVE
        if discount.is_expired(now):
            return RejectionReason.EXPIRED
        if discount.is_exhausted:
            return RejectionReason.EXHAUSTED
        if not discount.meets_minimum(order_subtotal):
            return RejectionReason.BELOW_MINIMUM
        return None
