"""Application service: Create Discount use case (operator)."""

from __future__ import annotations

from datetime import datetime

import structlog

from storefront.domain.model.discount import Discount, DiscountKind
from storefront.domain.repository.discount_repository import DiscountRepository

logger = structlog.get_logger(__name__)


class CreateDiscountHandler:

    def __init__(self, discount_repo: DiscountRepository) -> None:
        self._discount_repo = discount_repo

    def handle(
        self,
        code: str,
        kind: DiscountKind,
        value: int,
        min_order_value: int = 0,
        max_uses: int = 0,
        expires_at: datetime | None = None,
        is_active: bool = True,
    ) -> Discount:
        """Create a new code. The Discount validates its own fields."""
        discount = Discount(
            code=code,
            kind=kind,
            value=value,
            min_order_value=min_order_value,
            max_uses=max_uses,
            expires_at=expires_at,
            is_active=is_active,
        )
        self._discount_repo.add(discount)
        logger.info("discount_created", code=discount.code, kind=kind.value, value=value)
        return discount
