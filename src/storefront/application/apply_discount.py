"""Application service: Apply Discount use case (cart page).

Validates a code against the cart's current subtotal and, if it applies,
caches it on the cart. The cached amount is only a preview: checkout
validates the code again.
"""

from __future__ import annotations

from datetime import datetime

from storefront.application.cart_store import CartStore
from storefront.domain.service.discount_validator import DiscountValidation, DiscountValidator


class ApplyDiscountHandler:

    def __init__(self, validator: DiscountValidator, cart_store: CartStore) -> None:
        self._validator = validator
        self._cart_store = cart_store

    def handle(self, code: str, now: datetime | None = None) -> DiscountValidation:
        verdict = self._validator.validate(code, self._cart_store.subtotal, now=now)
        if verdict.is_valid:
            self._cart_store.apply_discount(verdict.code, verdict.amount)
        return verdict
