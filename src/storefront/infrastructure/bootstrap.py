"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storefront.application.cart_store import CartStore
from storefront.infrastructure.persistence.json_cart_storage import JsonCartStorage
from storefront.infrastructure.persistence.json_discount_repository import (
    JsonDiscountRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.settings import load_settings


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(load_settings().data_dir / "orders.json")


def discount_repository() -> JsonDiscountRepository:
    return JsonDiscountRepository(load_settings().data_dir / "discounts.json")


def cart_store() -> CartStore:
    settings = load_settings()
    return CartStore(
        storage=JsonCartStorage(settings.data_dir / "cart.json"),
        rates=settings.shipping_rates,
    )
