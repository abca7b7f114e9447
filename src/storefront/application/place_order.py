"""Application service: Place Order use case (checkout).

Turns the shopper's cart into a persisted Order in ``pending_review``.
Steps 1–5 either all succeed or leave nothing behind: the cart is only
cleared, and the discount only redeemed, after the order is durably
created.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone

import structlog

from storefront.application.cart_store import CartStore
from storefront.domain.exceptions import (
    DiscountNoLongerValid,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import CustomerIdentity, ShippingAddress
from storefront.domain.repository.discount_repository import DiscountRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service import pricing
from storefront.domain.service.discount_validator import DiscountValidator
from storefront.domain.service.pricing import ShippingRates

logger = structlog.get_logger(__name__)


def generate_order_number(
    prefix: str,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> str:
    """``<PREFIX>-<YYYYMMDD>-<NNNN>``. Uniqueness is left to the repository."""
    now = now or datetime.now(timezone.utc)
    suffix = (rng or random).randrange(10000)
    return f"{prefix}-{now:%Y%m%d}-{suffix:04d}"


class PlaceOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        discount_repo: DiscountRepository,
        rates: ShippingRates | None = None,
        order_prefix: str = "ORD",
        rng: random.Random | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._discount_repo = discount_repo
        self._validator = DiscountValidator(discount_repo)
        self._rates = rates or ShippingRates()
        self._order_prefix = order_prefix
        self._rng = rng

    def handle(
        self,
        cart_store: CartStore,
        address: ShippingAddress,
        customer: CustomerIdentity | None,
        now: datetime | None = None,
    ) -> Order:
        """Place an order for everything in ``cart_store``.

        Steps:
        1. Reject an empty cart.
        2. Validate the customer and shipping address.
        3. Re-validate the cart's discount code against the current subtotal.
        4. Price the order.
        5. Create the Order record.
        6. Redeem the discount and clear the cart, both best-effort.
        """
        now = now or datetime.now(timezone.utc)
        cart = cart_store.cart

        if cart.is_empty:
            raise ValidationError("Cannot check out an empty cart", fields=["items"])

        if customer is None or not customer.id:
            raise ValidationError("You must be signed in to check out", fields=["customer"])
        address.validate()

        subtotal = pricing.subtotal(cart.items)
        discount_amount = 0
        if cart.discount_code:
            # Never trust the amount cached in the cart
            verdict = self._validator.validate(cart.discount_code, subtotal, now=now)
            if not verdict.is_valid:
                raise DiscountNoLongerValid(verdict.code, verdict.reason.value)
            discount_amount = verdict.amount

        shipping = pricing.shipping_cost(subtotal, self._rates)
        total = pricing.grand_total(subtotal, shipping, discount_amount)

        order = Order.create(
            order_number=generate_order_number(self._order_prefix, now, self._rng),
            customer_id=customer.id,
            customer_email=customer.email,
            customer_name=customer.name,
            items=cart.items,
            shipping_address=address,
            subtotal=subtotal,
            shipping_cost=shipping,
            discount_code=cart.discount_code,
            discount_amount=discount_amount,
            total=total,
            now=now,
        )
        self._order_repo.add(order)

        logger.info(
            "order_placed",
            order_number=order.order_number,
            customer_id=customer.id,
            total=total,
            discount_code=order.discount_code or None,
        )

        if order.discount_code:
            self._redeem(order)
        self._clear(cart_store, order)
        return order

    def _redeem(self, order: Order) -> None:
        # Unguarded read-then-write; concurrent checkouts may overshoot max_uses
        try:
            self._discount_repo.increment_usage(order.discount_code)
        except (PersistenceError, EntityNotFoundError) as exc:
            logger.warning(
                "discount_usage_not_recorded",
                order_number=order.order_number,
                code=order.discount_code,
                error=str(exc),
            )

    @staticmethod
    def _clear(cart_store: CartStore, order: Order) -> None:
        # The order is already placed at this point
        try:
            cart_store.clear()
        except PersistenceError as exc:
            logger.warning(
                "cart_not_cleared",
                order_number=order.order_number,
                error=str(exc),
            )
