"""Integration tests for the PlaceOrder (checkout) use case.

Uses in-memory fake repositories — no file I/O.
"""

import random
import re
from datetime import datetime, timedelta, timezone

import pytest

from storefront.application.cart_store import CartStore
from storefront.application.place_order import PlaceOrderHandler, generate_order_number
from storefront.domain.exceptions import (
    DiscountNoLongerValid,
    PersistenceError,
    ValidationError,
)
from storefront.domain.model.cart import LineItem
from storefront.domain.model.discount import Discount, DiscountKind
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import CustomerIdentity, ShippingAddress
from storefront.domain.service.pricing import ShippingRates
from tests.fakes import FakeDiscountRepository, FakeOrderRepository, MemoryCartStorage

NOW = datetime(2026, 5, 4, 9, 30, tzinfo=timezone.utc)
RATES = ShippingRates(flat_rate=500, free_shipping_threshold=5000)
ALICE = CustomerIdentity(id="cust-1", email="alice@example.com", name="Alice Doe")
ADDRESS = ShippingAddress(
    name="Alice Doe", street="1 Main St", city="Springfield", state="IL", zip="62701"
)


def _setup(
    discounts: list[Discount] | None = None,
    seed: int = 7,
) -> tuple[PlaceOrderHandler, FakeOrderRepository, FakeDiscountRepository, CartStore]:
    """Build handler with fake repos and an empty cart."""
    order_repo = FakeOrderRepository()
    discount_repo = FakeDiscountRepository(discounts)
    handler = PlaceOrderHandler(
        order_repo, discount_repo, RATES, order_prefix="ORD", rng=random.Random(seed)
    )
    cart_store = CartStore(MemoryCartStorage(), RATES)
    return handler, order_repo, discount_repo, cart_store


def _fill(cart_store: CartStore, unit_price: int = 1500, qty: int = 3) -> None:
    cart_store.add_item(
        LineItem(
            product_id="mug",
            product_name="Mug",
            unit_price=unit_price,
            quantity=qty,
            variants={"color": "Blue"},
        )
    )


class TestPlaceOrderHappyPath:

    def test_creates_pending_order_with_correct_totals(self):
        handler, order_repo, _, cart_store = _setup()
        _fill(cart_store)  # 4500

        order = handler.handle(cart_store, ADDRESS, ALICE, now=NOW)

        assert order.status is OrderStatus.PENDING_REVIEW
        assert order.subtotal == 4500
        assert order.shipping_cost == 500
        assert order.discount_amount == 0
        assert order.total == 5000
        assert order.customer_email == "alice@example.com"
        assert order.created_at == NOW
        assert order_repo.count() == 1

    def test_free_shipping_above_threshold(self):
        handler, _, _, cart_store = _setup()
        _fill(cart_store, unit_price=5500, qty=1)
        order = handler.handle(cart_store, ADDRESS, ALICE, now=NOW)
        assert order.shipping_cost == 0
        assert order.total == 5500

    def test_order_is_persisted_with_id(self):
        handler, order_repo, _, cart_store = _setup()
        _fill(cart_store)
        order = handler.handle(cart_store, ADDRESS, ALICE, now=NOW)
        saved = order_repo.get_by_number(order.order_number)
        assert saved is not None
        assert saved.id == order.id == 1
        assert saved.items[0].variants["color"] == "Blue"

    def test_history_has_single_entry(self):
        handler, _, _, cart_store = _setup()
        _fill(cart_store)
        order = handler.handle(cart_store, ADDRESS, ALICE, now=NOW)
        assert len(order.status_history) == 1
        assert order.status_history[0].timestamp == NOW

    def test_cart_is_cleared(self):
        handler, _, _, cart_store = _setup()
        _fill(cart_store)
        handler.handle(cart_store, ADDRESS, ALICE, now=NOW)
        assert cart_store.cart.is_empty

    def test_order_number_format(self):
        handler, _, _, cart_store = _setup()
        _fill(cart_store)
        order = handler.handle(cart_store, ADDRESS, ALICE, now=NOW)
        assert re.fullmatch(r"ORD-20260504-\d{4}", order.order_number)

    def test_order_number_is_reproducible_with_seed(self):
        expected = generate_order_number("ORD", NOW, random.Random(7))
        handler, _, _, cart_store = _setup(seed=7)
        _fill(cart_store)
        assert handler.handle(cart_store, ADDRESS, ALICE, now=NOW).order_number == expected


class TestPlaceOrderWithDiscount:

    def test_discount_is_recomputed_not_trusted(self):
        save10 = Discount(code="SAVE10", kind=DiscountKind.PERCENTAGE, value=10)
        handler, _, _, cart_store = _setup([save10])
        _fill(cart_store, unit_price=10000, qty=1)
        cart_store.apply_discount("SAVE10", 1)  # stale cached amount

        order = handler.handle(cart_store, ADDRESS, ALICE, now=NOW)

        assert order.discount_code == "SAVE10"
        assert order.discount_amount == 1000
        assert order.total == 9000

    def test_usage_is_incremented_once(self):
        save10 = Discount(code="SAVE10", kind=DiscountKind.PERCENTAGE, value=10, max_uses=5)
        handler, _, discount_repo, cart_store = _setup([save10])
        _fill(cart_store)
        cart_store.apply_discount("SAVE10", 450)
        handler.handle(cart_store, ADDRESS, ALICE, now=NOW)
        assert discount_repo.get_by_code("SAVE10").used_count == 1

    def test_no_discount_no_increment(self):
        save10 = Discount(code="SAVE10", kind=DiscountKind.PERCENTAGE, value=10)
        handler, _, discount_repo, cart_store = _setup([save10])
        _fill(cart_store)
        handler.handle(cart_store, ADDRESS, ALICE, now=NOW)
        assert discount_repo.get_by_code("SAVE10").used_count == 0

    def test_failed_increment_still_places_order(self):
        save10 = Discount(code="SAVE10", kind=DiscountKind.PERCENTAGE, value=10)
        handler, order_repo, discount_repo, cart_store = _setup([save10])
        discount_repo.fail_increment = True
        _fill(cart_store)
        cart_store.apply_discount("SAVE10", 450)

        order = handler.handle(cart_store, ADDRESS, ALICE, now=NOW)

        assert order_repo.get_by_number(order.order_number) is not None
        assert cart_store.cart.is_empty
        assert discount_repo.get_by_code("SAVE10").used_count == 0

    def test_expired_since_applied_rejects_checkout(self):
        flash = Discount(
            code="FLASH",
            kind=DiscountKind.FIXED,
            value=500,
            expires_at=NOW - timedelta(minutes=1),
        )
        handler, order_repo, discount_repo, cart_store = _setup([flash])
        _fill(cart_store)
        cart_store.apply_discount("FLASH", 500)
        before = cart_store.cart

        with pytest.raises(DiscountNoLongerValid, match="FLASH") as exc_info:
            handler.handle(cart_store, ADDRESS, ALICE, now=NOW)

        assert exc_info.value.fields == ["discount_code"]
        assert exc_info.value.reason == "expired"
        assert order_repo.count() == 0
        assert cart_store.cart is before
        assert discount_repo.get_by_code("FLASH").used_count == 0

    def test_exhausted_since_applied_rejects_checkout(self):
        capped = Discount(
            code="ONCE", kind=DiscountKind.FIXED, value=500, max_uses=1, used_count=1
        )
        handler, order_repo, _, cart_store = _setup([capped])
        _fill(cart_store)
        cart_store.apply_discount("ONCE", 500)
        with pytest.raises(DiscountNoLongerValid, match="usage limit"):
            handler.handle(cart_store, ADDRESS, ALICE, now=NOW)
        assert order_repo.count() == 0

    def test_deleted_code_rejects_checkout(self):
        handler, _, _, cart_store = _setup([])
        _fill(cart_store)
        cart_store.apply_discount("GONE", 500)
        with pytest.raises(DiscountNoLongerValid, match="not found"):
            handler.handle(cart_store, ADDRESS, ALICE, now=NOW)


class TestPlaceOrderValidation:

    def test_empty_cart_rejected(self):
        handler, order_repo, _, cart_store = _setup()
        with pytest.raises(ValidationError, match="empty cart"):
            handler.handle(cart_store, ADDRESS, ALICE, now=NOW)
        assert order_repo.count() == 0

    def test_missing_customer_rejected(self):
        handler, order_repo, _, cart_store = _setup()
        _fill(cart_store)
        with pytest.raises(ValidationError, match="signed in"):
            handler.handle(cart_store, ADDRESS, None, now=NOW)
        assert order_repo.count() == 0
        assert not cart_store.cart.is_empty

    def test_bad_address_reports_fields(self):
        handler, order_repo, _, cart_store = _setup()
        _fill(cart_store)
        bad = ShippingAddress(name="", street="1 Main St", city="X", state="IL", zip="123")
        with pytest.raises(ValidationError) as exc_info:
            handler.handle(cart_store, bad, ALICE, now=NOW)
        assert exc_info.value.fields == ["name", "zip"]
        assert order_repo.count() == 0
        assert len(cart_store.items) == 1


class TestPlaceOrderPersistenceFailure:

    def test_storage_failure_keeps_cart_and_discount(self):
        save10 = Discount(code="SAVE10", kind=DiscountKind.PERCENTAGE, value=10)
        handler, order_repo, discount_repo, cart_store = _setup([save10])
        _fill(cart_store)
        cart_store.apply_discount("SAVE10", 450)
        before = cart_store.cart
        order_repo.fail_next_add = True

        with pytest.raises(PersistenceError):
            handler.handle(cart_store, ADDRESS, ALICE, now=NOW)

        assert cart_store.cart is before
        assert discount_repo.get_by_code("SAVE10").used_count == 0

    def test_order_number_collision_surfaces(self):
        handler, order_repo, _, cart_store = _setup(seed=3)
        _fill(cart_store)
        handler.handle(cart_store, ADDRESS, ALICE, now=NOW)

        again = PlaceOrderHandler(
            order_repo, FakeDiscountRepository(), RATES, rng=random.Random(3)
        )
        _fill(cart_store)
        with pytest.raises(PersistenceError, match="already exists"):
            again.handle(cart_store, ADDRESS, ALICE, now=NOW)
        assert order_repo.count() == 1
        assert not cart_store.cart.is_empty

    def test_cart_write_failure_after_order_is_not_reported(self):
        class FlakyStorage(MemoryCartStorage):
            fail_saves = False

            def save(self, raw):
                if self.fail_saves:
                    raise PersistenceError("disk full")
                super().save(raw)

        handler, order_repo, _, _ = _setup()
        storage = FlakyStorage()
        cart_store = CartStore(storage, RATES)
        _fill(cart_store)
        storage.fail_saves = True

        order = handler.handle(cart_store, ADDRESS, ALICE, now=NOW)

        assert order_repo.get_by_number(order.order_number) is not None
        assert order_repo.count() == 1
        # The stale cart stays, but the order is placed exactly once
        assert len(cart_store.items) == 1
