"""Cart Store: the shopper's in-progress cart for one client session.

The store owns a single immutable ``Cart`` value. Every mutation builds a
new Cart, swaps it in, mirrors it to durable storage and then calls every
subscriber with the new snapshot, all before returning. There is no
cross-session merge: whichever session writes storage last wins.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime, timezone

import structlog

from storefront.domain.exceptions import PersistenceError, ValidationError
from storefront.domain.model.cart import Cart, LineItem, item_key
from storefront.domain.model.discount import normalize_code
from storefront.domain.model.value_objects import require_int
from storefront.domain.repository.cart_storage import CartStorage
from storefront.domain.service import pricing
from storefront.domain.service.pricing import ShippingRates

logger = structlog.get_logger(__name__)

CartListener = Callable[[Cart], None]

SNAPSHOT_VERSION = 1


# --- Storage boundary ---------------------------------------------------------


def serialize_cart(cart: Cart) -> dict:
    return {
        "version": SNAPSHOT_VERSION,
        "saved_at": datetime.now(timezone.utc).isoformat(),
        "items": [
            {
                "product_id": item.product_id,
                "product_name": item.product_name,
                "sku": item.sku,
                "variants": dict(item.variants),
                "unit_price": item.unit_price,
                "quantity": item.quantity,
            }
            for item in cart.items
        ],
        "discount_code": cart.discount_code,
        "discount_amount": cart.discount_amount,
    }


def deserialize_cart(raw: dict) -> Cart:
    """Rebuild a Cart from ``serialize_cart`` output.

    Raises ValidationError (or KeyError/TypeError) on malformed input.
    """
    items = [
        LineItem(
            product_id=i["product_id"],
            product_name=i["product_name"],
            sku=i.get("sku", ""),
            variants=i.get("variants") or {},
            unit_price=i["unit_price"],
            quantity=i["quantity"],
        )
        for i in raw.get("items", [])
    ]
    return Cart(
        items=tuple(items),
        discount_code=raw.get("discount_code") or "",
        discount_amount=raw.get("discount_amount") or 0,
    )


# --- Store --------------------------------------------------------------------


class CartStore:

    def __init__(
        self,
        storage: CartStorage | None = None,
        rates: ShippingRates | None = None,
    ) -> None:
        self._storage = storage
        self._rates = rates or ShippingRates()
        self._listeners: list[CartListener] = []
        self._cart = self._restore()

    # --- Read views -----------------------------------------------------------

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def items(self) -> tuple[LineItem, ...]:
        return self._cart.items

    @property
    def subtotal(self) -> int:
        return pricing.subtotal(self._cart.items)

    @property
    def item_count(self) -> int:
        return pricing.item_count(self._cart.items)

    @property
    def shipping(self) -> int:
        if self._cart.is_empty:
            return 0
        return pricing.shipping_cost(self.subtotal, self._rates)

    @property
    def total(self) -> int:
        return pricing.grand_total(self.subtotal, self.shipping, self._cart.discount_amount)

    # --- Subscriptions --------------------------------------------------------

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Mutations ------------------------------------------------------------

    def add_item(self, item: LineItem) -> None:
        """Add ``item``; an identical product/variant line has its quantity summed."""
        items = list(self._cart.items)
        for i, existing in enumerate(items):
            if existing.key == item.key:
                items[i] = existing.with_quantity(existing.quantity + item.quantity)
                break
        else:
            items.append(item)
        self._commit(items=items)

    def remove_item(self, product_id: str, variants: Mapping[str, str] | None = None) -> None:
        key = item_key(product_id, variants)
        self._commit(items=[item for item in self._cart.items if item.key != key])

    def set_quantity(
        self,
        product_id: str,
        variants: Mapping[str, str] | None,
        quantity: int,
    ) -> None:
        """Set a line's quantity; ``quantity <= 0`` removes the line."""
        if quantity <= 0:
            self.remove_item(product_id, variants)
            return
        key = item_key(product_id, variants)
        self._commit(
            items=[
                item.with_quantity(quantity) if item.key == key else item
                for item in self._cart.items
            ]
        )

    def clear(self) -> None:
        self._commit(items=[], discount_code="", discount_amount=0)

    def apply_discount(self, code: str, amount: int) -> None:
        """Cache a discount validated elsewhere. Checkout re-validates it."""
        require_int(amount, "discount_amount")
        if amount < 0:
            raise ValidationError("Discount amount cannot be negative", fields=["discount_amount"])
        self._commit(discount_code=normalize_code(code), discount_amount=amount)

    def remove_discount(self) -> None:
        self._commit(discount_code="", discount_amount=0)

    # --- Internal helpers -----------------------------------------------------

    def _commit(
        self,
        items: list[LineItem] | tuple[LineItem, ...] | None = None,
        discount_code: str | None = None,
        discount_amount: int | None = None,
    ) -> None:
        items = tuple(self._cart.items if items is None else items)
        code = self._cart.discount_code if discount_code is None else discount_code
        amount = self._cart.discount_amount if discount_amount is None else discount_amount

        cart = Cart(
            items=items, discount_code=code, discount_amount=self._capped(items, amount)
        )
        if self._storage is not None:
            self._storage.save(serialize_cart(cart))
        self._cart = cart
        for listener in list(self._listeners):
            listener(self._cart)

    def _restore(self) -> Cart:
        if self._storage is None:
            return Cart()
        try:
            raw = self._storage.load()
            cart = Cart() if raw is None else deserialize_cart(raw)
        except (PersistenceError, ValidationError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("cart_snapshot_discarded", error=str(exc))
            return Cart()
        return replace(
            cart, discount_amount=self._capped(cart.items, cart.discount_amount)
        )

    def _capped(self, items: tuple[LineItem, ...], amount: int) -> int:
        """Keep the cached discount within what the cart is worth."""
        cart_subtotal = pricing.subtotal(items)
        shipping = pricing.shipping_cost(cart_subtotal, self._rates) if items else 0
        return min(amount, cart_subtotal + shipping)
