"""Tests for the read-side use cases: ShowOrder, ListOrders, AnnotateOrder."""

from datetime import datetime, timedelta, timezone

import pytest

from storefront.application.annotate_order import AnnotateOrderHandler
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import LineItem
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import ShippingAddress, TrackingInfo
from tests.fakes import FakeOrderRepository

DAY_ONE = datetime(2026, 5, 1, 8, 0, tzinfo=timezone.utc)


def _order(number: str, customer_id: str, created_at: datetime) -> Order:
    return Order.create(
        order_number=number,
        customer_id=customer_id,
        customer_email=f"{customer_id}@example.com",
        customer_name=customer_id.title(),
        items=[
            LineItem(
                product_id="tee",
                product_name="T-Shirt",
                unit_price=2000,
                quantity=2,
                variants={"size": "L", "color": "Blue"},
            )
        ],
        shipping_address=ShippingAddress(
            name="Alice Doe",
            street="1 Main St",
            apt="Apt 4",
            city="Springfield",
            state="IL",
            zip="62701",
        ),
        subtotal=4000,
        shipping_cost=500,
        discount_code="SAVE10",
        discount_amount=400,
        total=4100,
        now=created_at,
    )


def _setup() -> FakeOrderRepository:
    repo = FakeOrderRepository()
    repo.add(_order("ORD-1", "alice", DAY_ONE))
    repo.add(_order("ORD-2", "bob", DAY_ONE + timedelta(days=1)))
    repo.add(_order("ORD-3", "alice", DAY_ONE + timedelta(days=2)))
    return repo


class TestShowOrder:

    def test_formats_order(self):
        dto = ShowOrderHandler(_setup()).handle("ORD-1")
        assert dto.status == "pending_review"
        assert dto.status_label == "Pending Review"
        assert dto.status_color == "#EAB308"
        assert dto.subtotal == "$40.00"
        assert dto.shipping_cost == "$5.00"
        assert dto.discount_amount == "$4.00"
        assert dto.total == "$41.00"
        assert dto.items[0].variants == "color: Blue / size: L"
        assert dto.items[0].line_total == "$40.00"
        assert dto.shipping_address == "Alice Doe, 1 Main St, Apt 4, Springfield, IL 62701, US"
        assert dto.created_at == "2026-05-01 08:00 UTC"
        assert [h.note for h in dto.history] == ["Order placed"]
        assert dto.payment_due_at is None

    def test_custom_processing_name_and_currency(self):
        repo = _setup()
        order = repo.get_by_number("ORD-1")
        for _ in range(3):
            order.transition(order.next_status, now=DAY_ONE)
        repo.save(order)

        dto = ShowOrderHandler(repo, currency_symbol="£", processing_name="in the workshop").handle(
            "ORD-1"
        )
        assert dto.status == "processing"
        assert dto.status_label == "In the workshop"
        assert dto.total == "£41.00"
        assert dto.payment_due_at == "2026-05-15 08:00 UTC"

    def test_shows_tracking(self):
        repo = _setup()
        order = repo.get_by_number("ORD-1")
        for _ in range(3):
            order.transition(order.next_status, now=DAY_ONE)
        order.transition(OrderStatus.SHIPPED, tracking=TrackingInfo("UPS", "1Z999"), now=DAY_ONE)
        repo.save(order)
        assert ShowOrderHandler(repo).handle("ORD-1").tracking == "UPS 1Z999"

    def test_customer_sees_own_order(self):
        assert ShowOrderHandler(_setup()).handle("ORD-1", customer_id="alice").order_number == "ORD-1"

    def test_customer_cannot_see_others(self):
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(_setup()).handle("ORD-2", customer_id="alice")

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(_setup()).handle("ORD-404")

    def test_lists_available_actions(self):
        dto = ShowOrderHandler(_setup()).handle("ORD-1")
        assert dto.available_actions == ["Send Invoice", "Cancel Order"]

    def test_no_actions_once_cancelled(self):
        repo = _setup()
        order = repo.get_by_number("ORD-1")
        order.cancel(now=DAY_ONE)
        repo.save(order)
        assert ShowOrderHandler(repo).handle("ORD-1").available_actions == []


class TestListOrders:

    def test_all_newest_first(self):
        summaries = ListOrdersHandler(_setup()).handle()
        assert [s.order_number for s in summaries] == ["ORD-3", "ORD-2", "ORD-1"]
        assert summaries[0].total == "$41.00"
        assert summaries[0].item_count == 2
        assert summaries[0].created_at == "2026-05-03"

    def test_by_customer(self):
        summaries = ListOrdersHandler(_setup()).handle(customer_id="alice")
        assert [s.order_number for s in summaries] == ["ORD-3", "ORD-1"]

    def test_by_status(self):
        repo = _setup()
        order = repo.get_by_number("ORD-2")
        order.cancel(now=DAY_ONE)
        repo.save(order)

        summaries = ListOrdersHandler(repo).handle(status=OrderStatus.CANCELLED)
        assert [s.order_number for s in summaries] == ["ORD-2"]
        assert summaries[0].status == "Cancelled"

    def test_by_customer_and_status(self):
        handler = ListOrdersHandler(_setup())
        assert handler.handle(customer_id="alice", status=OrderStatus.CANCELLED) == []

    def test_unknown_customer_has_no_orders(self):
        assert ListOrdersHandler(_setup()).handle(customer_id="zed") == []


class TestAnnotateOrder:

    def test_replaces_notes(self):
        repo = _setup()
        handler = AnnotateOrderHandler(repo)
        handler.handle("ORD-1", "VIP")
        handler.handle("ORD-1", "Ship with care")
        saved = repo.get_by_number("ORD-1")
        assert saved.admin_notes == "Ship with care"
        assert saved.status is OrderStatus.PENDING_REVIEW

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError):
            AnnotateOrderHandler(_setup()).handle("ORD-404", "x")
