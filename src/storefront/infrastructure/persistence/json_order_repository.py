"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from storefront.domain.exceptions import (
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)
from storefront.domain.model.cart import LineItem
from storefront.domain.model.order import Order, OrderStatus, StatusHistoryEntry
from storefront.domain.model.value_objects import ShippingAddress, TrackingInfo
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=[])

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> None:
        orders = self._records()
        if any(raw["order_number"] == order.order_number for raw in orders):
            raise PersistenceError(f"Order number {order.order_number} already exists")

        raw = self._to_raw(order)
        raw["id"] = max((r["id"] for r in orders), default=0) + 1
        orders.append(raw)
        self._file.write(orders)
        order.id = raw["id"]

    def save(self, order: Order) -> None:
        orders = self._records()
        for i, raw in enumerate(orders):
            if raw["id"] == order.id:
                orders[i] = self._to_raw(order)
                break
        else:
            raise EntityNotFoundError(f"Order {order.order_number} has not been added")
        self._file.write(orders)

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._records():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_number(self, order_number: str) -> Order | None:
        for raw in self._records():
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def list_by_customer(self, customer_id: str) -> list[Order]:
        return self._newest_first(
            raw for raw in self._records() if raw.get("customer_id") == customer_id
        )

    def list_by_status(self, status: OrderStatus | None = None) -> list[Order]:
        return self._newest_first(
            raw
            for raw in self._records()
            if status is None or raw.get("status") == status.value
        )

    # --- Serialization --------------------------------------------------------

    def _records(self) -> list[dict]:
        records = self._file.read()
        if not isinstance(records, list) or not all(
            isinstance(r, dict) and "id" in r and "order_number" in r for r in records
        ):
            raise PersistenceError(f"Malformed order file {self._file.path}")
        return records

    def _newest_first(self, records) -> list[Order]:
        orders = [self._to_domain(raw) for raw in records]
        return sorted(orders, key=lambda o: (o.created_at, o.id or 0), reverse=True)

    @staticmethod
    def _to_raw(order: Order) -> dict:
        address = order.shipping_address
        return {
            "id": order.id,
            "order_number": order.order_number,
            "customer_id": order.customer_id,
            "customer_email": order.customer_email,
            "customer_name": order.customer_name,
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "sku": item.sku,
                    "variants": dict(item.variants),
                    "unit_price": item.unit_price,
                    "quantity": item.quantity,
                    "total_price": item.line_total,
                }
                for item in order.items
            ],
            "shipping_address": {
                "name": address.name,
                "street": address.street,
                "apt": address.apt,
                "city": address.city,
                "state": address.state,
                "zip": address.zip,
                "country": address.country,
                "phone": address.phone,
            },
            "subtotal": order.subtotal,
            "shipping_cost": order.shipping_cost,
            "discount_code": order.discount_code,
            "discount_amount": order.discount_amount,
            "total": order.total,
            "status": order.status.value,
            "status_history": [
                {
                    "status": entry.status.value,
                    "timestamp": entry.timestamp.isoformat(),
                    "note": entry.note,
                }
                for entry in order.status_history
            ],
            "tracking": (
                {
                    "carrier": order.tracking.carrier,
                    "number": order.tracking.number,
                    "url": order.tracking.url,
                }
                if order.tracking
                else None
            ),
            "invoice_sent_at": _iso(order.invoice_sent_at),
            "payment_due_at": _iso(order.payment_due_at),
            "cancelled_at": _iso(order.cancelled_at),
            "cancellation_reason": order.cancellation_reason,
            "admin_notes": order.admin_notes,
            "created_at": order.created_at.isoformat(),
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> Order:
        try:
            return cls._build(raw)
        except (KeyError, TypeError, ValueError, ValidationError) as exc:
            raise PersistenceError(f"Malformed order record: {exc!r}") from exc

    @staticmethod
    def _build(raw: dict) -> Order:
        items = tuple(
            LineItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                sku=i.get("sku", ""),
                variants=i.get("variants") or {},
                unit_price=i["unit_price"],
                quantity=i["quantity"],
            )
            for i in raw["items"]
        )
        tracking = raw.get("tracking")
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            customer_id=raw["customer_id"],
            customer_email=raw.get("customer_email", ""),
            customer_name=raw.get("customer_name", ""),
            items=items,
            shipping_address=ShippingAddress(**raw["shipping_address"]),
            subtotal=raw["subtotal"],
            shipping_cost=raw["shipping_cost"],
            discount_code=raw.get("discount_code", ""),
            discount_amount=raw.get("discount_amount", 0),
            total=raw["total"],
            status=OrderStatus(raw["status"]),
            status_history=[
                StatusHistoryEntry(
                    status=OrderStatus(h["status"]),
                    timestamp=datetime.fromisoformat(h["timestamp"]),
                    note=h.get("note", ""),
                )
                for h in raw.get("status_history", [])
            ],
            tracking=TrackingInfo(**tracking) if tracking else None,
            invoice_sent_at=_parse(raw.get("invoice_sent_at")),
            payment_due_at=_parse(raw.get("payment_due_at")),
            cancelled_at=_parse(raw.get("cancelled_at")),
            cancellation_reason=raw.get("cancellation_reason", ""),
            admin_notes=raw.get("admin_notes", ""),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
