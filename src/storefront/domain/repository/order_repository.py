"""Abstract repository for the Order aggregate.

Implementations must enforce uniqueness of ``order_number`` and wrap any
storage failure in ``PersistenceError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a NEW order, assigning its ID.

        Raises PersistenceError if ``order_number`` is already taken.
        """

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist changes to an existing order."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_number(self, order_number: str) -> Order | None:
        """Return an order by its order number, or None if not found."""

    @abstractmethod
    def list_by_customer(self, customer_id: str) -> list[Order]:
        """Return a customer's orders, newest first."""

    @abstractmethod
    def list_by_status(self, status: OrderStatus | None = None) -> list[Order]:
        """Return orders in ``status`` (every order if None), newest first."""
