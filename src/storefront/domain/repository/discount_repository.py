"""Abstract repository for the Discount aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.discount import Discount


class DiscountRepository(ABC):

    @abstractmethod
    def get_by_code(self, code: str) -> Discount | None:
        """Return the discount for ``code`` (case-insensitive), or None."""

    @abstractmethod
    def add(self, discount: Discount) -> None:
        """Persist a NEW discount. Raises PersistenceError if the code exists."""

    @abstractmethod
    def increment_usage(self, code: str) -> None:
        """Add one to ``used_count``.

        This is a plain read-then-write with no guard against ``max_uses``;
        two concurrent checkouts can both increment past the cap.
        Raises EntityNotFoundError if the code does not exist.
        """

    @abstractmethod
    def list_all(self) -> list[Discount]:
        """Return every discount."""
