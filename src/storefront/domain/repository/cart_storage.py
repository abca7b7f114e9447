"""Abstract durable storage for the shopper's cart.

The Cart Store hands this a plain ``dict`` (see ``serialize_cart``), so an
implementation only needs a key-value slot: a file, a browser-style local
storage, a cache entry. Writes are whole-snapshot and last write wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CartStorage(ABC):

    @abstractmethod
    def load(self) -> dict | None:
        """Return the last saved snapshot, or None if nothing was saved."""

    @abstractmethod
    def save(self, raw: dict) -> None:
        """Overwrite the stored snapshot."""
