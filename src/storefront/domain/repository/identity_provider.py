"""Abstract identity collaborator: who is checking out."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.value_objects import CustomerIdentity


class IdentityProvider(ABC):

    @abstractmethod
    def current_customer(self) -> CustomerIdentity | None:
        """Return the authenticated customer, or None if nobody is signed in."""
