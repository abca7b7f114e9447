"""Identity collaborator implementations."""

from __future__ import annotations

from storefront.domain.model.value_objects import CustomerIdentity
from storefront.domain.repository.identity_provider import IdentityProvider


class StaticIdentityProvider(IdentityProvider):
    """Identity handed in by the caller (e.g. CLI options)."""

    def __init__(self, customer: CustomerIdentity | None) -> None:
        self._customer = customer

    def current_customer(self) -> CustomerIdentity | None:
        return self._customer
