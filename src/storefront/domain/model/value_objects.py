"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
Monetary amounts are plain ``int`` counts of minor units (cents) and are
not wrapped; the pricing service owns all arithmetic on them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError

US_ZIP_CODE = re.compile(r"^\d{5}(-\d{4})?$")
PHONE = re.compile(r"^\+?[0-9 ()\-.]{7,20}$")


def require_int(value: object, name: str) -> None:
    """Money and counts are whole numbers; reject floats, Decimals and bools."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}", fields=[name])


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


# Field name -> maximum length
_ADDRESS_LIMITS = {
    "name": 100,
    "street": 200,
    "apt": 50,
    "city": 100,
    "phone": 20,
}
_ADDRESS_REQUIRED = ("name", "street", "city", "state", "zip", "country")


@dataclass(frozen=True)
class ShippingAddress:
    """Where an order is shipped.

    Only the US shipping region is supported, so ``zip`` must be a
    five-digit ZIP or ZIP+4. Once embedded in an Order the address is a
    snapshot and never changes.
    """

    name: str
    street: str
    city: str
    state: str
    zip: str
    country: str = "US"
    apt: str = ""
    phone: str = ""

    def invalid_fields(self) -> list[str]:
        """Return the names of every field that fails validation, in form order."""
        invalid: list[str] = []
        for name in ("name", "street", "apt", "city", "state", "zip", "country", "phone"):
            value = (getattr(self, name) or "").strip()
            if name in _ADDRESS_REQUIRED and not value:
                invalid.append(name)
            elif name in _ADDRESS_LIMITS and len(value) > _ADDRESS_LIMITS[name]:
                invalid.append(name)
            elif name == "zip" and not US_ZIP_CODE.match(value):
                invalid.append(name)
            elif name == "phone" and value and not PHONE.match(value):
                invalid.append(name)
        return invalid

    def validate(self) -> None:
        """Raise ValidationError listing every offending field."""
        invalid = self.invalid_fields()
        if invalid:
            raise ValidationError(
                f"Invalid shipping address: {', '.join(invalid)}", fields=invalid
            )


@dataclass(frozen=True)
class TrackingInfo:
    """Carrier tracking reference, attached when an order ships."""

    carrier: str
    number: str
    url: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.carrier.strip()) and bool(self.number.strip())


@dataclass(frozen=True)
class CustomerIdentity:
    """The authenticated customer, as supplied by the identity collaborator."""

    id: str
    email: str
    name: str
