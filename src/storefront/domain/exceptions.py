"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

A discount code that does not apply is *not* an exception: the validator
returns a ``DiscountValidation`` result that callers must inspect.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated.

    ``fields`` names the offending input fields when the error comes from
    validating user input (e.g. a shipping address).
    """

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields: list[str] = list(fields or [])


class DiscountNoLongerValid(ValidationError):
    """A discount applied earlier in the session failed re-validation at checkout."""

    def __init__(self, code: str, reason: str) -> None:
        super().__init__(
            f"Discount code '{code}' can no longer be applied ({reason})",
            fields=["discount_code"],
        )
        self.code = code
        self.reason = reason


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class OrderStageConflict(DomainException):
    """An order status transition is not allowed from the current status."""


class PersistenceError(DomainException):
    """The persistence collaborator failed (I/O, decode, or uniqueness violation)."""
