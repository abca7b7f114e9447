"""JSON-file-backed implementation of DiscountRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from storefront.domain.exceptions import (
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)
from storefront.domain.model.discount import Discount, DiscountKind, normalize_code
from storefront.domain.repository.discount_repository import DiscountRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonDiscountRepository(DiscountRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=[])

    # --- DiscountRepository interface -----------------------------------------

    def get_by_code(self, code: str) -> Discount | None:
        code = normalize_code(code)
        for raw in self._file.read():
            if raw["code"] == code:
                return self._to_domain(raw)
        return None

    def add(self, discount: Discount) -> None:
        records = self._file.read()
        if any(raw["code"] == discount.code for raw in records):
            raise PersistenceError(f"Discount code {discount.code} already exists")
        records.append(self._to_raw(discount))
        self._file.write(records)

    def increment_usage(self, code: str) -> None:
        code = normalize_code(code)
        records = self._file.read()
        for i, raw in enumerate(records):
            if raw["code"] == code:
                discount = self._to_domain(raw)
                discount.record_use()
                records[i] = self._to_raw(discount)
                break
        else:
            raise EntityNotFoundError(f"Discount code {code} not found")
        self._file.write(records)

    def list_all(self) -> list[Discount]:
        return [self._to_domain(raw) for raw in self._file.read()]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(discount: Discount) -> dict:
        return {
            "code": discount.code,
            "kind": discount.kind.value,
            "value": discount.value,
            "min_order_value": discount.min_order_value,
            "max_uses": discount.max_uses,
            "used_count": discount.used_count,
            "expires_at": discount.expires_at.isoformat() if discount.expires_at else None,
            "is_active": discount.is_active,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Discount:
        try:
            expires_at = raw.get("expires_at")
            return Discount(
                code=raw["code"],
                kind=DiscountKind(raw["kind"]),
                value=raw["value"],
                min_order_value=raw.get("min_order_value", 0),
                max_uses=raw.get("max_uses", 0),
                used_count=raw.get("used_count", 0),
                expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
                is_active=raw.get("is_active", True),
            )
        except (KeyError, TypeError, ValueError, ValidationError) as exc:
            raise PersistenceError(f"Malformed discount record: {exc!r}") from exc
