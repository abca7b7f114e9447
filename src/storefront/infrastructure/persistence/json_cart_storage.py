"""JSON-file-backed implementation of CartStorage.

Plays the role a browser's local storage plays for a web storefront: one
slot per client, overwritten on every cart mutation.
"""

from __future__ import annotations

from pathlib import Path

from storefront.domain.repository.cart_storage import CartStorage
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonCartStorage(CartStorage):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=None)

    def load(self) -> dict | None:
        return self._file.read()

    def save(self, raw: dict) -> None:
        self._file.write(raw)
