"""A JSON document on disk, shared by the JSON-backed repositories.

Every write replaces the whole file, so readers never see a half-applied
update. Any I/O or decode failure surfaces as PersistenceError.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from storefront.domain.exceptions import PersistenceError


class JsonFile:

    def __init__(self, file_path: Path, empty: Any) -> None:
        self._file_path = file_path
        self._empty = empty

    @property
    def path(self) -> Path:
        return self._file_path

    def read(self) -> Any:
        if not self._file_path.exists():
            return copy.deepcopy(self._empty)
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Cannot read {self._file_path}: {exc}") from exc

    def write(self, data: Any) -> None:
        tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
            tmp.replace(self._file_path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self._file_path}: {exc}") from exc
