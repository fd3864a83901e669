"""Storage driver contract consumed by the persistence dispatcher."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class StorageDriver(Protocol):
    """Synchronous single-table write operations.

    Implementations raise their own exceptions on connectivity or constraint
    failures; callers do not translate them.
    """

    def insert(self, table: str, fields: Mapping[str, Any]) -> None: ...

    def update(
        self,
        table: str,
        key_field: str,
        key_value: Any,
        fields: Mapping[str, Any],
    ) -> None: ...

    def delete(self, table: str, key_field: str, key_value: Any) -> None: ...
