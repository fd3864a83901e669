"""In-memory storage driver for unit testing and dry runs."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Literal

from .interfaces import StorageDriver

Operation = Literal["insert", "update", "delete"]


@dataclass(frozen=True, slots=True)
class StorageCall:
    """Journal entry describing one driver invocation."""

    operation: Operation
    table: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    key_field: str | None = None
    key_value: Any = None


@dataclass
class InMemoryStorageDriver(StorageDriver):
    """Keeps rows in per-table lists and records every call it receives.

    ``auto_increment`` maps a table name to the key field that should be
    filled with the next integer when an insert leaves it unset.
    """

    auto_increment: dict[str, str] = field(default_factory=dict)
    calls: list[StorageCall] = field(default_factory=list)
    _tables: dict[str, list[dict[str, Any]]] = field(
        init=False, repr=False, default_factory=lambda: defaultdict(list)
    )
    _sequences: dict[str, int] = field(
        init=False, repr=False, default_factory=lambda: defaultdict(int)
    )

    def insert(self, table: str, fields: Mapping[str, Any]) -> None:
        self.calls.append(StorageCall("insert", table, deepcopy(dict(fields))))
        row = deepcopy(dict(fields))
        key_field = self.auto_increment.get(table)
        if key_field is not None:
            if row.get(key_field) is None:
                self._sequences[table] += 1
                row[key_field] = self._sequences[table]
            elif isinstance(row[key_field], int):
                self._sequences[table] = max(self._sequences[table], row[key_field])
        self._tables[table].append(row)

    def update(
        self,
        table: str,
        key_field: str,
        key_value: Any,
        fields: Mapping[str, Any],
    ) -> None:
        self.calls.append(
            StorageCall("update", table, deepcopy(dict(fields)), key_field, key_value)
        )
        for row in self._tables[table]:
            if row.get(key_field) == key_value:
                row.update(deepcopy(dict(fields)))

    def delete(self, table: str, key_field: str, key_value: Any) -> None:
        self.calls.append(StorageCall("delete", table, {}, key_field, key_value))
        self._tables[table] = [
            row for row in self._tables[table] if row.get(key_field) != key_value
        ]

    def rows(self, table: str) -> Sequence[dict[str, Any]]:
        return [deepcopy(row) for row in self._tables.get(table, [])]

    def reset(self) -> None:
        self.calls.clear()
        self._tables.clear()
        self._sequences.clear()


__all__ = ["InMemoryStorageDriver", "StorageCall"]
