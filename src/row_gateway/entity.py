"""In-memory representation of a single table row."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from .errors import UnknownFieldError


class Entity:
    """One row of an entity type with explicit dirty tracking.

    Assigning a value does not mark it dirty. Callers pair assignments with
    :meth:`mark_dirty`, or use :meth:`set` which does both.
    """

    __slots__ = ("_dirty", "_entity_type", "_field_names", "_values")

    def __init__(
        self,
        entity_type: str,
        field_names: Iterable[str],
        data: Mapping[str, Any] | None = None,
    ) -> None:
        self._entity_type = entity_type
        self._field_names = tuple(field_names)
        self._values: dict[str, Any] = dict.fromkeys(self._field_names)
        # insertion ordered set
        self._dirty: dict[str, None] = {}

        for name, value in (data or {}).items():
            if name in self._values:
                self._values[name] = value

    @property
    def entity_type(self) -> str:
        return self._entity_type

    @property
    def field_names(self) -> tuple[str, ...]:
        return self._field_names

    @property
    def is_dirty(self) -> bool:
        return bool(self._dirty)

    def _check(self, name: str) -> None:
        if name not in self._values:
            raise UnknownFieldError(self._entity_type, name)

    def __getitem__(self, name: str) -> Any:
        self._check(name)
        return self._values[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._check(name)
        self._values[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._field_names)

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def is_set(self, name: str) -> bool:
        """Whether the field currently holds a value other than ``None``."""

        self._check(name)
        return self._values[name] is not None

    def mark_dirty(self, name: str) -> Entity:
        self._check(name)
        self._dirty[name] = None
        return self

    def set(self, name: str, value: Any) -> Entity:
        """Assign ``value`` and mark the field dirty."""

        self[name] = value
        return self.mark_dirty(name)

    def mark_clean(self) -> Entity:
        self._dirty.clear()
        return self

    def dirty_fields(self) -> tuple[str, ...]:
        return tuple(self._dirty)

    def projection(self) -> dict[str, Any]:
        """Current values of the dirty fields, in the order they were marked."""

        return {name: self._values[name] for name in self._dirty}

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        return (
            f"Entity({self._entity_type!r}, {self._values!r}, "
            f"dirty={list(self._dirty)!r})"
        )


__all__ = ["Entity"]
