"""Validation outcome types."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class FieldError:
    """A single failed rule for a field."""

    field: str
    rule: str

    def __str__(self) -> str:
        return f"{self.field}: {self.rule}"


@dataclass(slots=True)
class ErrorCollection:
    """Ordered collection of validation failures. Empty means valid."""

    _errors: list[FieldError] = field(default_factory=list)

    def add_error(self, error: FieldError) -> None:
        self._errors.append(error)

    def has_errors(self) -> bool:
        return bool(self._errors)

    def for_field(self, field_name: str) -> list[str]:
        """Failed rule names for one field, in the order they were recorded."""

        return [error.rule for error in self._errors if error.field == field_name]

    def fields(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(error.field for error in self._errors))

    def as_pairs(self) -> list[tuple[str, str]]:
        return [(error.field, error.rule) for error in self._errors]

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)


__all__ = ["ErrorCollection", "FieldError"]
