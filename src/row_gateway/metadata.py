"""Per-entity-type metadata and the registry that serves it.

Each entity type declares its field names, backing table, primary key and
validation rules once at startup. The gateway only ever reads these values
through :meth:`MetadataRegistry.get_metadata`.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .errors import ConfigurationError

FIELD_LIST = "field_list"
"""Metadata key returning the declared field names of an entity type."""

_RECORD_KEYS = ("table_name", "primary_key", "validation_rules")


class EntityMetadata(BaseModel):
    """Immutable description of one entity type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    fields: tuple[str, ...]
    table_name: str | None = None
    primary_key: str | None = None
    validation_rules: Mapping[str, str] | None = None

    @field_validator("fields")
    @classmethod
    def ensure_fields(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            msg = "At least one field must be declared"
            raise ValueError(msg)
        if len(set(value)) != len(value):
            msg = "Field names must be unique"
            raise ValueError(msg)
        return value

    @field_validator("validation_rules")
    @classmethod
    def freeze_rules(cls, value: Mapping[str, str] | None) -> Mapping[str, str] | None:
        if value is None:
            return None
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def ensure_declared(self) -> EntityMetadata:
        if self.primary_key is not None and self.primary_key not in self.fields:
            msg = f"Primary key '{self.primary_key}' is not a declared field"
            raise ValueError(msg)
        for name in self.validation_rules or {}:
            if name not in self.fields:
                msg = f"Validation rules given for undeclared field '{name}'"
                raise ValueError(msg)
        return self

    def as_record(self) -> dict[str, Any]:
        """Return the configured metadata keys, omitting unset ones."""

        record: dict[str, Any] = {}
        for key in _RECORD_KEYS:
            value = getattr(self, key)
            if value is not None:
                record[key] = dict(value) if isinstance(value, Mapping) else value
        return record


@dataclass(slots=True)
class MetadataRegistry:
    """Process-wide lookup of entity type metadata."""

    _entries: dict[str, EntityMetadata] = field(default_factory=dict)

    def register(
        self,
        entity_type: str,
        metadata: EntityMetadata,
        *,
        override: bool = False,
    ) -> None:
        if not override and entity_type in self._entries:
            msg = f"Entity type '{entity_type}' already registered"
            raise ConfigurationError(msg)
        self._entries[entity_type] = metadata

    def declare(
        self,
        entity_type: str,
        fields: Iterable[str],
        *,
        table_name: str | None = None,
        primary_key: str | None = None,
        validation_rules: Mapping[str, str] | None = None,
        override: bool = False,
    ) -> EntityMetadata:
        """Build and register metadata in one step."""

        try:
            metadata = EntityMetadata(
                fields=tuple(fields),
                table_name=table_name,
                primary_key=primary_key,
                validation_rules=dict(validation_rules) if validation_rules is not None else None,
            )
        except ValidationError as exc:
            msg = f"Invalid declaration for entity type '{entity_type}': {exc}"
            raise ConfigurationError(msg) from exc
        self.register(entity_type, metadata, override=override)
        return metadata

    def get(self, entity_type: str) -> EntityMetadata:
        try:
            return self._entries[entity_type]
        except KeyError as exc:
            msg = f"Entity type '{entity_type}' is not declared"
            raise ConfigurationError(msg) from exc

    def get_metadata(self, entity_type: str, key: str | None = None) -> Any:
        """Look up metadata for ``entity_type``.

        ``FIELD_LIST`` returns the declared field names. Without a key the
        whole record is returned. A key that is not configured yields ``None``
        so callers can treat it as a feature that is switched off.
        """

        metadata = self.get(entity_type)
        if key == FIELD_LIST:
            return metadata.fields

        record = metadata.as_record()
        if not record:
            msg = f"No metadata set for entity type '{entity_type}'"
            raise ConfigurationError(msg)

        if key is None:
            return record
        return record.get(key)

    def entity_types(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._entries

    @classmethod
    def from_mapping(cls, declarations: Mapping[str, Mapping[str, Any]]) -> MetadataRegistry:
        registry = cls()
        for entity_type, payload in declarations.items():
            try:
                metadata = EntityMetadata.model_validate(payload)
            except ValidationError as exc:
                msg = f"Invalid declaration for entity type '{entity_type}': {exc}"
                raise ConfigurationError(msg) from exc
            registry.register(entity_type, metadata)
        return registry


def load_registry(path: Path) -> MetadataRegistry:
    """Read a JSON declaration document into a new registry."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Unable to read entity declarations from {path}: {exc}"
        raise ConfigurationError(msg) from exc
    if not isinstance(payload, dict):
        msg = f"Entity declarations in {path} must be a JSON object"
        raise ConfigurationError(msg)
    return MetadataRegistry.from_mapping(payload)


__all__ = ["FIELD_LIST", "EntityMetadata", "MetadataRegistry", "load_registry"]
