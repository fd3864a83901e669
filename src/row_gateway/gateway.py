"""Row data gateway facade."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .entity import Entity
from .metadata import FIELD_LIST, MetadataRegistry
from .persistence import PersistenceDispatcher
from .storage import StorageDriver
from .validation import ErrorCollection, RuleValidator, ValidationDispatcher, ValidatorFactory


class RowDataGateway:
    """Creates entities and routes validate/save/restore/delete calls.

    An entity represents one row of its table. Only the fields marked dirty
    are validated and written.
    """

    def __init__(
        self,
        registry: MetadataRegistry,
        storage: StorageDriver,
        validator_factory: ValidatorFactory = RuleValidator,
    ) -> None:
        self._registry = registry
        self._validation = ValidationDispatcher(registry, validator_factory)
        self._persistence = PersistenceDispatcher(registry, storage)

    @property
    def registry(self) -> MetadataRegistry:
        return self._registry

    def create(self, entity_type: str, data: Mapping[str, Any] | None = None) -> Entity:
        """Build an entity, silently dropping keys that are not declared fields."""

        return Entity(entity_type, self._registry.get_metadata(entity_type, FIELD_LIST), data)

    def load(self, entity_type: str, record: Mapping[str, Any]) -> Entity:
        """Entity for a row read from storage; nothing is dirty."""

        return self.create(entity_type, record)

    def validate(self, entity: Entity) -> ErrorCollection:
        return self._validation.validate(entity)

    def save(self, entity: Entity) -> None:
        self._persistence.save(entity)

    def save_valid(self, entity: Entity) -> ErrorCollection:
        """Validate and save only when no rule failed."""

        errors = self.validate(entity)
        if not errors.has_errors():
            self.save(entity)
        return errors

    def restore(self, entity: Entity) -> None:
        self._persistence.restore(entity)

    def delete(self, entity: Entity) -> None:
        self._persistence.delete(entity)


__all__ = ["RowDataGateway"]
