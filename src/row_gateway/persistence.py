"""Insert, update and delete dispatch for dirty entities."""

from __future__ import annotations

import logging

from .entity import Entity
from .errors import ConfigurationError, InvalidStateError
from .metadata import MetadataRegistry
from .storage import StorageDriver

logger = logging.getLogger(__name__)


class PersistenceDispatcher:
    """Writes entity projections through an injected storage driver.

    ``save`` updates when the primary key holds a value and inserts otherwise.
    None of the operations clear the dirty set or validate.
    """

    def __init__(self, registry: MetadataRegistry, storage: StorageDriver) -> None:
        self._registry = registry
        self._storage = storage

    def _require(self, entity: Entity, key: str) -> str:
        value = self._registry.get_metadata(entity.entity_type, key)
        if value is None:
            msg = f"Entity type '{entity.entity_type}' has no {key} configured"
            raise ConfigurationError(msg)
        return value

    def save(self, entity: Entity) -> None:
        # Nothing to save.
        if not entity.is_dirty:
            logger.debug("Skipping save of clean %s entity", entity.entity_type)
            return

        table = self._require(entity, "table_name")
        key_field = self._require(entity, "primary_key")
        projection = entity.projection()

        if entity.is_set(key_field):
            key_value = entity[key_field]
            logger.debug("Updating %s where %s=%r: %s", table, key_field, key_value, list(projection))
            self._storage.update(table, key_field, key_value, projection)
        else:
            logger.debug("Inserting into %s: %s", table, list(projection))
            self._storage.insert(table, projection)

    def restore(self, entity: Entity) -> None:
        """Insert the dirty projection even when the primary key is set."""

        if not entity.is_dirty:
            return

        table = self._require(entity, "table_name")
        projection = entity.projection()
        logger.debug("Restoring into %s: %s", table, list(projection))
        self._storage.insert(table, projection)

    def delete(self, entity: Entity) -> None:
        table = self._require(entity, "table_name")
        key_field = self._require(entity, "primary_key")
        if not entity.is_set(key_field):
            msg = "Cannot delete an entity without an identifier"
            raise InvalidStateError(msg)

        key_value = entity[key_field]
        logger.debug("Deleting from %s where %s=%r", table, key_field, key_value)
        self._storage.delete(table, key_field, key_value)


__all__ = ["PersistenceDispatcher"]
