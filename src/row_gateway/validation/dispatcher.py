"""Validation of dirty entity fields against declared rules."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from row_gateway.entity import Entity
from row_gateway.metadata import MetadataRegistry

from .errors import ErrorCollection, FieldError

logger = logging.getLogger(__name__)

RULE_DELIMITER = "|"


class Validator(Protocol):
    """Checks a value against an ordered list of rule names."""

    def validate(self, rules: Sequence[str], value: Any) -> bool: ...

    def failed_rules(self) -> list[str]: ...


ValidatorFactory = Callable[[], Validator]


def split_rules(rule_string: str) -> list[str]:
    return [token.strip() for token in rule_string.split(RULE_DELIMITER) if token.strip()]


class ValidationDispatcher:
    """Runs the configured rules of every dirty field through a validator."""

    def __init__(self, registry: MetadataRegistry, validator_factory: ValidatorFactory) -> None:
        self._registry = registry
        self._validator_factory = validator_factory

    def validate(self, entity: Entity) -> ErrorCollection:
        errors = ErrorCollection()

        # Nothing changed, nothing to validate.
        if not entity.is_dirty:
            return errors

        rules = self._registry.get_metadata(entity.entity_type, "validation_rules")
        if rules is None:
            return errors

        for name in entity.dirty_fields():
            rule_string = rules.get(name)
            if rule_string is None:
                continue
            validator = self._validator_factory()
            if not validator.validate(split_rules(rule_string), entity[name]):
                for rule in validator.failed_rules():
                    errors.add_error(FieldError(name, rule))

        if errors.has_errors():
            logger.debug(
                "Validation of %s failed: %s",
                entity.entity_type,
                ", ".join(str(error) for error in errors),
            )
        return errors


__all__ = ["RULE_DELIMITER", "ValidationDispatcher", "Validator", "ValidatorFactory", "split_rules"]
