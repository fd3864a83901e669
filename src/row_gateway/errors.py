"""Gateway exception hierarchy."""

from __future__ import annotations


class GatewayError(RuntimeError):
    """Base class for row gateway errors."""


class ConfigurationError(GatewayError):
    """Raised when an entity type has missing or malformed metadata."""


class InvalidStateError(GatewayError):
    """Raised when an entity is used in a state that does not permit the call."""


class UnknownFieldError(GatewayError, KeyError):
    """Raised when a field name is not declared for the entity type."""

    def __init__(self, entity_type: str, field: str) -> None:
        self.entity_type = entity_type
        self.field = field
        super().__init__(f"Unknown field '{field}' for entity type '{entity_type}'")

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownRuleError(ConfigurationError):
    """Raised when a validation rule is unknown or has a malformed parameter."""


__all__ = [
    "ConfigurationError",
    "GatewayError",
    "InvalidStateError",
    "UnknownFieldError",
    "UnknownRuleError",
]
