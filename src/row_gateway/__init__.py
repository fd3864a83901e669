"""Row data gateway: dirty tracking, validation and row persistence."""

from .entity import Entity
from .errors import (
    ConfigurationError,
    GatewayError,
    InvalidStateError,
    UnknownFieldError,
    UnknownRuleError,
)
from .gateway import RowDataGateway
from .metadata import FIELD_LIST, EntityMetadata, MetadataRegistry, load_registry
from .persistence import PersistenceDispatcher
from .validation import ErrorCollection, FieldError, RuleValidator, ValidationDispatcher

__all__ = [
    "FIELD_LIST",
    "ConfigurationError",
    "Entity",
    "EntityMetadata",
    "ErrorCollection",
    "FieldError",
    "GatewayError",
    "InvalidStateError",
    "MetadataRegistry",
    "PersistenceDispatcher",
    "RowDataGateway",
    "RuleValidator",
    "UnknownFieldError",
    "UnknownRuleError",
    "ValidationDispatcher",
    "load_registry",
]
