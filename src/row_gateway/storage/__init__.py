"""Storage drivers used by the persistence dispatcher."""

from .interfaces import StorageDriver
from .memory import InMemoryStorageDriver, StorageCall
from .sql import SQLAlchemyStorageDriver, create_sqlalchemy_driver

__all__ = [
    "InMemoryStorageDriver",
    "SQLAlchemyStorageDriver",
    "StorageCall",
    "StorageDriver",
    "create_sqlalchemy_driver",
]
