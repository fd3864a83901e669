"""Service container wiring gateway components."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from row_gateway.config import GatewaySettings
from row_gateway.gateway import RowDataGateway
from row_gateway.metadata import MetadataRegistry, load_registry
from row_gateway.storage import SQLAlchemyStorageDriver, create_sqlalchemy_driver

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    """Aggregates the configured registry, driver and gateway."""

    settings: GatewaySettings
    registry: MetadataRegistry
    storage: SQLAlchemyStorageDriver
    gateway: RowDataGateway


def _ensure_sqlite_directory(database_url: str) -> None:
    if not database_url.startswith("sqlite"):
        return
    try:
        _, path = database_url.split(":///", maxsplit=1)
    except ValueError:
        return
    if not path or path == ":memory:":
        return
    db_path = Path(path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)


def build_container(settings: GatewaySettings | None = None) -> ServiceContainer:
    """Construct the primary service container."""

    resolved_settings = settings or GatewaySettings.from_env()

    if resolved_settings.schema_path is not None:
        schema_path = resolved_settings.schema_path.expanduser().resolve()
        registry = load_registry(schema_path)
        logger.info(
            "Loaded %d entity declarations from %s", len(registry.entity_types()), schema_path
        )
    else:
        logger.warning("No entity schema configured; the registry is empty")
        registry = MetadataRegistry()

    _ensure_sqlite_directory(resolved_settings.database_url)
    storage = create_sqlalchemy_driver(
        resolved_settings.database_url,
        echo=resolved_settings.echo_sql,
    )
    gateway = RowDataGateway(registry, storage)

    return ServiceContainer(
        settings=resolved_settings,
        registry=registry,
        storage=storage,
        gateway=gateway,
    )


__all__ = ["ServiceContainer", "build_container"]
