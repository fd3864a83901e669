"""Lightweight gateway configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", ""}


@dataclass(frozen=True)
class GatewaySettings:
    """Immutable configuration sourced from environment variables."""

    environment: str = "development"
    database_url: str = "sqlite:///row_gateway.db"
    schema_path: Path | None = None
    echo_sql: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> GatewaySettings:
        schema = os.getenv("ROW_GATEWAY_SCHEMA") or None
        return cls(
            environment=os.getenv("ROW_GATEWAY_ENV", cls.environment),
            database_url=os.getenv("ROW_GATEWAY_DATABASE_URL", cls.database_url),
            schema_path=Path(schema) if schema else None,
            echo_sql=_env_bool("ROW_GATEWAY_ECHO_SQL", cls.echo_sql),
            log_level=os.getenv("ROW_GATEWAY_LOG_LEVEL", cls.log_level).upper(),
        )


__all__ = ["GatewaySettings"]
