"""SQLAlchemy Core storage driver."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import Engine, column, create_engine, delete, insert, table, update
from sqlalchemy.sql.expression import TableClause

from .interfaces import StorageDriver

logger = logging.getLogger(__name__)


def _table(name: str, columns: Iterable[str]) -> TableClause:
    return table(name, *(column(col) for col in dict.fromkeys(columns)))


class SQLAlchemyStorageDriver(StorageDriver):
    """Issues one statement per call, each in its own connection block."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def insert(self, table: str, fields: Mapping[str, Any]) -> None:
        target = _table(table, fields)
        stmt = insert(target).values(dict(fields))
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def update(
        self,
        table: str,
        key_field: str,
        key_value: Any,
        fields: Mapping[str, Any],
    ) -> None:
        target = _table(table, [key_field, *fields])
        stmt = update(target).where(target.c[key_field] == key_value).values(dict(fields))
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
        if result.rowcount == 0:
            logger.debug("Update on %s matched no row for %s=%r", table, key_field, key_value)

    def delete(self, table: str, key_field: str, key_value: Any) -> None:
        target = _table(table, [key_field])
        stmt = delete(target).where(target.c[key_field] == key_value)
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def dispose(self) -> None:
        self._engine.dispose()


def create_sqlalchemy_driver(database_url: str, *, echo: bool = False) -> SQLAlchemyStorageDriver:
    engine = create_engine(database_url, echo=echo)
    return SQLAlchemyStorageDriver(engine)


__all__ = ["SQLAlchemyStorageDriver", "create_sqlalchemy_driver"]
