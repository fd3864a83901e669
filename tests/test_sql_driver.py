from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import Engine, text
from sqlalchemy.exc import IntegrityError

from row_gateway import MetadataRegistry, RowDataGateway
from row_gateway.storage import SQLAlchemyStorageDriver, create_sqlalchemy_driver


def _db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'gateway.db'}"


def _create_widgets(engine: Engine) -> None:
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE widgets ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "name TEXT NOT NULL, "
                "weight REAL)"
            )
        )


def _rows(engine: Engine) -> list[tuple[Any, ...]]:
    with engine.connect() as conn:
        result = conn.execute(text("SELECT id, name, weight FROM widgets ORDER BY id"))
        return [tuple(row) for row in result]


def _driver(tmp_path: Path) -> SQLAlchemyStorageDriver:
    driver = create_sqlalchemy_driver(_db_url(tmp_path))
    _create_widgets(driver.engine)
    return driver


def test_insert_update_delete(tmp_path: Path) -> None:
    driver = _driver(tmp_path)

    driver.insert("widgets", {"name": "Bolt", "weight": 1.5})
    driver.insert("widgets", {"name": "Nut"})
    driver.update("widgets", "id", 1, {"weight": 2.0})
    driver.delete("widgets", "id", 2)

    assert _rows(driver.engine) == [(1, "Bolt", 2.0)]
    driver.dispose()


def test_update_without_match_is_silent(tmp_path: Path) -> None:
    driver = _driver(tmp_path)
    driver.update("widgets", "id", 99, {"name": "Ghost"})
    assert _rows(driver.engine) == []


def test_gateway_round_trip(tmp_path: Path) -> None:
    driver = _driver(tmp_path)
    registry = MetadataRegistry()
    registry.declare(
        "widget",
        ("id", "name", "weight"),
        table_name="widgets",
        primary_key="id",
        validation_rules={"name": "required|max_length[20]", "weight": "numeric"},
    )
    gateway = RowDataGateway(registry, driver)

    created = gateway.create("widget").set("name", "Sprocket").set("weight", 0.25)
    assert not gateway.validate(created).has_errors()
    gateway.save(created)

    ((row_id, name, weight),) = _rows(driver.engine)
    loaded = gateway.load("widget", {"id": row_id, "name": name, "weight": weight})
    loaded.set("name", "Big Sprocket")
    gateway.save(loaded)
    assert _rows(driver.engine) == [(row_id, "Big Sprocket", 0.25)]

    gateway.delete(loaded)
    assert _rows(driver.engine) == []


def test_restore_duplicate_key_propagates_integrity_error(tmp_path: Path) -> None:
    driver = _driver(tmp_path)
    registry = MetadataRegistry()
    registry.declare("widget", ("id", "name"), table_name="widgets", primary_key="id")
    gateway = RowDataGateway(registry, driver)

    backup = gateway.load("widget", {"id": 10, "name": "Archived"})
    backup.mark_dirty("id").mark_dirty("name")
    gateway.restore(backup)
    assert _rows(driver.engine) == [(10, "Archived", None)]

    with pytest.raises(IntegrityError):
        gateway.restore(backup)


def test_insert_constraint_violation_propagates(tmp_path: Path) -> None:
    driver = _driver(tmp_path)
    with pytest.raises(IntegrityError):
        driver.insert("widgets", {"weight": 1.0})
