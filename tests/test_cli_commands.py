from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import create_engine, text
from typer.testing import CliRunner

from row_gateway.cli.app import app
from row_gateway.cli.deps import reset_container


def _env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> str:
    db_url = f"sqlite:///{tmp_path / 'cli.db'}"
    schema = tmp_path / "schema.json"
    schema.write_text(
        json.dumps(
            {
                "widget": {
                    "fields": ["id", "name", "weight"],
                    "table_name": "widgets",
                    "primary_key": "id",
                    "validation_rules": {"name": "required|max_length[20]", "weight": "numeric"},
                },
                "draft": {"fields": ["id", "body"]},
            }
        ),
        encoding="utf-8",
    )
    engine = create_engine(db_url)
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE widgets ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL, weight REAL)"
            )
        )
    engine.dispose()

    monkeypatch.setenv("ROW_GATEWAY_DATABASE_URL", db_url)
    monkeypatch.setenv("ROW_GATEWAY_SCHEMA", str(schema))
    monkeypatch.setenv("ROW_GATEWAY_ENV", "test")
    reset_container()
    return db_url


def _rows(db_url: str) -> list[tuple[Any, ...]]:
    engine = create_engine(db_url)
    with engine.connect() as conn:
        rows = [tuple(row) for row in conn.execute(text("SELECT id, name, weight FROM widgets"))]
    engine.dispose()
    return rows


def test_cli_show_settings_and_entities(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _env(monkeypatch, tmp_path)
    runner = CliRunner()

    settings = runner.invoke(app, ["show-settings"])
    assert settings.exit_code == 0
    assert "Environment:\ttest" in settings.stdout

    entities = runner.invoke(app, ["entities"])
    assert entities.exit_code == 0
    assert "widget\twidgets\tid\tid, name, weight" in entities.stdout
    assert "draft\t-\t-\tid, body" in entities.stdout


def test_cli_save_insert_then_update(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    db_url = _env(monkeypatch, tmp_path)
    runner = CliRunner()

    inserted = runner.invoke(app, ["save", "widget", "--set", "name=Bolt", "--set", "weight=1.5"])
    assert inserted.exit_code == 0
    assert "Inserted widget" in inserted.stdout
    assert _rows(db_url) == [(1, "Bolt", 1.5)]

    updated = runner.invoke(app, ["save", "widget", "-s", "id=1", "-s", "name=Big Bolt"])
    assert updated.exit_code == 0
    assert "Updated widget 1" in updated.stdout
    assert _rows(db_url) == [(1, "Big Bolt", 1.5)]


def test_cli_save_reports_validation_errors(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    db_url = _env(monkeypatch, tmp_path)
    runner = CliRunner()

    result = runner.invoke(app, ["save", "widget", "--set", "name=", "--set", "weight=heavy"])

    assert result.exit_code == 1
    assert "name\trequired" in result.stdout
    assert "weight\tnumeric" in result.stdout
    assert _rows(db_url) == []


def test_cli_validate(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _env(monkeypatch, tmp_path)
    runner = CliRunner()

    ok = runner.invoke(app, ["validate", "widget", "--set", "name=Nut"])
    assert ok.exit_code == 0
    assert "Valid" in ok.stdout

    unknown = runner.invoke(app, ["validate", "widget", "--set", "colour=red"])
    assert unknown.exit_code == 1
    assert "Unknown field 'colour'" in unknown.stdout

    missing = runner.invoke(app, ["validate", "gadget", "--set", "name=Nut"])
    assert missing.exit_code == 1
    assert "not declared" in missing.stdout


def test_cli_delete(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    db_url = _env(monkeypatch, tmp_path)
    runner = CliRunner()
    runner.invoke(app, ["save", "widget", "--set", "name=Bolt"])

    result = runner.invoke(app, ["delete", "widget", "1"])
    assert result.exit_code == 0
    assert "Deleted widget 1" in result.stdout
    assert _rows(db_url) == []

    unconfigured = runner.invoke(app, ["delete", "draft", "1"])
    assert unconfigured.exit_code == 1
    assert "No metadata set" in unconfigured.stdout


def test_cli_restore(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    db_url = _env(monkeypatch, tmp_path)
    backup = tmp_path / "widgets.jsonl"
    backup.write_text(
        "\n".join(
            [
                json.dumps({"id": 7, "name": "Archived", "weight": 3.0}),
                "",
                json.dumps({"id": 12, "name": "Legacy", "exported_at": "2015-01-01"}),
            ]
        ),
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(app, ["restore", "widget", str(backup)])
    assert result.exit_code == 0
    assert "Restored 2 widget rows" in result.stdout
    assert sorted(_rows(db_url)) == [(7, "Archived", 3.0), (12, "Legacy", None)]

    again = runner.invoke(app, ["restore", "widget", str(backup)])
    assert again.exit_code == 1
    assert "Storage failure after 0 rows" in again.stdout


def test_cli_restore_rejects_bad_lines(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _env(monkeypatch, tmp_path)
    backup = tmp_path / "broken.jsonl"
    backup.write_text("{not json}\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["restore", "widget", str(backup)])
    assert result.exit_code == 1
    assert "broken.jsonl:1: invalid JSON" in result.stdout

    missing = runner.invoke(app, ["restore", "widget", str(tmp_path / "nope.jsonl")])
    assert missing.exit_code == 1
    assert "Unable to read" in missing.stdout
