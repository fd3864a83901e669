"""Typer CLI wiring row gateway services."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer
from sqlalchemy.exc import SQLAlchemyError

from row_gateway.config import GatewaySettings
from row_gateway.entity import Entity
from row_gateway.errors import GatewayError
from row_gateway.validation import ErrorCollection

from .deps import get_container

app = typer.Typer(help="Row gateway command-line interface")

logger = logging.getLogger(__name__)


@app.callback()
def main() -> None:
    """Configure logging from the environment before running a command."""

    settings = GatewaySettings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _parse_assignments(assignments: list[str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for item in assignments:
        name, sep, raw = item.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected field=value, got {item!r}")
        values[name.strip()] = _parse_value(raw)
    return values


def _build_entity(entity_type: str, values: dict[str, Any]) -> Entity:
    gateway = get_container().gateway
    entity = gateway.create(entity_type, values)
    for name in values:
        entity.mark_dirty(name)
    return entity


def _echo_errors(errors: ErrorCollection) -> None:
    for error in errors:
        typer.echo(f"{error.field}\t{error.rule}")


def _fail(message: str) -> typer.Exit:
    typer.echo(message)
    return typer.Exit(code=1)


@app.command("show-settings")
def show_settings() -> None:
    """Print the resolved settings."""

    container = get_container()
    settings = container.settings
    typer.echo("Environment:\t" + settings.environment)
    typer.echo("Database URL:\t" + settings.database_url)
    typer.echo("Schema:\t" + (str(settings.schema_path) if settings.schema_path else "(none)"))


@app.command("entities")
def list_entities() -> None:
    """List declared entity types."""

    registry = get_container().registry
    entity_types = registry.entity_types()
    if not entity_types:
        typer.echo("No entity types declared")
        return
    for entity_type in entity_types:
        metadata = registry.get(entity_type)
        typer.echo(
            f"{entity_type}\t{metadata.table_name or '-'}\t{metadata.primary_key or '-'}"
            f"\t{', '.join(metadata.fields)}"
        )


@app.command("validate")
def validate(
    entity_type: str,
    assignments: list[str] = typer.Option([], "--set", "-s", help="field=value pair"),
) -> None:
    """Validate field values without writing them."""

    values = _parse_assignments(assignments)
    try:
        entity = _build_entity(entity_type, values)
        errors = get_container().gateway.validate(entity)
    except GatewayError as exc:
        raise _fail(str(exc)) from exc

    if errors.has_errors():
        _echo_errors(errors)
        raise typer.Exit(code=1)
    typer.echo("Valid")


@app.command("save")
def save(
    entity_type: str,
    assignments: list[str] = typer.Option([], "--set", "-s", help="field=value pair"),
) -> None:
    """Validate and write a row, updating when the primary key is given."""

    gateway = get_container().gateway
    values = _parse_assignments(assignments)
    try:
        entity = _build_entity(entity_type, values)
        key_field = gateway.registry.get_metadata(entity_type, "primary_key")
        errors = gateway.save_valid(entity)
    except GatewayError as exc:
        raise _fail(str(exc)) from exc
    except SQLAlchemyError as exc:
        raise _fail(f"Storage failure: {exc}") from exc

    if errors.has_errors():
        _echo_errors(errors)
        raise typer.Exit(code=1)
    if not entity.is_dirty:
        typer.echo("Nothing to save")
    elif key_field is not None and entity.is_set(key_field):
        typer.echo(f"Updated {entity_type} {entity[key_field]}")
    else:
        typer.echo(f"Inserted {entity_type}")


@app.command("delete")
def delete(entity_type: str, identifier: str) -> None:
    """Delete a row by primary key."""

    gateway = get_container().gateway
    try:
        key_field = gateway.registry.get_metadata(entity_type, "primary_key")
        entity = gateway.create(entity_type)
        if key_field is not None:
            entity[key_field] = _parse_value(identifier)
        gateway.delete(entity)
    except GatewayError as exc:
        raise _fail(str(exc)) from exc
    except SQLAlchemyError as exc:
        raise _fail(f"Storage failure: {exc}") from exc
    typer.echo(f"Deleted {entity_type} {identifier}")


@app.command("restore")
def restore(entity_type: str, backup: Path) -> None:
    """Re-insert rows from a JSON-lines backup, keeping their primary keys."""

    gateway = get_container().gateway
    restored = 0
    try:
        field_names = gateway.registry.get(entity_type).fields
        with backup.open(encoding="utf-8") as handle:
            for line_no, line in enumerate(handle, start=1):
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError as exc:
                    raise _fail(f"{backup}:{line_no}: invalid JSON ({exc.msg})") from exc
                if not isinstance(record, dict):
                    typer.echo(f"{backup}:{line_no}: expected a JSON object")
                    raise typer.Exit(code=1)
                dropped = sorted(set(record) - set(field_names))
                if dropped:
                    logger.warning("Line %d: ignoring unknown fields %s", line_no, dropped)
                entity = gateway.create(entity_type, record)
                for name in record:
                    if name in entity:
                        entity.mark_dirty(name)
                gateway.restore(entity)
                restored += 1
    except OSError as exc:
        raise _fail(f"Unable to read {backup}: {exc}") from exc
    except GatewayError as exc:
        raise _fail(str(exc)) from exc
    except SQLAlchemyError as exc:
        raise _fail(f"Storage failure after {restored} rows: {exc}") from exc

    typer.echo(f"Restored {restored} {entity_type} rows")
