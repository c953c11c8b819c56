"""Kindstore CLI entry points.

This module exposes entity CRUD commands for any Datastore kind.
It maps argparse commands onto EntityStore calls.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from typing import Any, Sequence

from core.config import KindstoreConfig
from core.errors import (
    BackendError,
    EntityIdError,
    EntityNotFoundError,
    KindstoreConfigError,
)
from core.logging_config import configure_logging
from core.types import Entity
from store.entity_store import EntityStore


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="kindstore", description="Kindstore entity CLI")
    parser.add_argument("--project", help="Override KINDSTORE_PROJECT_ID for this command")
    parser.add_argument("--namespace", help="Override KINDSTORE_NAMESPACE for this command")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Structured log level written to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_get_command(subparsers)
    _add_put_command(subparsers)
    _add_delete_command(subparsers)
    _add_reserve_id_command(subparsers)
    _add_list_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Kindstore CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        store = _build_store(args.project, args.namespace)
        if args.command == "get":
            return _run_get_command(store, args)
        if args.command == "put":
            return _run_put_command(store, args, parser)
        if args.command == "delete":
            return _run_delete_command(store, args)
        if args.command == "reserve-id":
            return _run_reserve_id_command(store, args)
        if args.command == "list":
            return _run_list_command(store, args)
    except KindstoreConfigError as error:
        print(f"config_error={error}")
        return 1
    except EntityIdError as error:
        print(f"invalid_id={error}")
        return 1
    except BackendError as error:
        print(f"backend_error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_store(project: str | None, namespace: str | None) -> EntityStore:
    """Build the entity store with optional config overrides.

    Args:
        project: Optional project id override.
        namespace: Optional namespace override.

    Returns:
        Configured entity store.
    """
    config = KindstoreConfig.from_env()
    if project:
        config = replace(config, project_id=project)
    if namespace:
        config = replace(config, namespace=namespace)
    return EntityStore.from_config(config)


def _run_get_command(store: EntityStore, args: argparse.Namespace) -> int:
    """Handle get command."""
    try:
        entity = store.read(args.kind, args.id)
    except EntityNotFoundError as error:
        print(f"not_found={error}")
        return 1
    print(_render_entity(entity))
    return 0


def _run_put_command(
    store: EntityStore,
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int:
    """Handle put command.

    Args:
        store: Entity store.
        args: Parsed CLI args.
        parser: Parser used to report invalid property input.

    Returns:
        Exit code.
    """
    data = _parse_properties(args.json_payload, args.set_values, parser)
    entity = store.update(args.kind, args.id, data)
    print(_render_entity(entity))
    return 0


def _run_delete_command(store: EntityStore, args: argparse.Namespace) -> int:
    """Handle delete command."""
    store.delete(args.kind, args.id)
    print(f"deleted={args.kind}/{args.id}")
    return 0


def _run_reserve_id_command(store: EntityStore, args: argparse.Namespace) -> int:
    """Handle reserve-id command."""
    print(store.reserve_id(args.kind))
    return 0


def _run_list_command(store: EntityStore, args: argparse.Namespace) -> int:
    """Handle list command.

    Args:
        store: Entity store.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    entities, next_token = store.list_entities(
        args.kind,
        limit=args.limit,
        token=args.token,
        order=tuple(args.order or ()),
    )
    for entity in entities:
        print(_render_entity(entity))
    print(f"next_token={next_token or '-'}")
    return 0


def _parse_properties(
    json_payload: str | None,
    set_values: list[str] | None,
    parser: argparse.ArgumentParser,
) -> Entity:
    """Merge ``--json`` and ``--set`` inputs into one property mapping.

    ``--set`` values are applied after the JSON object and stay strings.
    """
    data: Entity = {}
    if json_payload:
        try:
            payload = json.loads(json_payload)
        except json.JSONDecodeError as error:
            parser.error(f"Invalid --json payload: {error.msg}")
        if not isinstance(payload, dict):
            parser.error("Invalid --json payload: expected a JSON object")
        data.update(payload)
    for assignment in set_values or ():
        name, separator, value = assignment.partition("=")
        if not separator or not name:
            parser.error(f"Invalid --set value '{assignment}': expected NAME=VALUE")
        data[name] = value
    return data


def _render_entity(entity: Entity) -> str:
    """Render one entity as a JSON line."""
    return json.dumps(entity, sort_keys=True, default=str)


def _add_get_command(subparsers: Any) -> None:
    """Register get subcommand."""
    parser = subparsers.add_parser("get", help="Read one entity by id")
    parser.add_argument("kind", help="Entity kind")
    parser.add_argument("id", help="Numeric entity id")


def _add_put_command(subparsers: Any) -> None:
    """Register put subcommand."""
    parser = subparsers.add_parser("put", help="Create or fully replace an entity")
    parser.add_argument("kind", help="Entity kind")
    parser.add_argument("--id", help="Existing entity id; a new id is allocated when omitted")
    parser.add_argument("--json", dest="json_payload", help="Entity properties as a JSON object")
    parser.add_argument(
        "--set",
        dest="set_values",
        action="append",
        metavar="NAME=VALUE",
        help="String property assignment; repeatable",
    )


def _add_delete_command(subparsers: Any) -> None:
    """Register delete subcommand."""
    parser = subparsers.add_parser("delete", help="Delete one entity by id")
    parser.add_argument("kind", help="Entity kind")
    parser.add_argument("id", help="Numeric entity id")


def _add_reserve_id_command(subparsers: Any) -> None:
    """Register reserve-id subcommand."""
    parser = subparsers.add_parser("reserve-id", help="Allocate a new entity id")
    parser.add_argument("kind", help="Entity kind")


def _add_list_command(subparsers: Any) -> None:
    """Register list subcommand."""
    parser = subparsers.add_parser("list", help="List one page of entities")
    parser.add_argument("kind", help="Entity kind")
    parser.add_argument("--limit", type=int, help="Entities per page")
    parser.add_argument("--token", help="Cursor printed by a previous list call")
    parser.add_argument(
        "--order",
        action="append",
        metavar="PROPERTY",
        help="Sort property, prefix with '-' for descending; repeatable",
    )
