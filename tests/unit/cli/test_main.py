"""Unit tests for CLI command handling."""

from __future__ import annotations

import json

import pytest
from google.api_core.exceptions import PermissionDenied

import cli.main as cli_main
from cli.main import main
from store.entity_store import EntityStore
from tests.fake_datastore import FakeDatastoreClient


@pytest.fixture
def cli_store(monkeypatch: pytest.MonkeyPatch, entity_store: EntityStore) -> EntityStore:
    """Route CLI commands to the in-memory entity store."""
    monkeypatch.setattr(cli_main, "_build_store", lambda project, namespace: entity_store)
    return entity_store


def test_cli_put_creates_entity(cli_store: EntityStore, capsys) -> None:
    """CLI put should print the saved entity with its id."""
    exit_code = main(["put", "Book", "--json", '{"year": 1965}', "--set", "title=Dune"])
    saved = json.loads(capsys.readouterr().out)

    assert exit_code == 0 and cli_store.read("Book", saved["id"]) == saved


def test_cli_get_prints_entity(cli_store: EntityStore, capsys) -> None:
    """CLI get should print the stored entity as JSON."""
    created = cli_store.create("Book", {"title": "Dune"})

    exit_code = main(["get", "Book", str(created["id"])])
    output = json.loads(capsys.readouterr().out)

    assert exit_code == 0 and output == created


def test_cli_get_missing_entity_fails(cli_store: EntityStore, capsys) -> None:
    """CLI get should report missing entities with exit code 1."""
    exit_code = main(["get", "Book", "999"])

    assert exit_code == 1 and capsys.readouterr().out.startswith("not_found=")


def test_cli_get_rejects_non_numeric_id(cli_store: EntityStore, capsys) -> None:
    """CLI get should report invalid ids instead of failing with a traceback."""
    exit_code = main(["get", "Book", "abc"])

    assert exit_code == 1 and capsys.readouterr().out.startswith("invalid_id=")


def test_cli_list_prints_page_and_token(cli_store: EntityStore, capsys) -> None:
    """CLI list should print entities then the continuation token."""
    for index in range(3):
        cli_store.create("Book", {"title": f"t{index}"})

    exit_code = main(["list", "Book", "--limit", "2"])
    lines = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0 and len(lines) == 3 and lines[-1] != "next_token=-"


def test_cli_reserve_id_and_delete(cli_store: EntityStore, capsys) -> None:
    """CLI reserve-id should print an id that delete accepts."""
    main(["reserve-id", "Book"])
    reserved_id = capsys.readouterr().out.strip()

    exit_code = main(["delete", "Book", reserved_id])

    assert exit_code == 0 and capsys.readouterr().out.strip() == f"deleted=Book/{reserved_id}"


def test_cli_reports_backend_errors(
    cli_store: EntityStore,
    fake_client: FakeDatastoreClient,
    capsys,
) -> None:
    """Client failures should print backend_error and exit 1."""
    fake_client.failure = PermissionDenied("no access")

    exit_code = main(["reserve-id", "Book"])

    assert exit_code == 1 and capsys.readouterr().out.startswith("backend_error=")


def test_cli_put_rejects_malformed_assignment(cli_store: EntityStore) -> None:
    """Malformed --set values should exit through argparse."""
    with pytest.raises(SystemExit):
        main(["put", "Book", "--set", "missing-separator"])


def test_cli_reports_config_errors(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    """Invalid configuration should print config_error and exit 1."""
    monkeypatch.setenv("KINDSTORE_PAGE_LIMIT", "not-a-number")

    exit_code = main(["reserve-id", "Book"])

    assert exit_code == 1 and capsys.readouterr().out.startswith("config_error=")
