"""Pytest fixtures shared across repository test runs.

``src`` and the repository root are placed on ``sys.path`` through the
``pythonpath`` pytest option in pyproject.toml.
"""

from __future__ import annotations

import pytest

from core.config import KindstoreConfig
from store.entity_store import EntityStore
from tests.fake_datastore import FakeDatastoreClient


@pytest.fixture
def fake_client() -> FakeDatastoreClient:
    """Fresh in-memory Datastore client."""
    return FakeDatastoreClient()


@pytest.fixture
def entity_store(fake_client: FakeDatastoreClient) -> EntityStore:
    """Entity store bound to the in-memory client."""
    config = KindstoreConfig(project_id="test-project", namespace=None, page_limit=3)
    return EntityStore(fake_client, config)
