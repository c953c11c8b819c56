"""Google Cloud Datastore client helpers.

This module encapsulates client creation and native entity assembly.
It is shared by the entity store and the CLI.
"""

from __future__ import annotations

from typing import Any, Sequence

from google.auth.exceptions import DefaultCredentialsError
from google.cloud import datastore

from core.config import KindstoreConfig
from core.errors import KindstoreConfigError
from core.types import StoreProperty


def create_datastore_client(config: KindstoreConfig) -> datastore.Client:
    """Create the process-scoped Datastore client.

    Args:
        config: Runtime config with optional project and namespace.

    Returns:
        Datastore client. ``DATASTORE_EMULATOR_HOST`` is honoured by the
        client library itself.

    Raises:
        KindstoreConfigError: If no Google Cloud credentials can be found.
    """
    client_kwargs: dict[str, str] = {}
    if config.project_id:
        client_kwargs["project"] = config.project_id
    if config.namespace:
        client_kwargs["namespace"] = config.namespace
    try:
        return datastore.Client(**client_kwargs)
    except DefaultCredentialsError as error:
        raise KindstoreConfigError(
            f"Failed to create Datastore client: {error}. "
            "Set GOOGLE_APPLICATION_CREDENTIALS or DATASTORE_EMULATOR_HOST."
        ) from error


def build_entity(key: Any, properties: Sequence[StoreProperty]) -> datastore.Entity:
    """Assemble a native entity from translated properties.

    Args:
        key: Complete or partial Datastore key.
        properties: Properties in the store's extended format.

    Returns:
        Entity ready for ``client.put``.
    """
    excluded_names = [item.name for item in properties if item.exclude_from_indexes]
    entity = datastore.Entity(key=key, exclude_from_indexes=excluded_names)
    entity.update({item.name: item.value for item in properties})
    return entity
