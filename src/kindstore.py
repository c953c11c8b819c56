"""Public SDK surface for Kindstore.

This module provides a stable import path for application code.
It re-exports the entity store, translators, config, and errors.
"""

from __future__ import annotations

from core.config import KindstoreConfig
from core.errors import (
    BackendError,
    EntityIdError,
    EntityNotFoundError,
    KindstoreConfigError,
    KindstoreError,
)
from core.types import Entity, StoreProperty
from store.entity_format import from_store_format, parse_entity_id, to_store_format
from store.entity_store import EntityStore

__all__ = [
    "BackendError",
    "Entity",
    "EntityIdError",
    "EntityNotFoundError",
    "EntityStore",
    "KindstoreConfig",
    "KindstoreConfigError",
    "KindstoreError",
    "StoreProperty",
    "from_store_format",
    "parse_entity_id",
    "to_store_format",
]
