"""Entity access facade over the Datastore client.

This module exposes create, read, update, delete, list, and id
reservation for any entity kind. Each call is a single request to the
store; failures surface as typed errors without local retries.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from core.config import KindstoreConfig
from core.constants import ID_PROPERTY, NON_INDEXED_PROPERTIES
from core.errors import BackendError, EntityNotFoundError, KindstoreError
from core.logging_config import get_logger
from core.types import Entity, EntityId, PageToken
from store.datastore_client import build_entity, create_datastore_client
from store.entity_format import (
    entity_id_from_key,
    from_store_format,
    parse_entity_id,
    to_store_format,
)

_LOGGER = get_logger(__name__)


class EntityStore:
    """Stateless CRUD facade bound to one shared store client.

    The client is created once per process and injected here; the store
    never mutates its configuration.
    """

    def __init__(self, client: Any, config: KindstoreConfig | None = None) -> None:
        """Initialize the facade.

        Args:
            client: Datastore client, or any object with the same surface.
            config: Optional runtime configuration for defaults.
        """
        self._client = client
        self._config = config or KindstoreConfig.from_env()

    @classmethod
    def from_config(cls, config: KindstoreConfig | None = None) -> "EntityStore":
        """Create a facade with a freshly built Datastore client.

        Args:
            config: Optional runtime configuration.

        Returns:
            Entity store bound to a new client.
        """
        resolved_config = config or KindstoreConfig.from_env()
        return cls(create_datastore_client(resolved_config), resolved_config)

    @property
    def client(self) -> Any:
        """Underlying store client."""
        return self._client

    def create(self, kind: str, data: Mapping[str, Any]) -> Entity:
        """Persist a new entity under a store-allocated id.

        Args:
            kind: Entity kind.
            data: Entity properties.

        Returns:
            Saved entity including its new ``id``.

        Raises:
            BackendError: If the store rejects the write.
        """
        return self.update(kind, None, data)

    def read(self, kind: str, entity_id: EntityId) -> Entity:
        """Load one entity by id.

        Args:
            kind: Entity kind.
            entity_id: Numeric id or numeric string.

        Returns:
            Translated entity.

        Raises:
            EntityNotFoundError: If no record exists at the key.
            BackendError: If the store call fails.
        """
        numeric_id = parse_entity_id(entity_id)
        with _backend_call("get", kind):
            record = self._client.get(self._client.key(kind, numeric_id))
        if record is None:
            _LOGGER.info("entity_missing", kind=kind, entity_id=numeric_id)
            raise EntityNotFoundError(kind, numeric_id)
        _LOGGER.debug("entity_read", kind=kind, entity_id=numeric_id)
        return from_store_format(record)

    def update(
        self,
        kind: str,
        entity_id: EntityId | None,
        data: Mapping[str, Any],
    ) -> Entity:
        """Create or fully replace an entity.

        The stored record is overwritten as a whole: properties missing from
        ``data`` are dropped, not merged.

        Args:
            kind: Entity kind.
            entity_id: Target id; falsy values allocate a new one.
            data: Entity properties. ``id`` entries are ignored.

        Returns:
            Copy of ``data`` with ``id`` set from the committed key.

        Raises:
            BackendError: If the store rejects the write.
        """
        numeric_id = parse_entity_id(entity_id) if entity_id else None
        properties = to_store_format(data, NON_INDEXED_PROPERTIES)
        with _backend_call("put", kind):
            if numeric_id is None:
                key = self._client.key(kind)
            else:
                key = self._client.key(kind, numeric_id)
            entity = build_entity(key, properties)
            self._client.put(entity)
        saved: Entity = dict(data)
        saved[ID_PROPERTY] = entity_id_from_key(entity.key)
        _LOGGER.info("entity_saved", kind=kind, entity_id=saved[ID_PROPERTY])
        return saved

    def delete(self, kind: str, entity_id: EntityId) -> None:
        """Delete one entity by id.

        Args:
            kind: Entity kind.
            entity_id: Numeric id or numeric string.

        Raises:
            BackendError: If the store call fails.
        """
        numeric_id = parse_entity_id(entity_id)
        with _backend_call("delete", kind):
            self._client.delete(self._client.key(kind, numeric_id))
        _LOGGER.info("entity_deleted", kind=kind, entity_id=numeric_id)

    def reserve_id(self, kind: str) -> int:
        """Allocate an id by persisting an empty entity.

        Args:
            kind: Entity kind.

        Returns:
            Store-assigned numeric id.

        Raises:
            BackendError: If the store rejects the write.
        """
        with _backend_call("put", kind):
            entity = build_entity(self._client.key(kind), [])
            self._client.put(entity)
        reserved_id = entity.key.id
        _LOGGER.info("entity_id_reserved", kind=kind, entity_id=reserved_id)
        return reserved_id

    def list_entities(
        self,
        kind: str,
        limit: int | None = None,
        token: str | bytes | None = None,
        order: Sequence[str] = (),
    ) -> tuple[list[Entity], PageToken]:
        """Fetch one page of entities.

        Args:
            kind: Entity kind.
            limit: Maximum entities per page; config default when omitted.
            token: Cursor from a previous page; start of collection when empty.
            order: Optional property names to sort by, ``-`` for descending.

        Returns:
            Pair of translated entities and the next cursor, or ``False``
            when no more results exist.

        Raises:
            BackendError: If the query fails.
        """
        page_limit = limit if limit is not None else self._config.page_limit
        with _backend_call("query", kind):
            query = self._client.query(kind=kind, order=list(order))
            query_iterator = query.fetch(limit=page_limit, start_cursor=token or None)
            page = next(query_iterator.pages, [])
            entities = [from_store_format(record) for record in page]
            next_token = _decode_token(query_iterator.next_page_token)
        _LOGGER.debug(
            "entity_page_listed",
            kind=kind,
            entity_count=len(entities),
            has_more=next_token is not False,
        )
        return entities, next_token


@contextmanager
def _backend_call(operation: str, kind: str) -> Iterator[None]:
    """Wrap store-client failures into ``BackendError``.

    Args:
        operation: Client operation name for error context.
        kind: Entity kind for error context.

    Raises:
        BackendError: If the wrapped call raises a non-Kindstore error.
    """
    try:
        yield
    except KindstoreError:
        raise
    except Exception as error:
        _LOGGER.error("backend_call_failed", operation=operation, kind=kind, error=str(error))
        raise BackendError(operation, kind, error) from error


def _decode_token(raw_token: str | bytes | None) -> PageToken:
    """Normalize the client's page token.

    Args:
        raw_token: Cursor bytes or string from the query iterator.

    Returns:
        Decoded cursor string, or ``False`` when exhausted.
    """
    if not raw_token:
        return False
    if isinstance(raw_token, bytes):
        return raw_token.decode("utf-8")
    return raw_token
