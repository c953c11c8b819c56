"""In-memory stand-in for the Datastore client used by unit tests."""

from __future__ import annotations

import base64
from typing import Any, Iterator

from google.cloud import datastore

_FIRST_ALLOCATED_ID = 5001


class FakeDatastoreClient:
    """Implements the client calls EntityStore relies on.

    Keys and entities are real ``google.cloud.datastore`` objects so the
    translator sees production types. Setting ``failure`` makes every
    subsequent call raise it.
    """

    def __init__(self, project: str = "test-project") -> None:
        self.project = project
        self.failure: Exception | None = None
        self._records: dict[tuple[Any, ...], datastore.Entity] = {}
        self._next_id = _FIRST_ALLOCATED_ID

    def key(self, *path_args: Any) -> datastore.Key:
        return datastore.Key(*path_args, project=self.project)

    def get(self, key: datastore.Key) -> datastore.Entity | None:
        self._raise_failure()
        stored = self._records.get(key.flat_path)
        return _copy_entity(stored) if stored is not None else None

    def put(self, entity: datastore.Entity) -> None:
        self._raise_failure()
        if entity.key.is_partial:
            entity.key = entity.key.completed_key(self._next_id)
            self._next_id += 1
        self._records[entity.key.flat_path] = _copy_entity(entity)

    def delete(self, key: datastore.Key) -> None:
        self._raise_failure()
        self._records.pop(key.flat_path, None)

    def query(self, kind: str, order: list[str] | None = None) -> "FakeQuery":
        return FakeQuery(self, kind, list(order or ()))

    def stored(self, kind: str, entity_id: int) -> datastore.Entity | None:
        """Return the raw stored entity, bypassing failure injection."""
        return self._records.get((kind, entity_id))

    def records_of_kind(self, kind: str) -> list[datastore.Entity]:
        self._raise_failure()
        return [_copy_entity(item) for path, item in self._records.items() if path[0] == kind]

    def _raise_failure(self) -> None:
        if self.failure is not None:
            raise self.failure


class FakeQuery:
    """Kind query with offset-encoded cursors."""

    def __init__(self, client: FakeDatastoreClient, kind: str, order: list[str]) -> None:
        self._client = client
        self._kind = kind
        self._order = order

    def fetch(
        self,
        limit: int | None = None,
        start_cursor: str | bytes | None = None,
    ) -> "FakeQueryIterator":
        records = self._client.records_of_kind(self._kind)
        for property_name in reversed(self._order):
            descending = property_name.startswith("-")
            name = property_name.lstrip("-")
            records.sort(key=lambda item: item.get(name), reverse=descending)
        offset = _decode_cursor(start_cursor)
        end = len(records) if limit is None else offset + limit
        page = records[offset:end]
        next_page_token = _encode_cursor(end) if end < len(records) else None
        return FakeQueryIterator(page, next_page_token)


class FakeQueryIterator:
    """Single-page iterator mirroring ``Iterator.pages``/``next_page_token``."""

    def __init__(self, page: list[datastore.Entity], next_page_token: bytes | None) -> None:
        self._page = page
        self.next_page_token = next_page_token

    @property
    def pages(self) -> Iterator[list[datastore.Entity]]:
        yield self._page


def _copy_entity(entity: datastore.Entity) -> datastore.Entity:
    copied = datastore.Entity(key=entity.key, exclude_from_indexes=list(entity.exclude_from_indexes))
    copied.update(entity)
    return copied


def _encode_cursor(offset: int) -> bytes:
    return base64.urlsafe_b64encode(str(offset).encode("utf-8"))


def _decode_cursor(cursor: str | bytes | None) -> int:
    if not cursor:
        return 0
    raw_cursor = cursor.encode("utf-8") if isinstance(cursor, str) else cursor
    return int(base64.urlsafe_b64decode(raw_cursor).decode("utf-8"))
