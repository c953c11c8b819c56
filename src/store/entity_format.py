"""Entity format translation helpers.

This module converts between Datastore records and the flat dictionaries
the application works with. Keys travel separately from properties: the
read path synthesizes ``id`` from the key and the write path never emits it.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Iterable

from core.constants import DATA_FIELD, ID_PROPERTY, KEY_FIELD
from core.errors import EntityIdError
from core.types import Entity, EntityId, StoreProperty

_DECIMAL_ID_PATTERN = re.compile(r"[0-9]+")


def from_store_format(record: Mapping[str, Any]) -> Entity:
    """Translate a store record into an application entity.

    Record properties are copied first, then any nested ``data`` mapping is
    merged on top. When the record carries a key, its identifier replaces
    any ``id`` found in the properties.

    Args:
        record: Native Datastore entity, or a mapping with optional
            ``key`` and ``data`` entries.

    Returns:
        New flat entity dictionary.
    """
    entity: Entity = {
        name: value for name, value in record.items() if name not in (KEY_FIELD, DATA_FIELD)
    }
    nested_data = record.get(DATA_FIELD)
    if isinstance(nested_data, Mapping):
        entity.update(nested_data)
    elif DATA_FIELD in record:
        entity[DATA_FIELD] = nested_data
    entity_id = entity_id_from_key(_record_key(record))
    if entity_id is not None:
        entity[ID_PROPERTY] = entity_id
    return entity


def to_store_format(
    data: Mapping[str, Any],
    non_indexed: Iterable[str] = (),
) -> list[StoreProperty]:
    """Translate an application entity into store properties.

    Args:
        data: Flat entity mapping.
        non_indexed: Property names to exclude from store indexes.

    Returns:
        Properties in the mapping's iteration order, without ``None``
        values and without ``id``.
    """
    excluded_names = frozenset(non_indexed)
    properties: list[StoreProperty] = []
    for name, value in data.items():
        if value is None or name == ID_PROPERTY:
            continue
        properties.append(
            StoreProperty(
                name=name,
                value=value,
                exclude_from_indexes=name in excluded_names,
            )
        )
    return properties


def entity_id_from_key(key: Any) -> EntityId | None:
    """Return the identifier component of a store key.

    Args:
        key: Datastore ``Key``, a ``[kind, id, ...]`` path, or ``None``.
            Odd-length paths are partial and carry no identifier.

    Returns:
        Numeric id or string name, or ``None`` for missing/partial keys.
    """
    if key is None:
        return None
    if hasattr(key, "id_or_name"):
        return key.id_or_name
    if isinstance(key, Sequence) and not isinstance(key, str):
        if key and len(key) % 2 == 0:
            return key[-1]
    return None


def parse_entity_id(value: EntityId) -> int:
    """Parse an entity id parameter as a base-10 integer.

    Args:
        value: Integer id or numeric string.

    Returns:
        Parsed integer id.

    Raises:
        EntityIdError: If the value is not a run of ASCII digits.
    """
    if isinstance(value, bool):
        raise EntityIdError(f"Invalid entity id {value!r}: expected a base-10 integer.")
    if isinstance(value, int):
        return value
    digits = str(value).strip()
    if not _DECIMAL_ID_PATTERN.fullmatch(digits):
        raise EntityIdError(
            f"Invalid entity id {value!r}: expected a base-10 integer. "
            "Pass the numeric id returned by create or reserve-id."
        )
    return int(digits, 10)


def _record_key(record: Mapping[str, Any]) -> Any:
    """Resolve the key carried by a record.

    Args:
        record: Native entity or plain mapping.

    Returns:
        Attribute key when present, else the ``key`` entry, else ``None``.
    """
    attribute_key = getattr(record, KEY_FIELD, None)
    if attribute_key is not None:
        return attribute_key
    return record.get(KEY_FIELD)
