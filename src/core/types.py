"""Shared typed models.

This module defines the entity and property shapes exchanged between
the format translator, the entity store, and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

Entity = dict[str, Any]
"""Application-side entity: flat property mapping plus ``id`` once persisted."""

EntityId = int | str

PageToken = str | Literal[False]
"""Continuation cursor, or ``False`` once a listing is exhausted."""


@dataclass(frozen=True)
class StoreProperty:
    """One property in the store's extended write format.

    Attributes:
        name: Property name.
        value: Property value, passed to the store unchanged.
        exclude_from_indexes: Whether the store should skip indexing it.
    """

    name: str
    value: Any
    exclude_from_indexes: bool = False
