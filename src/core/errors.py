"""Kindstore exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Store-client failures are wrapped so callers handle one error family.
"""

from __future__ import annotations

from core.constants import NOT_FOUND_CODE, NOT_FOUND_MESSAGE


class KindstoreError(Exception):
    """Base exception for all Kindstore failures."""


class KindstoreConfigError(KindstoreError):
    """Raised for invalid runtime configuration."""


class EntityIdError(KindstoreError):
    """Raised when an entity id is not a base-10 integer."""


class EntityNotFoundError(KindstoreError):
    """Raised when no record exists at the requested key.

    Attributes:
        code: HTTP-equivalent status code, always 404.
        message: Human-readable failure message.
        kind: Entity kind that was read.
        entity_id: Identifier that was read.
    """

    code = NOT_FOUND_CODE

    def __init__(self, kind: str, entity_id: int | str) -> None:
        self.message = NOT_FOUND_MESSAGE
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{NOT_FOUND_MESSAGE}: {kind}/{entity_id}")


class BackendError(KindstoreError):
    """Raised when the store client fails.

    Attributes:
        operation: Facade operation that issued the call.
        kind: Entity kind the call targeted.
        cause: Original client exception.
    """

    def __init__(self, operation: str, kind: str, cause: Exception) -> None:
        self.operation = operation
        self.kind = kind
        self.cause = cause
        super().__init__(
            f"Datastore {operation} failed for kind '{kind}': {cause}. "
            "Check credentials, project id, and network access to the store."
        )
