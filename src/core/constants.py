"""Core constants used across Kindstore modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

ID_PROPERTY = "id"
KEY_FIELD = "key"
DATA_FIELD = "data"
NON_INDEXED_PROPERTIES = ("description",)
DEFAULT_PAGE_LIMIT = 10
NOT_FOUND_CODE = 404
NOT_FOUND_MESSAGE = "Not found"
PROJECT_ID_ENV = "KINDSTORE_PROJECT_ID"
NAMESPACE_ENV = "KINDSTORE_NAMESPACE"
PAGE_LIMIT_ENV = "KINDSTORE_PAGE_LIMIT"
