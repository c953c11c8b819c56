"""Runtime configuration model for Kindstore.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_PAGE_LIMIT, NAMESPACE_ENV, PAGE_LIMIT_ENV, PROJECT_ID_ENV
from core.errors import KindstoreConfigError


@dataclass(frozen=True)
class KindstoreConfig:
    """Validated runtime configuration.

    Attributes:
        project_id: Optional Google Cloud project; inferred by the client when unset.
        namespace: Optional Datastore namespace for all keys and queries.
        page_limit: Default number of entities returned per list page.
    """

    project_id: str | None
    namespace: str | None
    page_limit: int

    @classmethod
    def from_env(cls) -> "KindstoreConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            KindstoreConfigError: If environment values are invalid.
        """
        project_id = os.getenv(PROJECT_ID_ENV) or None
        namespace = os.getenv(NAMESPACE_ENV) or None
        page_limit_value = os.getenv(PAGE_LIMIT_ENV, str(DEFAULT_PAGE_LIMIT))
        return cls(
            project_id=project_id,
            namespace=namespace,
            page_limit=_parse_page_limit(page_limit_value),
        )


def _parse_page_limit(raw_value: str) -> int:
    """Parse the default page limit environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive integer limit.

    Raises:
        KindstoreConfigError: If value is not a positive integer.
    """
    try:
        page_limit = int(raw_value)
    except ValueError as error:
        raise KindstoreConfigError(
            f"Invalid {PAGE_LIMIT_ENV} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {PAGE_LIMIT_ENV} to a positive number."
        ) from error
    if page_limit < 1:
        raise KindstoreConfigError(
            f"Invalid {PAGE_LIMIT_ENV} value: expected a positive integer, got {page_limit}."
        )
    return page_limit
