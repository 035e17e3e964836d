"""Translation of search filters into listing query parameters."""

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any
from urllib.parse import urlencode

from listings.schemas.search import SearchFilters


def stringify(value: Any) -> str:
    """Render a query value without locale formatting."""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        # shortest round-trip digits, in plain notation
        return format(Decimal(repr(value)), "f")
    return str(value)


def build_listing_params(
    filters: SearchFilters | Mapping[str, Any] | None,
    page: int,
    limit: int,
) -> list[tuple[str, str]]:
    """Build ordered query parameters for ``GET /properties``.

    ``page`` and ``limit`` come first, followed by every filter whose value is
    neither None nor an empty string, in the order the filters were given.
    Zero is a valid value and is kept.
    """
    params = [("page", stringify(page)), ("limit", stringify(limit))]
    if filters is None:
        return params

    for key, value in filters.items():
        if value is None or value == "":
            continue
        params.append((key, stringify(value)))
    return params


def build_listing_query(
    filters: SearchFilters | Mapping[str, Any] | None,
    page: int,
    limit: int,
) -> str:
    """Build the url-encoded query string for ``GET /properties``."""
    return urlencode(build_listing_params(filters, page, limit))
