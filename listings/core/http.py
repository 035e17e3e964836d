"""HTTP client configuration for the backend REST API."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from listings.core.config import settings

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def create_client(**overrides: Any) -> httpx.AsyncClient:
    """Create an AsyncClient bound to the configured API base URL.

    Keyword arguments are passed through to ``httpx.AsyncClient`` and win over
    the defaults (tests use this to inject a transport).
    """
    options: dict[str, Any] = {
        "base_url": settings.API_BASE_URL,
        "headers": DEFAULT_HEADERS,
        "timeout": settings.REQUEST_TIMEOUT,
    }
    options.update(overrides)
    return httpx.AsyncClient(**options)


@asynccontextmanager
async def get_client(**overrides: Any) -> AsyncIterator[httpx.AsyncClient]:
    """Yield a client and close it afterwards."""
    client = create_client(**overrides)
    try:
        yield client
    finally:
        await client.aclose()
