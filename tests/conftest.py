"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from tests.fake_backend import BASE_URL, create_app, make_property


@pytest.fixture
def records() -> list[dict[str, Any]]:
    """Thirty active listings; every fourth one is featured."""
    return [make_property(i) for i in range(1, 31)]


@pytest.fixture
def backend(records: list[dict[str, Any]]) -> FastAPI:
    """Fake backend serving ``records``."""
    return create_app(records)


@pytest_asyncio.fixture
async def client(backend: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client routed to the fake backend."""
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=backend), base_url=BASE_URL) as c:
        yield c
