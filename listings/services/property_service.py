"""Property service wrapping the backend REST endpoints."""

from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from listings.core.config import settings
from listings.core.exceptions import (
    ApiError,
    AuthenticationError,
    ListingsError,
    PropertyNotFoundError,
    ResponseShapeError,
)
from listings.core.logging import get_logger
from listings.schemas.property import Property, PropertyWrite
from listings.schemas.search import PropertyListResponse, SearchFilters
from listings.services.query import build_listing_params

logger = get_logger(__name__)

# Everything a request can fail with short of a programming error
FETCH_ERRORS = (ListingsError, httpx.HTTPError, ValidationError)


def _error_message(response: httpx.Response) -> str | None:
    """Pull the ``error`` field out of an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return None


def raise_for_status(response: httpx.Response, default_message: str | None = None) -> None:
    """Raise the matching ApiError subclass for a non-2xx response."""
    if response.is_success:
        return

    message = _error_message(response)
    if response.status_code == 401:
        raise AuthenticationError(401, message or "Session expired. Please log in again.")
    fallback = default_message or f"HTTP error: {response.status_code} {response.reason_phrase}"
    if response.status_code == 404:
        raise PropertyNotFoundError(404, message or fallback)
    raise ApiError(response.status_code, message or fallback)


def decode_json(response: httpx.Response) -> Any:
    """Decode a JSON body, treating garbage as a shape error."""
    try:
        return response.json()
    except ValueError as e:
        raise ResponseShapeError("Invalid response from API") from e


def _auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class PropertyService:
    """Typed access to the ``/properties`` endpoints.

    Methods raise ``ListingsError`` subclasses or ``httpx.HTTPError``; callers
    that must not raise (the listing controller, the featured fetch) catch them.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float | None = None) -> None:
        self.client = client
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout

    async def list_properties(
        self,
        filters: SearchFilters | Mapping[str, Any] | None,
        page: int,
        limit: int,
    ) -> PropertyListResponse:
        """Fetch one page of listings."""
        params = build_listing_params(filters, page, limit)
        logger.debug("Fetching properties: %s", params)
        response = await self.client.get("/properties", params=params, timeout=self.timeout)
        raise_for_status(response)
        return PropertyListResponse.model_validate(decode_json(response))

    async def get_property(self, identifier: str) -> Property:
        """Fetch a single listing by reference code or database id."""
        response = await self.client.get(f"/properties/{identifier}", timeout=self.timeout)
        raise_for_status(response, "Error fetching property")
        return Property.model_validate(decode_json(response))

    async def get_featured_raw(self) -> Any:
        """Fetch the featured collection without interpreting its shape."""
        response = await self.client.get("/properties/featured", timeout=self.timeout)
        raise_for_status(response)
        return decode_json(response)

    async def create_property(
        self,
        data: PropertyWrite | Mapping[str, Any],
        token: str,
    ) -> Property:
        """Create a listing."""
        payload = data.to_payload() if isinstance(data, PropertyWrite) else dict(data)
        response = await self.client.post(
            "/properties",
            json=payload,
            headers=_auth_headers(token),
            timeout=self.timeout,
        )
        raise_for_status(response, "Error creating property")
        return Property.model_validate(decode_json(response))

    async def update_property(
        self,
        identifier: str,
        changes: PropertyWrite | Mapping[str, Any],
        token: str,
    ) -> Property:
        """Update a listing with a full write model or a partial set of wire fields."""
        payload = changes.to_payload() if isinstance(changes, PropertyWrite) else dict(changes)
        response = await self.client.put(
            f"/properties/{identifier}",
            json=payload,
            headers=_auth_headers(token),
            timeout=self.timeout,
        )
        raise_for_status(response, "Error updating property")
        return Property.model_validate(decode_json(response))

    async def delete_property(self, identifier: str, token: str) -> None:
        """Delete a listing."""
        response = await self.client.delete(
            f"/properties/{identifier}",
            headers=_auth_headers(token),
            timeout=self.timeout,
        )
        raise_for_status(response, "Error deleting property")
