"""Paginated listing controller.

Owns the state of one listing view: the loaded properties, the current page
and filters, the pagination metadata returned by the backend, and the
loading/error flags a UI renders from. Public operations never raise; a
failure is reported through ``error`` and the previously loaded page stays
visible.
"""

from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx

from listings.core.config import settings
from listings.core.exceptions import ApiError
from listings.core.http import create_client
from listings.core.logging import get_logger
from listings.schemas.property import Property, PropertyWrite
from listings.schemas.search import PaginationInfo, SearchFilters
from listings.services.property_service import FETCH_ERRORS, PropertyService

logger = get_logger(__name__)

FETCH_FAILED = "Failed to load properties"
NOT_AUTHENTICATED = "User not authenticated"


def describe_error(exc: BaseException, default: str = FETCH_FAILED) -> str:
    """Turn a fetch failure into the message shown to the user."""
    if isinstance(exc, ApiError):
        return exc.message
    if isinstance(exc, httpx.TimeoutException):
        return f"Request timed out: {exc}" if str(exc) else "Request timed out"
    return str(exc) or default


# A validated SearchFilters, or a plain mapping of wire keys sent as given
Filters = SearchFilters | dict[str, Any]


def _as_filters(filters: SearchFilters | Mapping[str, Any] | None) -> Filters:
    if filters is None:
        return SearchFilters()
    if isinstance(filters, SearchFilters):
        return filters
    return dict(filters)


def _matches(prop: Property, identifier: str) -> bool:
    return identifier in (prop.id, prop.db_id, prop.reference)


class ListingController:
    """State holder for a paginated (optionally infinite-scroll) listing view."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        page_size: int | None = None,
        infinite_scroll: bool = False,
        auto_load: bool = True,
        timeout: float | None = None,
    ) -> None:
        self._owns_client = client is None
        self.client = client if client is not None else create_client()
        self.service = PropertyService(self.client, timeout=timeout)
        self.page_size = page_size if page_size is not None else settings.PAGE_SIZE
        self.infinite_scroll = infinite_scroll
        self.auto_load = auto_load

        self.properties: list[Property] = []
        self.current_page = 1
        self.current_filters: Filters = SearchFilters()
        self.pagination: PaginationInfo | None = None
        self.loading = False
        self.error: str | None = None

    @classmethod
    def infinite(cls, client: httpx.AsyncClient | None = None, **kwargs: Any) -> "ListingController":
        """Controller that appends pages as the user scrolls."""
        kwargs.setdefault("page_size", settings.INFINITE_PAGE_SIZE)
        return cls(client, infinite_scroll=True, **kwargs)

    async def __aenter__(self) -> "ListingController":
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def start(self) -> None:
        """Load the first page when auto loading is enabled."""
        if self.auto_load:
            await self.fetch()

    async def close(self) -> None:
        """Close the HTTP client if this controller created it."""
        if self._owns_client:
            await self.client.aclose()

    @property
    def has_more(self) -> bool:
        """Whether another page exists after the current one."""
        return self.pagination.has_next_page if self.pagination is not None else False

    @property
    def featured_properties(self) -> list[Property]:
        """Loaded listings that are both featured and active."""
        return [p for p in self.properties if p.is_featured and p.is_active]

    async def fetch(
        self,
        filters: SearchFilters | Mapping[str, Any] | None = None,
        page: int = 1,
        append: bool = False,
    ) -> None:
        """Fetch a page and update state.

        On failure ``error`` is set and the loaded properties, pagination and
        current page/filters are left as they were.
        """
        search_filters = _as_filters(filters)
        self.loading = True
        self.error = None
        try:
            result = await self.service.list_properties(search_filters, page, self.page_size)
        except FETCH_ERRORS as e:
            self.error = describe_error(e)
            logger.error("Error fetching properties (page %d): %s", page, self.error)
            return
        finally:
            self.loading = False

        if append and self.infinite_scroll:
            self.properties = [*self.properties, *result.properties]
        else:
            self.properties = list(result.properties)
        self.pagination = result.pagination
        self.current_page = page
        self.current_filters = search_filters
        logger.info("Loaded %d properties (page %d)", len(result.properties), page)

    async def load_more(self) -> None:
        """Append the next page; no-op without a next page or while a fetch is running."""
        if not self.has_more or self.loading:
            return
        await self.fetch(self.current_filters, self.current_page + 1, append=True)

    async def refresh(self) -> None:
        """Re-fetch the current page with the current filters."""
        await self.fetch(self.current_filters, self.current_page, append=False)

    async def search(
        self,
        filters: SearchFilters | Mapping[str, Any] | None,
        page: int = 1,
    ) -> None:
        """Run a new search, replacing the loaded properties."""
        await self.fetch(filters, page, append=False)

    async def add_property(
        self,
        data: PropertyWrite | Mapping[str, Any],
        token: str | None,
    ) -> Property | None:
        """Create a listing and put it at the top of the loaded list."""
        if not token:
            self.error = NOT_AUTHENTICATED
            return None

        self.loading = True
        try:
            created = await self.service.create_property(data, token)
        except FETCH_ERRORS as e:
            self.error = describe_error(e, "Error creating property")
            logger.error("Error creating property: %s", self.error)
            return None
        finally:
            self.loading = False

        self.properties = [created, *self.properties]
        self.error = None
        return created

    async def update_property(
        self,
        identifier: str,
        changes: PropertyWrite | Mapping[str, Any],
        token: str | None,
    ) -> Property | None:
        """Update a listing and merge the result into the loaded list."""
        if not token:
            self.error = NOT_AUTHENTICATED
            return None

        self.loading = True
        try:
            updated = await self.service.update_property(identifier, changes, token)
        except FETCH_ERRORS as e:
            self.error = describe_error(e, "Error updating property")
            logger.error("Error updating property %s: %s", identifier, self.error)
            return None
        finally:
            self.loading = False

        self.properties = [updated if _matches(p, identifier) else p for p in self.properties]
        self.error = None
        return updated

    async def delete_property(self, identifier: str, token: str | None) -> bool:
        """Delete a listing and drop it from the loaded list."""
        if not token:
            self.error = NOT_AUTHENTICATED
            return False

        self.loading = True
        try:
            await self.service.delete_property(identifier, token)
        except FETCH_ERRORS as e:
            self.error = describe_error(e, "Error deleting property")
            logger.error("Error deleting property %s: %s", identifier, self.error)
            return False
        finally:
            self.loading = False

        self.properties = [p for p in self.properties if not _matches(p, identifier)]
        self.error = None
        return True
