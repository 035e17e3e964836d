"""Featured listings fetch with bounded exponential backoff.

The featured endpoint is unpaginated and historically inconsistent about its
body: it may return a bare array or an object wrapping one. Every failure of
the request or its envelope (HTTP status, transport, JSON, shape) is retried;
after the last attempt the fetch degrades to an empty list. A run that ends
empty because of repeated failures is indistinguishable from a genuinely
empty collection at this boundary; only the runner's ``state`` tells them
apart. A malformed item does not fail the attempt; it is logged and dropped.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from listings.core.config import settings
from listings.core.exceptions import FetchCancelledError, ResponseShapeError
from listings.core.http import get_client
from listings.core.logging import get_logger
from listings.schemas.property import Property, fallback_photos
from listings.services.property_service import FETCH_ERRORS, PropertyService

logger = get_logger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[Any]]


class FeaturedFetchState(str, Enum):
    """Lifecycle of one featured fetch run."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    RETRY_WAIT = "retry_wait"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


class CancellationToken:
    """Cancellation signal shared by every attempt and wait of a run."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first.

        Raises:
            FetchCancelledError: if the token fired before or while waiting.
                The abandoned awaitable is cancelled.

        """
        if self.cancelled:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise FetchCancelledError("Operation cancelled")

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            abandoned = not task.done()
            if abandoned:
                task.cancel()

        if abandoned:
            await asyncio.gather(task, return_exceptions=True)
            raise FetchCancelledError("Operation cancelled")
        return task.result()


def normalize_featured_payload(data: Any) -> list[Any]:
    """Extract the list of featured items from a decoded body.

    A list is used as is. For an object, the first list-valued field wins.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for value in data.values():
            if isinstance(value, list):
                logger.debug("Using array found in response object (%d items)", len(value))
                return value
    raise ResponseShapeError("Unexpected response format")


def normalize_featured_item(item: Any) -> dict[str, Any]:
    """Resolve the item id and make sure it has at least one photo."""
    if not isinstance(item, dict):
        raise ResponseShapeError("Unexpected response format")
    item = dict(item)
    if not item.get("id") and item.get("_id"):
        item["id"] = item["_id"]
    photos = item.get("photos")
    if not isinstance(photos, list) or not photos:
        item["photos"] = fallback_photos()
    return item


class FeaturedFetch:
    """One run of the featured fetch, recording its state and backoff delays."""

    def __init__(
        self,
        service: PropertyService,
        *,
        token: CancellationToken | None = None,
        max_retries: int | None = None,
        backoff: float | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.service = service
        self.token = token if token is not None else CancellationToken()
        self.max_retries = settings.FEATURED_MAX_RETRIES if max_retries is None else max_retries
        self.backoff = settings.FEATURED_BACKOFF if backoff is None else backoff
        self.sleep = sleep

        self.state = FeaturedFetchState.IDLE
        self.attempts = 0
        self.delays: list[float] = []
        self.last_error: str | None = None

    async def _attempt(self) -> list[Property]:
        if self.token.cancelled:
            raise FetchCancelledError("Operation cancelled")

        self.state = FeaturedFetchState.ATTEMPTING
        self.attempts += 1
        logger.debug("Featured fetch attempt %d of %d", self.attempts, self.max_retries + 1)
        try:
            data = await self.token.run(self.service.get_featured_raw())
            items = normalize_featured_payload(data)
        except FetchCancelledError:
            raise
        except FETCH_ERRORS as e:
            self.last_error = str(e) or type(e).__name__
            logger.warning(
                "Featured fetch attempt %d failed: %s",
                self.attempts,
                self.last_error,
                extra={"attempt": self.attempts},
            )
            raise
        return self._parse_items(items)

    def _parse_items(self, items: list[Any]) -> list[Property]:
        properties = []
        for index, item in enumerate(items):
            try:
                properties.append(Property.model_validate(normalize_featured_item(item)))
            except (ResponseShapeError, ValidationError) as e:
                logger.warning("Skipping invalid featured item at index %d: %s", index, e)
        return properties

    async def _wait(self, delay: float) -> None:
        self.state = FeaturedFetchState.RETRY_WAIT
        self.delays.append(delay)
        logger.info(
            "Waiting %.1fs before featured fetch attempt %d",
            delay,
            self.attempts + 1,
            extra={"attempt": self.attempts + 1, "delay": delay},
        )
        await self.token.run(self.sleep(delay))

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type(FETCH_ERRORS)
            & retry_if_not_exception_type(FetchCancelledError),
            wait=wait_exponential(multiplier=self.backoff),
            stop=stop_after_attempt(self.max_retries + 1),
            sleep=self._wait,
            reraise=True,
        )

    async def run(self) -> list[Property]:
        """Fetch featured listings; returns an empty list on exhaustion or cancellation."""
        try:
            properties = await self._retrying()(self._attempt)
        except FetchCancelledError:
            self.state = FeaturedFetchState.CANCELLED
            logger.info("Featured properties fetch cancelled after %d attempt(s)", self.attempts)
            return []
        except FETCH_ERRORS:
            self.state = FeaturedFetchState.EXHAUSTED
            logger.error(
                "Featured properties fetch failed after %d attempts: %s",
                self.attempts,
                self.last_error,
            )
            return []

        self.state = FeaturedFetchState.SUCCESS
        logger.info("%d featured properties loaded", len(properties))
        return properties


async def fetch_featured_properties(
    client: httpx.AsyncClient | None = None,
    *,
    token: CancellationToken | None = None,
    max_retries: int | None = None,
    backoff: float | None = None,
    sleep: Sleep = asyncio.sleep,
) -> list[Property]:
    """Fetch featured listings, retrying transient failures.

    Never raises: exhaustion and cancellation both yield an empty list.
    """
    if client is None:
        async with get_client() as own_client:
            return await fetch_featured_properties(
                own_client,
                token=token,
                max_retries=max_retries,
                backoff=backoff,
                sleep=sleep,
            )

    run = FeaturedFetch(
        PropertyService(client),
        token=token,
        max_retries=max_retries,
        backoff=backoff,
        sleep=sleep,
    )
    return await run.run()
