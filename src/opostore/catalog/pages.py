"""Item page loading with periodic revalidation.

A found page is cached per slug and served until it is older than the
revalidation interval. A stale page is still served immediately while a
background refresh replaces it; a refresh that finds the product gone
drops the cached page, a refresh that fails keeps it.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, ValidationError

from opostore._constants import REVALIDATE_SECONDS
from opostore.catalog.client import CatalogClient
from opostore.exceptions import CatalogError, ProductNotFoundError
from opostore.models.product import Product

_logger = logging.getLogger(__name__)


class ItemPageResult(BaseModel):
    """What an item page renders: a product, or the not-found page."""

    model_config = ConfigDict(frozen=True)

    product: Product | None = None
    not_found: bool = False
    revalidate: float | None = None


@dataclass(slots=True)
class _CachedPage:
    result: ItemPageResult
    fetched_at: float


class ItemPageLoader:
    """Resolves slugs to item pages through a :class:`CatalogClient`."""

    def __init__(
        self,
        client: CatalogClient,
        *,
        revalidate: float = REVALIDATE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._revalidate = revalidate
        self._clock = clock
        self._cache: dict[str, _CachedPage] = {}
        self._refreshing: dict[str, asyncio.Task[None]] = {}

    async def _fetch(self, slug: str) -> ItemPageResult | None:
        """Fetch a page; ``None`` means the lookup failed for another reason than not-found."""
        try:
            product = await self._client.resolve_slug(slug)
        except ProductNotFoundError:
            return ItemPageResult(not_found=True)
        except (CatalogError, ValidationError):
            _logger.error("Error fetching item data for %r", slug, exc_info=True)
            return None
        return ItemPageResult(product=product, revalidate=self._revalidate)

    async def fetch(self, slug: str) -> ItemPageResult:
        """Fetch a page without the cache. Any failure renders as not found."""
        result = await self._fetch(slug)
        return result if result is not None else ItemPageResult(not_found=True)

    async def load(self, slug: str) -> ItemPageResult:
        """Return the page for *slug*, serving cached pages while they are usable."""
        cached = self._cache.get(slug)
        if cached is not None:
            if self._clock() - cached.fetched_at >= self._revalidate:
                self._schedule_refresh(slug)
            return cached.result

        result = await self.fetch(slug)
        if result.product is not None:
            self._cache[slug] = _CachedPage(result, self._clock())
        return result

    def _schedule_refresh(self, slug: str) -> None:
        if slug in self._refreshing:
            return
        task = asyncio.get_running_loop().create_task(self._refresh(slug))
        self._refreshing[slug] = task

    async def _refresh(self, slug: str) -> None:
        try:
            result = await self._fetch(slug)
            if result is None:
                return
            if result.product is None:
                _logger.debug("Item %r disappeared; dropping cached page", slug)
                self._cache.pop(slug, None)
            else:
                self._cache[slug] = _CachedPage(result, self._clock())
        finally:
            self._refreshing.pop(slug, None)

    async def wait_refreshes(self) -> None:
        """Wait for every background refresh currently running."""
        tasks = list(self._refreshing.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def invalidate(self, slug: str | None = None) -> None:
        if slug is None:
            self._cache.clear()
        else:
            self._cache.pop(slug, None)

    async def aclose(self) -> None:
        tasks = list(self._refreshing.values())
        self._refreshing.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
