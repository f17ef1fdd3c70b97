"""Async catalog client."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from opostore.catalog.products import build_product, slug_search_terms
from opostore.catalog.transport import CatalogTransport, RestTransport
from opostore.config import StoreConfig
from opostore.exceptions import OpoConfigError, OpoError, ProductNotFoundError
from opostore.models.product import Product

_logger = logging.getLogger(__name__)


class CatalogClient:
    """Looks products up by id or by item-page slug.

    Usage::

        async with CatalogClient(config) as catalog:
            product = await catalog.resolve_slug("red-runner")
    """

    def __init__(
        self,
        config: StoreConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: CatalogTransport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._owns_transport = transport is None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CatalogClient:
        if self._owns_transport:
            if not self._config.catalog_url:
                raise OpoConfigError("catalog_url is not configured")
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = RestTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if self._owns_transport:
            self._transport = None

    def _require_transport(self) -> CatalogTransport:
        if self._transport is None:
            raise OpoError("Client not initialized. Use 'async with CatalogClient(...) as catalog:'")
        return self._transport

    async def _first_row(self, filters: dict[str, str]) -> dict[str, Any] | None:
        rows = await self._require_transport().select(self._config.catalog_table, filters, limit=1)
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_product(self, product_id: str) -> Product:
        """Fetch one product by id.

        Raises
        ------
        ProductNotFoundError
            If no row has that id.
        """
        row = await self._first_row({"id": f"eq.{product_id}"})
        if row is None:
            raise ProductNotFoundError(f"No product with id {product_id!r}", product_id=product_id)
        return build_product(row)

    async def resolve_slug(self, slug: str) -> Product:
        """Find the product an item-page slug refers to.

        Exact case-insensitive name matches are tried for each slug variant
        first, then a single substring match on the spaced slug.

        Raises
        ------
        ProductNotFoundError
            If neither strategy matches.
        """
        if not slug.strip():
            raise ProductNotFoundError("Empty slug", slug=slug)

        for term in slug_search_terms(slug):
            row = await self._first_row({"name": f"ilike.{term}"})
            if row is not None:
                return build_product(row, slug)

        spaced = slug.replace("-", " ")
        row = await self._first_row({"name": f"ilike.%{spaced}%"})
        if row is not None:
            _logger.debug("Slug %r resolved by substring match to %r", slug, row.get("name"))
            return build_product(row, slug)

        raise ProductNotFoundError(f"No product matches slug {slug!r}", slug=slug)
