"""HTTP transport for a PostgREST-compatible catalog database."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from opostore._constants import USER_AGENT
from opostore._redact import redact_headers
from opostore.config import StoreConfig
from opostore.exceptions import CatalogTransportError

_logger = logging.getLogger(__name__)


class CatalogTransport(Protocol):
    """Structural transport interface used by the catalog client.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`RestTransport`) concrete.
    """

    async def select(self, table: str, filters: Mapping[str, str], *, limit: int = 1) -> list[dict[str, Any]]:
        ...


class RestTransport:
    """Reads rows through the PostgREST ``/rest/v1`` interface."""

    def __init__(self, config: StoreConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _headers(self) -> dict[str, str]:
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if self._config.catalog_api_key:
            headers["apikey"] = self._config.catalog_api_key
            headers["authorization"] = f"Bearer {self._config.catalog_api_key}"
        return headers

    async def select(self, table: str, filters: Mapping[str, str], *, limit: int = 1) -> list[dict[str, Any]]:
        """Fetch up to *limit* rows of *table* matching PostgREST *filters*.

        *filters* map column names to operator expressions, e.g.
        ``{"name": "ilike.red shoe"}``.
        """
        endpoint = f"/rest/v1/{table}"
        url = f"{self._config.catalog_url.rstrip('/')}{endpoint}"
        params = {"select": "*", **filters, "limit": str(limit)}
        headers = self._headers()

        _logger.debug("GET %s params=%s headers=%s", url, params, redact_headers(headers))

        try:
            timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)
            async with self._http.get(url, params=params, headers=headers, timeout=timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise CatalogTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except CatalogTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise CatalogTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            rows = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CatalogTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(rows, list):
            raise CatalogTransportError(
                f"Expected a list of rows from {endpoint}",
                endpoint=endpoint,
            )
        return [row for row in rows if isinstance(row, dict)]
