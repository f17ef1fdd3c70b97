"""Storefront configuration for opostore."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from opostore._constants import (
    ADDED_FEEDBACK_SECONDS,
    CART_STORAGE_KEY,
    CATALOG_TABLE,
    FLAT_SHIPPING_FEE,
    FREE_SHIPPING_THRESHOLD,
    QUANTITY_UPDATE_DELAY,
    REVALIDATE_SECONDS,
)
from opostore.exceptions import OpoConfigError


def _env_number(env_key: str, value: str, kind: type[int] | type[float]) -> int | float:
    try:
        return kind(value)
    except ValueError as exc:
        raise OpoConfigError(f"{env_key} must be a {kind.__name__}, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class StoreConfig:
    """Storefront configuration.

    Parameters
    ----------
    catalog_url : str
        Base URL of the PostgREST-compatible catalog database. Empty
        disables catalog lookups.
    catalog_api_key : str
        Anonymous API key sent as ``apikey`` and bearer token.
    catalog_table : str
        Table holding catalog rows.
    storage_key : str
        Key the cart is persisted under.
    free_shipping_threshold : int
        Subtotal (won) from which shipping is free, inclusive.
    flat_shipping_fee : int
        Shipping fee (won) charged below the threshold.
    quantity_update_delay : float
        Seconds a cart-page quantity change stays pending before it applies.
    added_feedback_seconds : float
        How long the add-to-cart form reports "added" before resetting.
    revalidate_seconds : float
        Age after which a cached item page is refreshed in the background.
    storage_path : Path or None
        JSON file backing persistent storage. ``None`` keeps storage in memory.
    request_timeout : float
        Total timeout in seconds for one catalog request.
    """

    catalog_url: str = ""
    catalog_api_key: str = ""
    catalog_table: str = CATALOG_TABLE
    storage_key: str = CART_STORAGE_KEY
    free_shipping_threshold: int = FREE_SHIPPING_THRESHOLD
    flat_shipping_fee: int = FLAT_SHIPPING_FEE
    quantity_update_delay: float = QUANTITY_UPDATE_DELAY
    added_feedback_seconds: float = ADDED_FEEDBACK_SECONDS
    revalidate_seconds: float = REVALIDATE_SECONDS
    storage_path: Path | None = None
    request_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.free_shipping_threshold < 0 or self.flat_shipping_fee < 0:
            raise OpoConfigError("shipping amounts must be non-negative")
        if self.quantity_update_delay < 0:
            raise OpoConfigError("quantity_update_delay must be non-negative")

    @classmethod
    def from_env(cls, **overrides: Any) -> StoreConfig:
        """Create configuration from environment variables.

        Reads optional ``OPO_*`` variables. Explicit keyword arguments
        override environment values.

        Raises
        ------
        OpoConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "OPO_CATALOG_URL": "catalog_url",
            "OPO_CATALOG_API_KEY": "catalog_api_key",
            "OPO_CATALOG_TABLE": "catalog_table",
            "OPO_STORAGE_KEY": "storage_key",
        }
        _ENV_NUMBER_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "OPO_FREE_SHIPPING_THRESHOLD": ("free_shipping_threshold", int),
            "OPO_FLAT_SHIPPING_FEE": ("flat_shipping_fee", int),
            "OPO_QUANTITY_UPDATE_DELAY": ("quantity_update_delay", float),
            "OPO_ADDED_FEEDBACK_SECONDS": ("added_feedback_seconds", float),
            "OPO_REVALIDATE_SECONDS": ("revalidate_seconds", float),
            "OPO_REQUEST_TIMEOUT": ("request_timeout", float),
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, (field_name, kind) in _ENV_NUMBER_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val.strip(), kind)

        path_env = env.get("OPO_STORAGE_PATH")
        if path_env and "storage_path" not in overrides:
            config_kwargs["storage_path"] = Path(path_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
