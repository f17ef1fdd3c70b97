"""Cart-count badge shown in the page header."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from opostore._constants import BADGE_COUNT_CAP, CART_STORAGE_KEY
from opostore.exceptions import StorageError
from opostore.formatting import format_badge_count, parse_leading_int
from opostore.storage.area import StorageHandle
from opostore.sync.channel import CartSyncChannel

_logger = logging.getLogger(__name__)


def read_cart_count(handle: StorageHandle, key: str = CART_STORAGE_KEY) -> int:
    """Sum line quantities straight from storage.

    Unavailable or corrupt storage counts as an empty cart.
    """
    try:
        raw = handle.get_item(key)
        lines = json.loads(raw) if raw else []
    except (StorageError, json.JSONDecodeError):
        _logger.warning("Error reading cart for badge count", exc_info=True)
        return 0
    if not isinstance(lines, list):
        return 0
    total = 0
    for line in lines:
        if isinstance(line, dict):
            quantity = parse_leading_int(line.get("quantity"))
            total += quantity if quantity and quantity > 0 else 0
    return total


class CartCountBadge:
    """Keeps a cart item count current and renders the badge label.

    Nothing renders until :meth:`mark_client_ready` confirms the context can
    reach persistent storage, so a pre-rendered shell and the live page
    produce the same first output.
    """

    def __init__(
        self,
        handle: StorageHandle,
        channel: CartSyncChannel,
        *,
        key: str = CART_STORAGE_KEY,
        cap: int = BADGE_COUNT_CAP,
        on_change: Callable[[int], None] | None = None,
    ) -> None:
        self._handle = handle
        self._key = key
        self._cap = cap
        self._on_change = on_change
        self._count = 0
        self._client_ready = False
        self._unsubscribe = channel.subscribe(self.refresh)

    @property
    def count(self) -> int:
        return self._count

    @property
    def client_ready(self) -> bool:
        return self._client_ready

    def mark_client_ready(self) -> None:
        self._client_ready = True
        self.refresh()

    def refresh(self) -> None:
        count = read_cart_count(self._handle, self._key)
        changed = count != self._count
        self._count = count
        if changed and self._on_change is not None:
            self._on_change(count)

    def render(self) -> str | None:
        """Badge label, or ``None`` when nothing should be shown."""
        if not self._client_ready or self._count == 0:
            return None
        return format_badge_count(self._count, cap=self._cap)

    def close(self) -> None:
        self._unsubscribe()
