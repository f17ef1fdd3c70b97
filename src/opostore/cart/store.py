"""Persisted cart store.

The store owns the cart blob under one storage key. Every mutation starts
from what is currently stored (another tab may have written since this one
last looked), persists the full list, then broadcasts on the sync channel.
Last write wins; there is no merge across contexts.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from opostore._constants import CART_STORAGE_KEY, FLAT_SHIPPING_FEE, FREE_SHIPPING_THRESHOLD, PLACEHOLDER_IMAGE
from opostore.cart.serialization import deserialize_cart, serialize_cart
from opostore.cart.totals import compute_totals
from opostore.exceptions import StorageReadError, StorageWriteError
from opostore.models.cart import CartLineItem, CartTotals
from opostore.models.product import Product
from opostore.storage.area import StorageHandle
from opostore.sync.channel import CartSyncChannel

_logger = logging.getLogger(__name__)

ADD_FAILED_MESSAGE = "Failed to add item to cart. Please try again."
UPDATE_FAILED_MESSAGE = "Failed to update your cart. Please try again."

FailureNotifier = Callable[[str], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _log_failure(message: str) -> None:
    _logger.error("Cart failure shown to user: %s", message)


def coerce_add_quantity(quantity: Any) -> int:
    """Quantity for the add path: anything that is not an integer >= 1 becomes 1."""
    if isinstance(quantity, bool):
        return 1
    if isinstance(quantity, float):
        if not math.isfinite(quantity) or not quantity.is_integer():
            return 1
        quantity = int(quantity)
    if not isinstance(quantity, int) or quantity < 1:
        return 1
    return quantity


def is_valid_quantity(quantity: Any) -> bool:
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity >= 1


class CartStore:
    """Cart state for one browsing context.

    Usage::

        store = CartStore(handle, channel)
        store.add(product, 2)
        store.set_quantity(line_id, 3)
        totals = store.totals()
    """

    def __init__(
        self,
        handle: StorageHandle,
        channel: CartSyncChannel,
        *,
        key: str = CART_STORAGE_KEY,
        clock: Callable[[], datetime] | None = None,
        on_failure: FailureNotifier | None = None,
        free_shipping_threshold: int = FREE_SHIPPING_THRESHOLD,
        flat_shipping_fee: int = FLAT_SHIPPING_FEE,
    ) -> None:
        self._handle = handle
        self._channel = channel
        self._key = key
        self._clock = clock or _utcnow
        self._on_failure = on_failure or _log_failure
        self._free_shipping_threshold = free_shipping_threshold
        self._flat_shipping_fee = flat_shipping_fee
        self._lines: list[CartLineItem] = self._read()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _read(self) -> list[CartLineItem]:
        """Load the stored cart; unreadable data counts as an empty cart."""
        try:
            return deserialize_cart(self._handle.get_item(self._key))
        except StorageReadError:
            _logger.warning("Error loading cart, starting empty", exc_info=True)
            return []

    def reload(self) -> None:
        """Re-read storage, e.g. after another context changed the cart."""
        self._lines = self._read()

    @property
    def lines(self) -> list[CartLineItem]:
        return list(self._lines)

    def snapshot(self) -> tuple[CartLineItem, ...]:
        return tuple(self._lines)

    def get(self, line_id: str) -> CartLineItem | None:
        for line in self._lines:
            if line.id == line_id:
                return line
        return None

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def totals(self) -> CartTotals:
        return compute_totals(
            self._lines,
            free_shipping_threshold=self._free_shipping_threshold,
            flat_shipping_fee=self._flat_shipping_fee,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _commit(self, lines: list[CartLineItem], failure_message: str) -> bool:
        """Persist *lines* and broadcast. On failure nothing changes."""
        try:
            self._handle.set_item(self._key, serialize_cart(lines))
        except StorageWriteError:
            _logger.error("Error saving cart", exc_info=True)
            self._on_failure(failure_message)
            return False
        self._lines = lines
        self._channel.broadcast()
        return True

    def _new_line_id(self, item_id: str, lines: list[CartLineItem], now: datetime) -> str:
        base = f"{item_id}-{int(now.timestamp() * 1000)}"
        taken = {line.id for line in lines}
        candidate = base
        suffix = itertools.count(1)
        while candidate in taken:
            candidate = f"{base}-{next(suffix)}"
        return candidate

    def add(self, product: Product | Mapping[str, Any], quantity: Any = 1) -> CartLineItem | None:
        """Add *quantity* of *product*, merging into an existing line for the same item.

        Returns the resulting line, or ``None`` if the cart could not be saved
        (the user has been notified and the stored cart is unchanged).
        """
        if not isinstance(product, Product):
            product = Product.model_validate(product)
        quantity = coerce_add_quantity(quantity)
        lines = self._read()

        for index, line in enumerate(lines):
            if line.item_id == product.id:
                updated = line.model_copy(update={"quantity": line.quantity + quantity})
                lines[index] = updated
                break
        else:
            now = self._clock()
            updated = CartLineItem(
                id=self._new_line_id(product.id, lines, now),
                item_id=product.id,
                name=product.name,
                price=product.price,
                image=product.primary_image or PLACEHOLDER_IMAGE,
                slug=product.slug,
                quantity=quantity,
                added_at=now,
            )
            lines.append(updated)

        if not self._commit(lines, ADD_FAILED_MESSAGE):
            return None
        _logger.debug("Added %d x %s to cart (line %s)", quantity, product.id, updated.id)
        return updated

    def set_quantity(self, line_id: str, new_quantity: Any) -> bool:
        """Set the quantity of one line.

        Quantities below 1 (or non-integers) are rejected, never clamped.
        Returns whether the cart changed.
        """
        if not is_valid_quantity(new_quantity):
            _logger.debug("Rejected quantity %r for line %s", new_quantity, line_id)
            return False
        lines = self._read()
        for index, line in enumerate(lines):
            if line.id == line_id:
                lines[index] = line.model_copy(update={"quantity": new_quantity})
                return self._commit(lines, UPDATE_FAILED_MESSAGE)
        return False

    def remove(self, line_id: str) -> bool:
        """Remove a line; absent ids are a no-op."""
        lines = self._read()
        remaining = [line for line in lines if line.id != line_id]
        if len(remaining) == len(lines):
            return False
        return self._commit(remaining, UPDATE_FAILED_MESSAGE)

    def clear(self) -> bool:
        return self._commit([], UPDATE_FAILED_MESSAGE)
