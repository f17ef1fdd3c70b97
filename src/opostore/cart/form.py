"""Add-to-cart form on the item page."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from typing import Any

from opostore._constants import ADDED_FEEDBACK_SECONDS
from opostore.cart.store import CartStore
from opostore.formatting import coerce_price, format_won, parse_leading_int
from opostore.models.cart import CartLineItem
from opostore.models.product import Product


def parse_quantity_input(text: Any, current: int) -> int:
    """Quantity after the user types *text* into the quantity field.

    Unparseable input (or zero) reads as 1; negative numbers leave the
    quantity at *current*.
    """
    value = parse_leading_int(text) or 1
    return value if value >= 1 else current


class AddToCartForm:
    """Quantity selector plus the add button and its feedback state."""

    def __init__(
        self,
        product: Product,
        store: CartStore,
        *,
        feedback_seconds: float = ADDED_FEEDBACK_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._product = product
        self._store = store
        self._feedback_seconds = feedback_seconds
        self._sleep = sleep
        self.quantity = 1
        self.is_added = False
        self.is_loading = False
        self._reset_task: asyncio.Task[None] | None = None

    @property
    def product(self) -> Product:
        return self._product

    def increase(self) -> None:
        self.quantity += 1

    def decrease(self) -> None:
        self.quantity = self.quantity - 1 if self.quantity > 1 else 1

    @property
    def can_decrease(self) -> bool:
        return self.quantity > 1

    def set_input(self, text: Any) -> None:
        self.quantity = parse_quantity_input(text, self.quantity)

    @property
    def line_total(self) -> float | int | None:
        price = coerce_price(self._product.price)
        if price is None or isinstance(self._product.price, str):
            return None
        return price * self.quantity

    @property
    def unit_price_label(self) -> str:
        return format_won(self._product.price)

    @property
    def total_label(self) -> str:
        items = f"{self.quantity} item{'s' if self.quantity > 1 else ''}"
        return f"Total ({items}): {format_won(self.line_total)}"

    @property
    def button_label(self) -> str:
        if self.is_loading:
            return "Adding..."
        if self.is_added:
            return "Added to Cart!"
        return "Add to Cart"

    @property
    def disabled(self) -> bool:
        return self.is_loading or self.is_added

    async def submit(self) -> CartLineItem | None:
        """Add the selected quantity to the cart.

        Ignored while the button is disabled. On success the form shows
        "added" for ``feedback_seconds``.
        """
        if self.disabled:
            return None
        self.is_loading = True
        try:
            line = self._store.add(self._product, self.quantity)
        finally:
            self.is_loading = False
        if line is None:
            return None
        self.is_added = True
        self._reset_task = asyncio.get_running_loop().create_task(self._reset_feedback())
        return line

    async def _reset_feedback(self) -> None:
        await self._sleep(self._feedback_seconds)
        self.is_added = False

    async def aclose(self) -> None:
        task = self._reset_task
        self._reset_task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
