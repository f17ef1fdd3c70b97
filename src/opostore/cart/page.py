"""Cart page controller.

Holds the page's behavior without its markup: confirmation-gated removal,
deferred quantity buttons and the order summary.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from opostore.cart.store import CartStore
from opostore.cart.updates import PendingUpdate, QuantityUpdater
from opostore.formatting import format_won
from opostore.models.cart import CartLineItem, CartTotals

REMOVE_CONFIRMATION = "Are you sure you want to remove this item from your cart?"
CLEAR_CONFIRMATION = "Are you sure you want to clear your entire cart?"

ConfirmPrompt = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class CartSummary:
    """What the order-summary panel shows."""

    totals: CartTotals
    line_count: int
    headline: str
    shipping_label: str
    shipping_message: str


def _headline(line_count: int) -> str:
    return f"{line_count} item{'' if line_count == 1 else 's'} in your cart"


class CartPage:
    """Cart page state for one browsing context."""

    def __init__(self, store: CartStore, updater: QuantityUpdater, confirm: ConfirmPrompt) -> None:
        self._store = store
        self._updater = updater
        self._confirm = confirm

    @property
    def lines(self) -> list[CartLineItem]:
        return self._store.lines

    @property
    def is_empty(self) -> bool:
        return self._store.line_count == 0

    def is_updating(self, line_id: str) -> bool:
        return self._updater.is_updating(line_id)

    def can_decrease(self, line: CartLineItem) -> bool:
        return line.quantity > 1 and not self.is_updating(line.id)

    def can_increase(self, line: CartLineItem) -> bool:
        return not self.is_updating(line.id)

    def request_quantity(self, line_id: str, new_quantity: int) -> PendingUpdate | None:
        return self._updater.request(line_id, new_quantity)

    def increase(self, line_id: str) -> PendingUpdate | None:
        line = self._store.get(line_id)
        if line is None:
            return None
        return self.request_quantity(line_id, line.quantity + 1)

    def decrease(self, line_id: str) -> PendingUpdate | None:
        line = self._store.get(line_id)
        if line is None:
            return None
        return self.request_quantity(line_id, line.quantity - 1)

    def remove_item(self, line_id: str) -> bool:
        """Remove a line after the user confirms."""
        if not self._confirm(REMOVE_CONFIRMATION):
            return False
        self._updater.cancel(line_id)
        return self._store.remove(line_id)

    def clear(self) -> bool:
        """Empty the cart after the user confirms."""
        if not self._confirm(CLEAR_CONFIRMATION):
            return False
        self._updater.cancel_all()
        return self._store.clear()

    def line_total_label(self, line: CartLineItem) -> str:
        if isinstance(line.price, (int, float)) and not isinstance(line.price, bool):
            return format_won(line.price * line.quantity)
        return "N/A"

    def summary(self) -> CartSummary:
        totals = self._store.totals()
        if totals.free_shipping:
            shipping_label = "Free"
            message = "You qualify for free shipping!"
        else:
            shipping_label = format_won(totals.shipping)
            message = f"Add {format_won(totals.amount_to_free_shipping)} more for free shipping"
        return CartSummary(
            totals=totals,
            line_count=self._store.line_count,
            headline=_headline(self._store.line_count),
            shipping_label=shipping_label,
            shipping_message=message,
        )
