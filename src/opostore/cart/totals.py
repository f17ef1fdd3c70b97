"""Order summary arithmetic."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from opostore._constants import FLAT_SHIPPING_FEE, FREE_SHIPPING_THRESHOLD
from opostore.formatting import coerce_price
from opostore.models.cart import CartLineItem, CartTotals

_logger = logging.getLogger(__name__)


def compute_subtotal(lines: Iterable[CartLineItem]) -> tuple[float, tuple[str, ...]]:
    """Return ``(subtotal, flagged_line_ids)``.

    Lines whose price is not numeric contribute nothing and are flagged.
    """
    subtotal: float = 0
    flagged: list[str] = []
    for line in lines:
        price = coerce_price(line.price)
        if price is None:
            flagged.append(line.id)
            continue
        subtotal += price * line.quantity
    if flagged:
        _logger.warning("Non-numeric price on cart lines %s counted as 0", ", ".join(flagged))
    return subtotal, tuple(flagged)


def shipping_for(subtotal: float, *, free_shipping_threshold: int, flat_shipping_fee: int) -> int:
    return 0 if subtotal >= free_shipping_threshold else flat_shipping_fee


def compute_totals(
    lines: Iterable[CartLineItem],
    free_shipping_threshold: int = FREE_SHIPPING_THRESHOLD,
    flat_shipping_fee: int = FLAT_SHIPPING_FEE,
) -> CartTotals:
    """Subtotal, shipping and total for *lines*.

    Shipping is free from *free_shipping_threshold* upwards (inclusive),
    otherwise *flat_shipping_fee*.
    """
    subtotal, flagged = compute_subtotal(lines)
    shipping = shipping_for(
        subtotal,
        free_shipping_threshold=free_shipping_threshold,
        flat_shipping_fee=flat_shipping_fee,
    )
    return CartTotals(
        subtotal=subtotal,
        shipping=shipping,
        total=subtotal + shipping,
        amount_to_free_shipping=max(free_shipping_threshold - subtotal, 0),
        flagged_line_ids=flagged,
    )
