"""Cart line item and totals models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from opostore._constants import PLACEHOLDER_IMAGE
from opostore.models._base import Identifier, OpoBaseModel

Price = int | float | str | None
"""Catalog prices are numbers, or a display string such as ``"Contact for price"``."""


class CartLineItem(OpoBaseModel):
    """One entry in the cart.

    Display fields (``name``, ``price``, ``image``, ``slug``) are a
    snapshot taken when the product was first added; later catalog
    changes do not touch existing lines.
    """

    id: str
    """Unique per add event, e.g. ``"p1-1767225600000"``."""
    item_id: Identifier
    """Product identity; the add path keeps one line per item id."""
    name: str = ""
    price: Price = None
    image: str = PLACEHOLDER_IMAGE
    slug: str = ""
    quantity: int = Field(default=1, ge=1)
    added_at: datetime


class CartTotals(OpoBaseModel):
    """Order summary derived from a list of line items."""

    subtotal: float
    shipping: int
    total: float
    amount_to_free_shipping: float = 0
    flagged_line_ids: tuple[str, ...] = ()
    """Lines whose price was not numeric and counted as zero."""

    @property
    def free_shipping(self) -> bool:
        return self.shipping == 0
