"""Catalog product model."""

from __future__ import annotations

from pydantic import Field

from opostore._constants import DESCRIPTION_PLACEHOLDER, PRICE_PLACEHOLDER
from opostore.models._base import Identifier, OpoBaseModel
from opostore.models.cart import Price


class Product(OpoBaseModel):
    """A product as shown on its item page.

    Built from a catalog row by :func:`opostore.catalog.products.build_product`.
    """

    id: Identifier
    name: str = ""
    slug: str = ""
    price: Price = PRICE_PLACEHOLDER
    """Numeric price in won, or a display placeholder."""
    images: list[str] = Field(default_factory=list)
    """Main image first, then the hover image, then any additional images."""
    description: str = DESCRIPTION_PLACEHOLDER
    category: str | None = None
    subcategory: str | None = None
    description_image: str | None = None

    @property
    def primary_image(self) -> str | None:
        return self.images[0] if self.images else None
