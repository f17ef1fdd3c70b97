"""Data models for carts, products and the shoe customizer."""

from opostore.models._base import HexColor, OpoBaseModel, normalize_hex_color
from opostore.models.cart import CartLineItem, CartTotals, Price
from opostore.models.customization import CustomizationSnapshot, PartColorMap, PartId
from opostore.models.product import Product

__all__ = [
    "CartLineItem",
    "CartTotals",
    "CustomizationSnapshot",
    "HexColor",
    "OpoBaseModel",
    "PartColorMap",
    "PartId",
    "Price",
    "Product",
    "normalize_hex_color",
]
