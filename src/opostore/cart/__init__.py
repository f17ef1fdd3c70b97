"""Client-side shopping cart."""

from opostore.cart.form import AddToCartForm, parse_quantity_input
from opostore.cart.page import CartPage, CartSummary
from opostore.cart.serialization import deserialize_cart, serialize_cart
from opostore.cart.store import CartStore, coerce_add_quantity
from opostore.cart.totals import compute_totals
from opostore.cart.updates import PendingUpdate, QuantityUpdater

__all__ = [
    "AddToCartForm",
    "CartPage",
    "CartStore",
    "CartSummary",
    "PendingUpdate",
    "QuantityUpdater",
    "coerce_add_quantity",
    "compute_totals",
    "deserialize_cart",
    "parse_quantity_input",
    "serialize_cart",
]
