"""Cart change propagation within and across browsing contexts."""

from opostore.sync.badge import CartCountBadge, read_cart_count
from opostore.sync.channel import CartListener, CartSyncChannel

__all__ = ["CartCountBadge", "CartListener", "CartSyncChannel", "read_cart_count"]
