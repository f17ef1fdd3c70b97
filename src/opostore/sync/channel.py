"""In-context "cart changed" signal.

Every component that mutates the cart calls :meth:`CartSyncChannel.broadcast`
after persisting. Components that display cart data subscribe. Changes made
in other browsing contexts arrive as storage events and are re-broadcast
here once bound with :meth:`CartSyncChannel.bind_storage`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from opostore._constants import CART_STORAGE_KEY, CART_UPDATED_EVENT
from opostore.storage.area import StorageHandle
from opostore.storage.events import StorageEvent

_logger = logging.getLogger(__name__)

CartListener = Callable[[], None]


class CartSyncChannel:
    """Synchronous, payload-free notification bus for one browsing context."""

    name = CART_UPDATED_EVENT

    def __init__(self) -> None:
        self._listeners: list[CartListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def broadcast(self) -> None:
        """Notify every listener. A failing listener does not stop delivery."""
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                _logger.exception("%s listener failed", self.name)

    def bind_storage(self, handle: StorageHandle, key: str = CART_STORAGE_KEY) -> Callable[[], None]:
        """Re-broadcast storage events for *key* written by other contexts.

        A storage event with ``key=None`` means the whole area was cleared,
        which also affects the cart.
        """

        def _on_storage(event: StorageEvent) -> None:
            if event.key == key or event.key is None:
                _logger.debug("Cart changed in context %s", event.source)
                self.broadcast()

        return handle.add_listener(_on_storage)
