"""Per-tab ownership of storefront state.

A :class:`ShopContext` is created once per browsing context and owns that
context's storage handle, sync channel, cart store, badge and customization
state. Page components receive it (or the pieces they need) instead of
reaching for module-level globals.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from opostore.cart.form import AddToCartForm
from opostore.cart.page import CartPage, ConfirmPrompt
from opostore.cart.store import CartStore, FailureNotifier
from opostore.cart.updates import QuantityUpdater, UpdatingListener
from opostore.config import StoreConfig
from opostore.customize.panel import ColorPanel
from opostore.customize.scene import CustomizerScene
from opostore.customize.state import CustomizationState
from opostore.models.product import Product
from opostore.storage.area import SharedStorageArea
from opostore.storage.backends import FileStorage, MemoryStorage
from opostore.sync.badge import CartCountBadge
from opostore.sync.channel import CartSyncChannel

_logger = logging.getLogger(__name__)


def open_storage(config: StoreConfig) -> SharedStorageArea:
    """Storage area for *config*: file-backed when a path is set, else in memory."""
    if config.storage_path is not None:
        _logger.debug("Using file storage at %s", config.storage_path)
        return SharedStorageArea(FileStorage(config.storage_path))
    return SharedStorageArea(MemoryStorage())


class ShopContext:
    """State owned by one browsing context.

    Usage::

        area = open_storage(config)
        tab = ShopContext(area, config)
        tab.badge.mark_client_ready()
        tab.cart.add(product)
    """

    def __init__(
        self,
        area: SharedStorageArea,
        config: StoreConfig | None = None,
        *,
        context_id: str | None = None,
        on_failure: FailureNotifier | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or StoreConfig()
        self.storage = area.attach(context_id)
        self.channel = CartSyncChannel()
        self.cart = CartStore(
            self.storage,
            self.channel,
            key=self.config.storage_key,
            clock=clock,
            on_failure=on_failure,
            free_shipping_threshold=self.config.free_shipping_threshold,
            flat_shipping_fee=self.config.flat_shipping_fee,
        )
        self._unsubscribers = [
            self.channel.bind_storage(self.storage, self.config.storage_key),
            self.channel.subscribe(self.cart.reload),
        ]
        self.badge = CartCountBadge(self.storage, self.channel, key=self.config.storage_key)
        self.customization = CustomizationState()

    @property
    def context_id(self) -> str:
        return self.storage.context_id

    def quantity_updater(self, *, on_updating: UpdatingListener | None = None) -> QuantityUpdater:
        return QuantityUpdater(self.cart, delay=self.config.quantity_update_delay, on_updating=on_updating)

    def cart_page(self, confirm: ConfirmPrompt, *, on_updating: UpdatingListener | None = None) -> CartPage:
        return CartPage(self.cart, self.quantity_updater(on_updating=on_updating), confirm)

    def add_to_cart_form(self, product: Product) -> AddToCartForm:
        return AddToCartForm(product, self.cart, feedback_seconds=self.config.added_feedback_seconds)

    def customizer_scene(self) -> CustomizerScene:
        return CustomizerScene(self.customization)

    def color_panel(self) -> ColorPanel:
        return ColorPanel(self.customization)

    def close(self) -> None:
        """Detach from storage and drop every subscription."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.badge.close()
        self.storage.close()
