from __future__ import annotations

from opostore.context import ShopContext
from opostore.models.product import Product
from opostore.storage.area import SharedStorageArea
from opostore.storage.backends import MemoryStorage
from opostore.sync.badge import CartCountBadge, read_cart_count
from opostore.sync.channel import CartSyncChannel


def test_channel_subscribe_and_unsubscribe() -> None:
    channel = CartSyncChannel()
    calls: list[str] = []
    unsubscribe = channel.subscribe(lambda: calls.append("a"))
    channel.subscribe(lambda: calls.append("b"))
    channel.broadcast()
    unsubscribe()
    channel.broadcast()
    assert calls == ["a", "b", "b"]
    assert channel.listener_count == 1


def test_channel_survives_failing_listener() -> None:
    channel = CartSyncChannel()
    calls: list[str] = []

    def _boom() -> None:
        raise RuntimeError("listener bug")

    channel.subscribe(_boom)
    channel.subscribe(lambda: calls.append("ok"))
    channel.broadcast()
    assert calls == ["ok"]


def test_storage_binding_only_relays_cart_key() -> None:
    area = SharedStorageArea()
    other = area.attach()
    channel = CartSyncChannel()
    calls: list[None] = []
    channel.subscribe(lambda: calls.append(None))
    unbind = channel.bind_storage(area.attach())

    other.set_item("wishlist", "[]")
    assert calls == []
    other.set_item("cart", "[]")
    assert len(calls) == 1

    unbind()
    other.set_item("cart", "[1]")
    assert len(calls) == 1


def test_badge_updates_in_same_context(tab: ShopContext, product: Product) -> None:
    tab.badge.mark_client_ready()
    assert tab.badge.render() is None
    tab.cart.add(product, 2)
    assert tab.badge.count == 2
    assert tab.badge.render() == "2"


def test_badge_updates_across_contexts(area: SharedStorageArea, product: Product) -> None:
    tab_a = ShopContext(area, context_id="a")
    tab_b = ShopContext(area, context_id="b")
    tab_b.badge.mark_client_ready()

    tab_a.cart.add(product, 3)

    assert tab_b.badge.render() == "3"
    assert tab_b.cart.lines[0].quantity == 3

    tab_b.cart.clear()
    assert tab_a.cart.lines == []
    assert tab_a.badge.count == 0


def test_badge_hidden_until_client_ready(tab: ShopContext, product: Product) -> None:
    tab.cart.add(product, 1)
    assert tab.badge.render() is None
    tab.badge.mark_client_ready()
    assert tab.badge.render() == "1"


def test_badge_caps_label(tab: ShopContext, product: Product) -> None:
    tab.badge.mark_client_ready()
    tab.cart.add(product, 99)
    assert tab.badge.render() == "99"
    tab.cart.add(product, 1)
    assert tab.badge.render() == "99+"


def test_badge_treats_corrupt_storage_as_zero() -> None:
    backend = MemoryStorage()
    backend.set_item("cart", "][")
    handle = SharedStorageArea(backend).attach()
    assert read_cart_count(handle) == 0
    badge = CartCountBadge(handle, CartSyncChannel())
    badge.mark_client_ready()
    assert badge.count == 0
    assert badge.render() is None


def test_badge_ignores_bad_quantities() -> None:
    backend = MemoryStorage()
    backend.set_item("cart", '[{"quantity": 2}, {"quantity": "x"}, {"quantity": -4}, 5, {}]')
    assert read_cart_count(SharedStorageArea(backend).attach()) == 2


def test_badge_on_change_and_close(tab: ShopContext, product: Product) -> None:
    counts: list[int] = []
    badge = CartCountBadge(tab.storage, tab.channel, on_change=counts.append)
    tab.cart.add(product, 1)
    tab.cart.add(product, 1)
    badge.close()
    tab.cart.add(product, 1)
    assert counts == [1, 2]


def test_closed_context_stops_syncing(area: SharedStorageArea, product: Product) -> None:
    tab_a = ShopContext(area, context_id="a")
    tab_b = ShopContext(area, context_id="b")
    tab_b.badge.mark_client_ready()
    tab_b.close()
    tab_a.cart.add(product, 1)
    assert tab_b.badge.count == 0
