from __future__ import annotations

import json
from dataclasses import dataclass, field

from opostore.cart.store import ADD_FAILED_MESSAGE, CartStore, coerce_add_quantity
from opostore.context import ShopContext
from opostore.exceptions import StorageWriteError
from opostore.models.product import Product
from opostore.storage.area import SharedStorageArea
from opostore.storage.backends import MemoryStorage
from opostore.sync.channel import CartSyncChannel
from tests.support import FIXED_NOW, FIXED_NOW_MS


@dataclass
class ReadOnlyStorage:
    """Backend whose writes always fail, like storage with no quota left."""

    data: dict[str, str] = field(default_factory=dict)
    write_attempts: int = 0

    def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.write_attempts += 1
        raise StorageWriteError("quota exceeded", key=key)

    def remove_item(self, key: str) -> None:
        raise StorageWriteError("quota exceeded", key=key)

    def keys(self) -> list[str]:
        return list(self.data)


def _stored(tab: ShopContext) -> list[dict]:
    raw = tab.storage.get_item("cart")
    assert raw is not None
    return json.loads(raw)


def test_add_to_empty_then_merge_same_item(tab: ShopContext) -> None:
    first = tab.cart.add({"id": "p1", "price": 1000}, 2)
    assert first is not None
    assert [(line.item_id, line.quantity, line.price) for line in tab.cart.lines] == [("p1", 2, 1000)]

    merged = tab.cart.add({"id": "p1"}, 3)
    assert merged is not None
    assert len(tab.cart.lines) == 1
    assert tab.cart.lines[0].quantity == 5
    assert merged.id == first.id


def test_repeated_adds_sum_quantities(tab: ShopContext, product: Product) -> None:
    for quantity in (1, 4, 2, 7):
        tab.cart.add(product, quantity)
    lines = [line for line in tab.cart.lines if line.item_id == product.id]
    assert len(lines) == 1
    assert lines[0].quantity == 14


def test_new_line_snapshots_product_fields(tab: ShopContext, product: Product) -> None:
    line = tab.cart.add(product, 1)
    assert line is not None
    assert line.id == f"p1-{FIXED_NOW_MS}"
    assert line.name == "Runner"
    assert line.image == "/images/runner.jpg"
    assert line.slug == "runner"
    assert line.added_at == FIXED_NOW

    # A later price change in the catalog does not touch the existing line.
    tab.cart.add(product.model_copy(update={"price": 9999}), 1)
    assert tab.cart.lines[0].price == 1000


def test_product_without_images_uses_placeholder(tab: ShopContext) -> None:
    line = tab.cart.add(Product(id="p2", name="Cap", price=500), 1)
    assert line is not None
    assert line.image == "/images/placeholder.jpg"


def test_persisted_with_camel_case_keys(tab: ShopContext, product: Product) -> None:
    tab.cart.add(product, 2)
    stored = _stored(tab)
    assert stored[0]["itemId"] == "p1"
    assert stored[0]["quantity"] == 2
    assert stored[0]["addedAt"].startswith("2026-01-01T00:00:00")


def test_insertion_order_preserved(tab: ShopContext) -> None:
    for item_id in ("c", "a", "b"):
        tab.cart.add({"id": item_id, "price": 100}, 1)
    tab.cart.add({"id": "a"}, 1)
    assert [line.item_id for line in tab.cart.lines] == ["c", "a", "b"]


def test_line_ids_unique_when_clock_does_not_advance(tab: ShopContext) -> None:
    tab.cart.add({"id": "p1", "price": 1}, 1)
    new_id = tab.cart._new_line_id("p1", tab.cart.lines, FIXED_NOW)  # noqa: SLF001
    assert new_id == f"p1-{FIXED_NOW_MS}-1"


def test_invalid_add_quantities_become_one() -> None:
    for value in (0, -3, float("nan"), 2.5, "4", None, True):
        assert coerce_add_quantity(value) == 1
    assert coerce_add_quantity(3) == 3
    assert coerce_add_quantity(3.0) == 3


def test_add_with_negative_quantity_adds_one(tab: ShopContext, product: Product) -> None:
    tab.cart.add(product, -5)
    assert tab.cart.lines[0].quantity == 1


def test_set_quantity_below_one_is_rejected(tab: ShopContext, product: Product) -> None:
    line = tab.cart.add(product, 3)
    assert line is not None
    before = tab.storage.get_item("cart")
    for value in (0, -1, -100):
        assert tab.cart.set_quantity(line.id, value) is False
    assert tab.storage.get_item("cart") == before
    assert tab.cart.lines[0].quantity == 3


def test_set_quantity_updates_line(tab: ShopContext, product: Product) -> None:
    line = tab.cart.add(product, 3)
    assert line is not None
    assert tab.cart.set_quantity(line.id, 7) is True
    assert tab.cart.get(line.id).quantity == 7  # type: ignore[union-attr]
    assert _stored(tab)[0]["quantity"] == 7


def test_set_quantity_unknown_line(tab: ShopContext) -> None:
    assert tab.cart.set_quantity("missing", 2) is False


def test_remove_absent_line_is_noop(tab: ShopContext, product: Product) -> None:
    tab.cart.add(product, 1)
    assert tab.cart.remove("missing") is False
    assert tab.cart.line_count == 1


def test_remove_and_clear(tab: ShopContext, product: Product) -> None:
    line = tab.cart.add(product, 1)
    tab.cart.add({"id": "p2", "price": 10}, 1)
    assert line is not None
    assert tab.cart.remove(line.id) is True
    assert [item.item_id for item in tab.cart.lines] == ["p2"]
    assert tab.cart.clear() is True
    assert tab.cart.lines == []
    assert _stored(tab) == []


def test_corrupt_stored_value_loads_as_empty_cart() -> None:
    backend = MemoryStorage()
    backend.set_item("cart", "{not json")
    handle = SharedStorageArea(backend).attach()
    store = CartStore(handle, CartSyncChannel())
    assert store.lines == []
    assert store.item_count == 0


def test_non_list_stored_value_loads_as_empty_cart() -> None:
    backend = MemoryStorage()
    backend.set_item("cart", '{"id": "x"}')
    store = CartStore(SharedStorageArea(backend).attach(), CartSyncChannel())
    assert store.lines == []


def test_add_after_corrupt_value_replaces_it() -> None:
    backend = MemoryStorage()
    backend.set_item("cart", "garbage")
    store = CartStore(SharedStorageArea(backend).attach(), CartSyncChannel())
    assert store.add({"id": "p1", "price": 1}, 2) is not None
    assert json.loads(backend.get_item("cart") or "")[0]["quantity"] == 2


def test_write_failure_reports_and_leaves_state_untouched() -> None:
    existing = json.dumps(
        [{"id": "p1-1", "itemId": "p1", "price": 100, "quantity": 1, "addedAt": "2026-01-01T00:00:00Z"}]
    )
    backend = ReadOnlyStorage(data={"cart": existing})
    failures: list[str] = []
    broadcasts: list[None] = []
    channel = CartSyncChannel()
    channel.subscribe(lambda: broadcasts.append(None))
    store = CartStore(SharedStorageArea(backend).attach(), channel, on_failure=failures.append)

    assert store.add({"id": "p1"}, 3) is None
    assert store.add({"id": "p2", "price": 5}, 1) is None

    assert failures == [ADD_FAILED_MESSAGE, ADD_FAILED_MESSAGE]
    assert broadcasts == []
    assert backend.data["cart"] == existing
    assert [(line.item_id, line.quantity) for line in store.lines] == [("p1", 1)]


def test_mutations_broadcast_once(tab: ShopContext, product: Product) -> None:
    events: list[None] = []
    tab.channel.subscribe(lambda: events.append(None))
    line = tab.cart.add(product, 1)
    assert line is not None
    tab.cart.set_quantity(line.id, 2)
    tab.cart.set_quantity(line.id, 0)
    tab.cart.remove(line.id)
    tab.cart.clear()
    assert len(events) == 4


def test_totals_and_counts(tab: ShopContext, product: Product) -> None:
    tab.cart.add(product, 2)
    tab.cart.add({"id": "p2", "price": "Contact for price"}, 3)
    assert tab.cart.item_count == 5
    assert tab.cart.line_count == 2
    totals = tab.cart.totals()
    assert totals.subtotal == 2000
    assert totals.shipping == 3000
    assert len(totals.flagged_line_ids) == 1


def test_mutation_starts_from_latest_stored_cart(area: SharedStorageArea) -> None:
    tab_a = ShopContext(area, context_id="a")
    tab_b = ShopContext(area, context_id="b")
    tab_a.cart.add({"id": "p1", "price": 1}, 1)
    tab_b.cart.add({"id": "p1"}, 2)
    tab_a.cart.add({"id": "p1"}, 4)
    assert tab_a.cart.lines[0].quantity == 7
    assert tab_b.cart.lines[0].quantity == 7
