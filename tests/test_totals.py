from __future__ import annotations

from opostore.cart.totals import compute_totals
from opostore.models.cart import CartLineItem
from tests.support import FIXED_NOW


def _line(line_id: str, price: object, quantity: int = 1) -> CartLineItem:
    return CartLineItem(id=line_id, item_id=line_id, price=price, quantity=quantity, added_at=FIXED_NOW)


def test_shipping_charged_below_threshold() -> None:
    totals = compute_totals([_line("a", 1000, 2)])
    assert totals.subtotal == 2000
    assert totals.shipping == 3000
    assert totals.total == 5000
    assert totals.amount_to_free_shipping == 48000


def test_shipping_free_at_threshold_boundary() -> None:
    totals = compute_totals([_line("a", 25000, 2)])
    assert totals.subtotal == 50000
    assert totals.shipping == 0
    assert totals.total == 50000
    assert totals.free_shipping
    assert totals.amount_to_free_shipping == 0


def test_shipping_charged_just_below_threshold() -> None:
    assert compute_totals([_line("a", 49999)]).shipping == 3000


def test_empty_cart_totals() -> None:
    totals = compute_totals([])
    assert totals.subtotal == 0
    assert totals.shipping == 3000


def test_custom_threshold_and_fee() -> None:
    totals = compute_totals([_line("a", 100)], free_shipping_threshold=100, flat_shipping_fee=10)
    assert totals.shipping == 0
    totals = compute_totals([_line("a", 99)], free_shipping_threshold=100, flat_shipping_fee=10)
    assert totals.shipping == 10


def test_subtotal_is_additive_over_disjoint_sublists() -> None:
    left = [_line("a", 1200, 3), _line("b", 999, 1)]
    right = [_line("c", 45000, 2), _line("d", "Contact for price", 4)]
    combined = compute_totals(left + right).subtotal
    assert combined == compute_totals(left).subtotal + compute_totals(right).subtotal


def test_non_numeric_price_counts_as_zero_and_is_flagged() -> None:
    totals = compute_totals([_line("a", 1000), _line("b", "Contact for price", 2), _line("c", None)])
    assert totals.subtotal == 1000
    assert totals.flagged_line_ids == ("b", "c")


def test_numeric_string_price_is_parsed() -> None:
    totals = compute_totals([_line("a", "1500", 2)])
    assert totals.subtotal == 3000
    assert totals.flagged_line_ids == ()
