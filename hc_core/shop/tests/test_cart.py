# hc_core/shop/tests/test_cart.py
from decimal import Decimal

import pytest

from hc_core.shop.cart import (
    AddItem,
    CartLine,
    CartState,
    CartStore,
    ClearCart,
    RemoveItem,
    UpdateQuantity,
    compute_totals,
    reduce_cart,
)


def test_totals_for_a_hundred_rupee_cart():
    lines = [CartLine(product_id="p1", name="Vitamin C", price=Decimal("50.00"), quantity=2)]
    totals = compute_totals(lines, shipping_flat="5.99", tax_rate="0.08")
    assert totals == {
        "subtotal": Decimal("100.00"),
        "shipping": Decimal("5.99"),
        "tax": Decimal("8.00"),
        "total": Decimal("113.99"),
    }


def test_empty_cart_has_no_shipping():
    totals = compute_totals([], shipping_flat="5.99", tax_rate="0.08")
    assert totals["shipping"] == Decimal("0.00")
    assert totals["total"] == Decimal("0.00")


def test_totals_round_to_cents():
    lines = [CartLine(product_id="p1", name="Plaster", price=Decimal("0.35"), quantity=3)]
    totals = compute_totals(lines, shipping_flat="0", tax_rate="0.08")
    # 1.05 * 0.08 = 0.084
    assert totals["tax"] == Decimal("0.08")
    assert totals["total"] == Decimal("1.13")


def test_totals_default_to_settings(settings):
    settings.HC_SHIPPING_FLAT = "2.50"
    settings.HC_TAX_RATE = "0"
    lines = [CartLine(product_id="p1", name="Gauze", price=Decimal("10"), quantity=1)]
    assert compute_totals(lines)["total"] == Decimal("12.50")


def test_adding_the_same_product_merges_quantity():
    state = reduce_cart(CartState(), AddItem(product_id="p1", name="Zinc", price=Decimal("12.5"), quantity=1))
    state = reduce_cart(state, AddItem(product_id="p1", name="Zinc", price=Decimal("12.5"), quantity=2))

    assert len(state.lines) == 1
    assert state.get("p1").quantity == 3
    assert state.item_count == 3
    assert state.get("p1").line_total == Decimal("37.50")


def test_update_to_zero_removes_line():
    state = reduce_cart(CartState(), AddItem(product_id="p1", name="Zinc", price=Decimal("1")))
    state = reduce_cart(state, UpdateQuantity(product_id="p1", quantity=0))
    assert state.is_empty


def test_remove_and_clear():
    state = CartState()
    for pid in ("p1", "p2"):
        state = reduce_cart(state, AddItem(product_id=pid, name=pid, price=Decimal("1")))

    assert [line.product_id for line in reduce_cart(state, RemoveItem("p1")).lines] == ["p2"]
    assert reduce_cart(state, ClearCart()).is_empty
    # states are never mutated
    assert len(state.lines) == 2


def test_unknown_action_is_rejected():
    with pytest.raises(TypeError):
        reduce_cart(CartState(), object())


def test_store_notifies_subscribers_and_builds_checkout_items():
    store = CartStore()
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(s.item_count))

    store.dispatch(AddItem(product_id="p1", name="Zinc", price=Decimal("5"), quantity=2))
    unsubscribe()
    store.dispatch(AddItem(product_id="p2", name="Iron", price=Decimal("3")))

    assert seen == [2]
    assert store.to_checkout_items() == [{"product": "p1", "quantity": 2}, {"product": "p2", "quantity": 1}]
