from __future__ import annotations

from cartsync.models import CartItem, InventoryItem
from cartsync.state.policy import adjusted_count, find_item, remove_item, upsert_item


def test_adjusted_count_floors_at_zero() -> None:
    assert adjusted_count(5, -2) == 3
    assert adjusted_count(1, -10) == 0
    assert adjusted_count(0, 4) == 4


def test_upsert_replaces_in_place_and_appends() -> None:
    items = (InventoryItem(id=1, name="A", count=1), InventoryItem(id=2, name="B", count=2))

    replaced = upsert_item(items, InventoryItem(id=1, name="A", count=9))
    assert [item.count for item in replaced] == [9, 2]

    appended = upsert_item(items, InventoryItem(id=3, name="C"))
    assert [item.id for item in appended] == [1, 2, 3]


def test_find_and_remove() -> None:
    cart = (CartItem(id=1, name="A", amount=1), CartItem(id=2, name="B", amount=1))
    assert find_item(cart, 2) == cart[1]
    assert find_item(cart, 5) is None
    assert remove_item(cart, 1) == (cart[1],)
    assert remove_item(cart, 5) == cart
