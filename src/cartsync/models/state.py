"""Aggregate snapshot of the mirrored collections."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from pydantic import model_validator

from cartsync.models._base import CartSyncBaseModel
from cartsync.models.cart import CartItem
from cartsync.models.inventory import InventoryItem


def _duplicate_ids(ids: Iterable[int]) -> list[int]:
    return sorted(item_id for item_id, seen in Counter(ids).items() if seen > 1)


class CartState(CartSyncBaseModel):
    """Immutable view of inventory and cart at one commit.

    Constructing a ``CartState`` is the invariant check: item-level
    bounds are enforced by the item models, collection-level uniqueness
    here.
    """

    inventory: tuple[InventoryItem, ...] = ()
    cart: tuple[CartItem, ...] = ()

    @model_validator(mode="after")
    def _unique_ids(self) -> CartState:
        duplicates = _duplicate_ids(item.id for item in self.cart)
        if duplicates:
            raise ValueError(f"cart contains duplicate ids: {duplicates}")
        duplicates = _duplicate_ids(item.id for item in self.inventory)
        if duplicates:
            raise ValueError(f"inventory contains duplicate ids: {duplicates}")
        return self
