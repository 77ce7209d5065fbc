"""Typed models for the inventory and cart collections."""

from cartsync.models.cart import CartItem, CartPatch
from cartsync.models.inventory import InventoryItem
from cartsync.models.requests import AddToCartRequest, AdjustInventoryRequest, ItemRequest, parse_request
from cartsync.models.state import CartState

__all__ = [
    "AddToCartRequest",
    "AdjustInventoryRequest",
    "CartItem",
    "CartPatch",
    "CartState",
    "InventoryItem",
    "ItemRequest",
    "parse_request",
]
