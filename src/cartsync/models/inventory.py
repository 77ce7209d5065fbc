"""Inventory item model."""

from __future__ import annotations

from pydantic import AliasChoices, Field

from cartsync.models._base import CartSyncBaseModel


class InventoryItem(CartSyncBaseModel):
    """An item available in the remote inventory.

    Fields are mapped from the ``GET /inventory`` response. Older
    fixtures carry the display label as ``content`` and omit ``count``;
    both are accepted.
    """

    id: int
    """Server-assigned identifier, unique within the inventory."""
    name: str = Field(default="", validation_alias=AliasChoices("name", "content"))
    """Display label."""
    count: int = Field(default=0, ge=0)
    """Available quantity, never negative."""

    def with_count(self, count: int) -> InventoryItem:
        """Return a copy with ``count`` replaced (caller guarantees ``count >= 0``)."""
        return self.model_copy(update={"count": count})
