"""Cart entry and cart patch models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from cartsync.models._base import CartSyncBaseModel


class CartItem(CartSyncBaseModel):
    """An entry in the remote cart.

    ``id`` matches the :class:`~cartsync.models.inventory.InventoryItem`
    the entry was added from. ``name`` may be empty when the server
    echoes only the patched fields after a ``PUT``.
    """

    id: int
    name: str = Field(default="", validation_alias=AliasChoices("name", "content"))
    amount: int = Field(ge=1, validation_alias=AliasChoices("amount", "count"))

    def to_payload(self) -> dict[str, Any]:
        """Wire body for ``POST /cart``."""
        return self.model_dump(mode="json")


class CartPatch(BaseModel):
    """Partial update body for ``PUT /cart/{id}``."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    amount: int = Field(ge=1)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
