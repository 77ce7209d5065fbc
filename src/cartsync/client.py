"""High-level async client for the remote inventory/cart store."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import aiohttp

from cartsync._api import cart as _cart_api
from cartsync._api import inventory as _inventory_api
from cartsync._transport import HttpTransport, Transport
from cartsync.config import CartSyncConfig
from cartsync.exceptions import CartSyncError
from cartsync.models.cart import CartItem, CartPatch
from cartsync.models.inventory import InventoryItem

_logger = logging.getLogger(__name__)


class SyncClient(Protocol):
    """Structural interface the reconciliation controller depends on."""

    async def fetch_inventory(self) -> list[InventoryItem]: ...

    async def fetch_cart(self) -> list[CartItem]: ...

    async def create_cart_entry(self, item: CartItem) -> CartItem: ...

    async def update_cart_entry(self, item_id: int, patch: CartPatch) -> CartItem: ...

    async def delete_cart_entry(self, item_id: int) -> None: ...

    async def clear_cart(self) -> None: ...


class CartSyncClient:
    """Stateless async CRUD wrapper for the ``inventory`` and ``cart`` resources.

    Usage::

        async with CartSyncClient(config) as client:
            inventory = await client.fetch_inventory()

    Every operation raises :class:`~cartsync.exceptions.RemoteError` on
    failure; none of them returns a default value in place of an error.
    """

    def __init__(
        self,
        config: CartSyncConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config if config is not None else CartSyncConfig()
        self._external_session = session is not None
        self._http_session = session
        self._external_transport = transport is not None
        self._transport: Transport | None = transport

    @property
    def config(self) -> CartSyncConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CartSyncClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._external_transport:
            return
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise CartSyncError("Client not initialized. Use 'async with CartSyncClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def fetch_inventory(self) -> list[InventoryItem]:
        """Fetch the inventory collection."""
        return await _inventory_api.fetch_inventory(self._require_transport())

    async def fetch_cart(self) -> list[CartItem]:
        """Fetch the cart collection."""
        return await _cart_api.fetch_cart(self._require_transport())

    # ------------------------------------------------------------------
    # Cart mutations
    # ------------------------------------------------------------------

    async def create_cart_entry(self, item: CartItem) -> CartItem:
        """Create a cart entry; the server confirms its identity."""
        created = await _cart_api.create_cart_entry(self._require_transport(), item)
        _logger.debug("Cart entry created id=%s amount=%s", created.id, created.amount)
        return created

    async def update_cart_entry(self, item_id: int, patch: CartPatch) -> CartItem:
        """Patch an existing cart entry."""
        updated = await _cart_api.update_cart_entry(self._require_transport(), item_id, patch)
        _logger.debug("Cart entry updated id=%s amount=%s", item_id, updated.amount)
        return updated

    async def delete_cart_entry(self, item_id: int) -> None:
        """Delete a single cart entry."""
        await _cart_api.delete_cart_entry(self._require_transport(), item_id)
        _logger.debug("Cart entry deleted id=%s", item_id)

    async def clear_cart(self) -> None:
        """Empty the remote cart (checkout)."""
        await _cart_api.clear_cart(self._config, self._require_transport())
        _logger.debug("Cart cleared mode=%s", self._config.checkout_mode)
