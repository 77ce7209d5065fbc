"""Reconciliation controller: user intents → remote call → store commit."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

from cartsync._constants import CART_ENDPOINT, cart_entry_endpoint
from cartsync._locks import KeyedLock
from cartsync.client import SyncClient
from cartsync.config import CartSyncConfig
from cartsync.exceptions import NotFoundError, RemoteError
from cartsync.models.cart import CartItem, CartPatch
from cartsync.models.requests import AddToCartRequest, AdjustInventoryRequest, ItemRequest, parse_request
from cartsync.state.policy import adjusted_count, find_item, remove_item, upsert_item
from cartsync.state.store import StateStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _log_abandoned(name: str, task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        _logger.warning("Abandoned %s failed: %s", name, exc)


class ReconciliationController:
    """Coordinate remote cart calls with store commits.

    Policy is sync-then-commit: the store only changes after the remote
    call succeeded, so a failed call leaves the local mirror exactly as
    it was. The one exception is a per-item checkout that failed part
    way: the cart is then re-fetched so the mirror matches the server.
    Validation and lookup errors are raised before any remote
    call.

    Operations on the same item id are serialized; operations on
    different ids may overlap. :meth:`load_all` and :meth:`checkout`
    wait for every in-flight operation and exclude new ones.

    Usage::

        store = StateStore()
        async with CartSyncClient(config) as client:
            controller = ReconciliationController(store, client, config=config)
            await controller.load_all()
            await controller.add_to_cart(1, 2)
    """

    def __init__(
        self,
        store: StateStore,
        client: SyncClient,
        *,
        config: CartSyncConfig | None = None,
    ) -> None:
        self._store = store
        self._client = client
        self._config = config if config is not None else CartSyncConfig()
        self._locks = KeyedLock()
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def store(self) -> StateStore:
        return self._store

    # ------------------------------------------------------------------
    # Task plumbing
    # ------------------------------------------------------------------

    async def _run(self, name: str, coro: Coroutine[Any, Any, T]) -> T:
        """Run *coro* to completion even if the caller stops waiting.

        Once a remote call has been issued its outcome must still be
        committed (or not) on the shared store, so the operation runs
        as its own task and the caller awaits it through a shield.
        """
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.done():
                _logger.debug("%s abandoned by caller; result will still be applied", name)
                task.add_done_callback(lambda t: _log_abandoned(name, t))
            raise

    async def drain(self) -> None:
        """Wait for every in-flight operation, including abandoned ones."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def load_all(self) -> None:
        """Fetch inventory and cart, then initialize the store.

        Fails fast if either fetch fails; the store keeps its prior
        snapshot.
        """
        await self._run("load_all", self._load_all())

    async def _load_all(self) -> None:
        async with self._locks.hold_all():
            if self._config.concurrent_load:
                fetches = (
                    asyncio.create_task(self._client.fetch_inventory()),
                    asyncio.create_task(self._client.fetch_cart()),
                )
                try:
                    inventory, cart = await asyncio.gather(*fetches)
                except Exception:
                    for fetch in fetches:
                        fetch.cancel()
                    await asyncio.gather(*fetches, return_exceptions=True)
                    raise
            else:
                inventory = await self._client.fetch_inventory()
                cart = await self._client.fetch_cart()
            self._store.initialize(inventory, cart)
            _logger.debug("Loaded inventory=%d cart=%d", len(inventory), len(cart))

    def adjust_inventory_count(self, item_id: int, delta: int) -> None:
        """Change an item's available count locally, flooring at zero.

        There is no remote call for inventory counts. Unknown ids are a
        no-op and produce no commit.
        """
        request = parse_request(AdjustInventoryRequest, id=item_id, delta=delta)
        item = find_item(self._store.inventory, request.id)
        if item is None:
            _logger.debug("adjust_inventory_count: unknown id=%s", request.id)
            return
        updated = item.with_count(adjusted_count(item.count, request.delta))
        self._store.set_inventory(upsert_item(self._store.inventory, updated))

    async def add_to_cart(self, item_id: int, amount: int) -> CartItem:
        """Add *amount* of an inventory item to the cart.

        Creates the cart entry or raises its amount, then moves the
        server-confirmed increase out of the item's available count
        (floored at zero). Both collections change in a single commit. A
        confirmation for a different id raises :class:`RemoteError`.

        Returns
        -------
        CartItem
            The committed cart entry.
        """
        request = parse_request(AddToCartRequest, id=item_id, amount=amount)
        return await self._run("add_to_cart", self._add_to_cart(request))

    async def _add_to_cart(self, request: AddToCartRequest) -> CartItem:
        async with self._locks.hold(request.id):
            product = find_item(self._store.inventory, request.id)
            if product is None:
                raise NotFoundError(f"inventory item {request.id} not found", item_id=request.id)

            existing = find_item(self._store.cart, request.id)
            if existing is not None:
                endpoint = cart_entry_endpoint(request.id)
                patch = CartPatch(amount=existing.amount + request.amount)
                confirmed = await self._client.update_cart_entry(request.id, patch)
            else:
                endpoint = CART_ENDPOINT
                candidate = CartItem(id=request.id, name=product.name, amount=request.amount)
                confirmed = await self._client.create_cart_entry(candidate)

            if confirmed.id != request.id:
                raise RemoteError(
                    f"server confirmed cart id {confirmed.id} for requested id {request.id}",
                    endpoint=endpoint,
                )
            # A partial PUT may echo no name; keep the local one.
            entry = confirmed if confirmed.name else confirmed.model_copy(update={"name": product.name})
            moved = entry.amount - (existing.amount if existing is not None else 0)
            if moved != request.amount:
                _logger.debug(
                    "Server confirmed amount=%d for id=%s (requested +%d)", entry.amount, entry.id, request.amount
                )

            # Re-read: local adjustments may have landed while we awaited.
            inventory = self._store.inventory
            current = find_item(inventory, request.id)
            if current is not None:
                inventory = upsert_item(inventory, current.with_count(adjusted_count(current.count, -moved)))
            self._store.commit(inventory=inventory, cart=upsert_item(self._store.cart, entry))
            return entry

    async def delete_from_cart(self, item_id: int) -> None:
        """Remove a cart entry. The removed amount is not restocked."""
        request = parse_request(ItemRequest, id=item_id)
        await self._run("delete_from_cart", self._delete_from_cart(request))

    async def _delete_from_cart(self, request: ItemRequest) -> None:
        async with self._locks.hold(request.id):
            if find_item(self._store.cart, request.id) is None:
                raise NotFoundError(f"cart entry {request.id} not found", item_id=request.id)
            await self._client.delete_cart_entry(request.id)
            self._store.set_cart(remove_item(self._store.cart, request.id))

    async def checkout(self) -> None:
        """Clear the cart remotely, then locally. Nothing is restocked.

        In ``per_item`` mode a failed clear may have deleted some entries
        already; the remote cart is then re-fetched and committed before
        the original error is raised.
        """
        await self._run("checkout", self._checkout())

    async def _checkout(self) -> None:
        async with self._locks.hold_all():
            try:
                await self._client.clear_cart()
            except RemoteError:
                if self._config.checkout_mode == "per_item":
                    await self._resync_cart()
                raise
            self._store.set_cart(())
            _logger.debug("Checkout complete")

    async def _resync_cart(self) -> None:
        try:
            remote = await self._client.fetch_cart()
        except RemoteError as exc:
            _logger.warning("Cart re-fetch after failed checkout failed: %s", exc)
            return
        names = {item.id: item.name for item in self._store.cart}
        cart = [item if item.name else item.model_copy(update={"name": names.get(item.id, "")}) for item in remote]
        self._store.set_cart(cart)
        _logger.debug("Cart re-synced after failed checkout: %d entries remain", len(cart))
