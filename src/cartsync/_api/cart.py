"""Cart endpoints.

Endpoints:
  - GET    /cart        (fetch cart)
  - POST   /cart        (create entry)
  - PUT    /cart/{id}   (update entry amount)
  - DELETE /cart/{id}   (delete entry)
  - DELETE /cart        (checkout, bulk mode)
"""

from __future__ import annotations

import asyncio
import logging

from cartsync._api._common import decode_item, decode_items
from cartsync._constants import CART_ENDPOINT, cart_entry_endpoint
from cartsync._transport import Transport
from cartsync.config import CartSyncConfig
from cartsync.models.cart import CartItem, CartPatch

_logger = logging.getLogger(__name__)


async def fetch_cart(transport: Transport) -> list[CartItem]:
    """Fetch every cart entry."""
    payload = await transport.request("GET", CART_ENDPOINT)
    return decode_items(endpoint=CART_ENDPOINT, payload=payload, model=CartItem)


async def create_cart_entry(transport: Transport, item: CartItem) -> CartItem:
    """Create a cart entry and return the server-confirmed entry."""
    payload = await transport.request("POST", CART_ENDPOINT, json_body=item.to_payload())
    return decode_item(endpoint=CART_ENDPOINT, payload=payload, model=CartItem)


async def update_cart_entry(transport: Transport, item_id: int, patch: CartPatch) -> CartItem:
    """Apply *patch* to the cart entry *item_id*.

    The server may echo only ``{id, amount}``; ``name`` is then empty
    on the returned model.
    """
    endpoint = cart_entry_endpoint(item_id)
    payload = await transport.request("PUT", endpoint, json_body=patch.to_payload())
    return decode_item(endpoint=endpoint, payload=payload, model=CartItem)


async def delete_cart_entry(transport: Transport, item_id: int) -> None:
    await transport.request("DELETE", cart_entry_endpoint(item_id))


async def clear_cart(config: CartSyncConfig, transport: Transport) -> None:
    """Remove every cart entry on the server (checkout).

    In ``per_item`` mode the remote cart is fetched and each entry is
    deleted concurrently. Every delete is allowed to finish before the
    first failure is raised, so the server cart is settled by then.
    """
    if config.checkout_mode == "bulk":
        await transport.request("DELETE", CART_ENDPOINT)
        return

    entries = await fetch_cart(transport)
    _logger.debug("Clearing %d cart entries one by one", len(entries))
    results = await asyncio.gather(
        *(delete_cart_entry(transport, entry.id) for entry in entries),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
