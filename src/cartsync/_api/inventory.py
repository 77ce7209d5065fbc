"""Inventory endpoints.

Endpoints:
  - GET /inventory
"""

from __future__ import annotations

from cartsync._api._common import decode_items
from cartsync._constants import INVENTORY_ENDPOINT
from cartsync._transport import Transport
from cartsync.models.inventory import InventoryItem


async def fetch_inventory(transport: Transport) -> list[InventoryItem]:
    """Fetch the full inventory collection."""
    payload = await transport.request("GET", INVENTORY_ENDPOINT)
    return decode_items(endpoint=INVENTORY_ENDPOINT, payload=payload, model=InventoryItem)
