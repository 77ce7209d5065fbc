"""Internal constants shared across the library."""

BASE_URL = "http://localhost:3000"
USER_AGENT = "cartsync/1"

INVENTORY_ENDPOINT = "/inventory"
CART_ENDPOINT = "/cart"

CHECKOUT_MODES: frozenset[str] = frozenset({"bulk", "per_item"})


def cart_entry_endpoint(item_id: int) -> str:
    """Path of a single cart entry (``/cart/{id}``)."""
    return f"{CART_ENDPOINT}/{item_id}"
