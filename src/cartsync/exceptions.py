"""Custom exception hierarchy for cartsync."""

from __future__ import annotations


class CartSyncError(Exception):
    """Base exception for all cartsync errors."""


class CartSyncConfigError(CartSyncError):
    """Invalid or missing configuration."""


class ReentrantMutationError(CartSyncError):
    """State store mutated from inside one of its own subscribers."""


class NotFoundError(CartSyncError):
    """Referenced id is absent from the inventory or the cart."""

    def __init__(self, message: str, *, item_id: int | None = None) -> None:
        self.item_id = item_id
        super().__init__(message)


class ValidationError(CartSyncError):
    """Rejected input: non-positive amount, malformed patch, invariant breach.

    Always raised before any remote call is attempted, so a caller
    catching it knows the store and the server are both untouched.
    """


class RemoteError(CartSyncError):
    """Remote store call failed (non-2xx, invalid payload, network, timeout).

    ``status`` is the HTTP status code, or ``None`` when no response
    was received at all.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status = status
        self.message = message
        self.endpoint = endpoint
        super().__init__(message)
