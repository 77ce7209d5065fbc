"""Observable in-memory state store.

This is the only component allowed to hold or replace the mirrored
inventory and cart collections.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from cartsync.exceptions import ReentrantMutationError, ValidationError
from cartsync.models.cart import CartItem
from cartsync.models.inventory import InventoryItem
from cartsync.models.state import CartState
from cartsync.state.events import Commit, StateSection

_logger = logging.getLogger(__name__)

Subscriber = Callable[[], None]
InventoryInput = Iterable[InventoryItem | Mapping[str, Any]]
CartInput = Iterable[CartItem | Mapping[str, Any]]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StateStore:
    """Single source of truth for ``inventory`` and ``cart``.

    Reads return tuples of frozen models, so callers cannot mutate the
    store without going through a commit. Each commit validates the new
    :class:`~cartsync.models.state.CartState` first, swaps it in, and
    then calls every subscriber exactly once, synchronously, in
    registration order.

    Mutating the store from inside a subscriber is a programming error
    and raises :class:`~cartsync.exceptions.ReentrantMutationError`. If
    the subscriber lets it escape, it propagates out of the outer commit
    (which stands) instead of being logged like other subscriber failures.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._state = CartState()
        self._subscribers: list[Subscriber] = []
        self._last_commit: Commit | None = None
        self._notifying = False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def inventory(self) -> tuple[InventoryItem, ...]:
        return self._state.inventory

    @property
    def cart(self) -> tuple[CartItem, ...]:
        return self._state.cart

    @property
    def revision(self) -> int:
        """Number of commits applied so far."""
        return self._last_commit.revision if self._last_commit is not None else 0

    @property
    def last_commit(self) -> Commit | None:
        return self._last_commit

    def snapshot(self) -> CartState:
        """Both collections as one immutable value."""
        return self._state

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    def initialize(self, inventory: InventoryInput, cart: CartInput) -> None:
        """Replace both collections at once (initial load)."""
        self._commit(inventory=inventory, cart=cart)

    def set_inventory(self, inventory: InventoryInput) -> None:
        self._commit(inventory=inventory)

    def set_cart(self, cart: CartInput) -> None:
        self._commit(cart=cart)

    def commit(self, *, inventory: InventoryInput | None = None, cart: CartInput | None = None) -> None:
        """Replace one or both collections with a single notification."""
        if inventory is None and cart is None:
            raise ValidationError("commit requires inventory, cart, or both")
        self._commit(inventory=inventory, cart=cart)

    def _commit(self, *, inventory: InventoryInput | None = None, cart: CartInput | None = None) -> None:
        if self._notifying:
            raise ReentrantMutationError("State store mutated from inside a subscriber")

        sections: set[StateSection] = set()
        candidate: dict[str, Any] = {"inventory": self._state.inventory, "cart": self._state.cart}
        if inventory is not None:
            candidate["inventory"] = tuple(inventory)
            sections.add(StateSection.INVENTORY)
        if cart is not None:
            candidate["cart"] = tuple(cart)
            sections.add(StateSection.CART)

        try:
            new_state = CartState.model_validate(candidate)
        except PydanticValidationError as exc:
            raise ValidationError(f"commit rejected: {exc.errors(include_url=False)}") from exc

        self._state = new_state
        self._last_commit = Commit(
            revision=self.revision + 1,
            sections=frozenset(sections),
            committed_at=self._clock(),
        )
        _logger.debug(
            "Commit revision=%d sections=%s inventory=%d cart=%d",
            self._last_commit.revision,
            sorted(sections),
            len(new_state.inventory),
            len(new_state.cart),
        )
        self._notify()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it.

        Subscribing adds to the ordered set of subscribers; it never
        replaces an earlier one.
        """
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            for index, registered in enumerate(self._subscribers):
                if registered is callback:
                    del self._subscribers[index]
                    return

        return _unsubscribe

    def _notify(self) -> None:
        self._notifying = True
        try:
            for callback in list(self._subscribers):
                try:
                    callback()
                except ReentrantMutationError:
                    raise
                except Exception:
                    _logger.exception("State subscriber %r failed", callback)
        finally:
            self._notifying = False
