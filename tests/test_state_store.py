from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from cartsync.exceptions import CartSyncError, ReentrantMutationError, ValidationError
from cartsync.models import CartItem, InventoryItem
from cartsync.state.events import StateSection
from cartsync.state.store import StateStore


def _dt() -> datetime:
    return datetime(2026, 1, 1, tzinfo=UTC)


def _apple(count: int = 5) -> InventoryItem:
    return InventoryItem(id=1, name="Apple", count=count)


def _counting(store: StateStore) -> list[int]:
    seen: list[int] = []
    store.subscribe(lambda: seen.append(store.revision))
    return seen


def test_store_starts_empty() -> None:
    store = StateStore()
    assert store.inventory == ()
    assert store.cart == ()
    assert store.revision == 0
    assert store.last_commit is None


def test_initialize_notifies_once() -> None:
    store = StateStore(clock=_dt)
    seen = _counting(store)

    store.initialize([_apple()], [CartItem(id=1, name="Apple", amount=1)])

    assert seen == [1]
    assert store.inventory == (_apple(),)
    assert store.cart == (CartItem(id=1, name="Apple", amount=1),)
    assert store.last_commit is not None
    assert store.last_commit.sections == frozenset({StateSection.INVENTORY, StateSection.CART})
    assert store.last_commit.committed_at == _dt()


def test_setters_notify_once_each() -> None:
    store = StateStore()
    seen = _counting(store)

    store.set_inventory([_apple()])
    store.set_cart([CartItem(id=1, name="Apple", amount=2)])

    assert seen == [1, 2]
    assert store.last_commit is not None
    assert store.last_commit.sections == frozenset({StateSection.CART})


def test_commit_both_collections_is_one_notification() -> None:
    store = StateStore()
    seen = _counting(store)

    store.commit(inventory=[_apple(3)], cart=[CartItem(id=1, name="Apple", amount=2)])

    assert seen == [1]


def test_commit_requires_a_collection() -> None:
    store = StateStore()
    with pytest.raises(ValidationError):
        store.commit()
    assert store.revision == 0


def test_commit_accepts_mappings() -> None:
    store = StateStore()
    store.set_inventory([{"id": 2, "content": "Pear", "count": 1}])
    assert store.inventory == (InventoryItem(id=2, name="Pear", count=1),)


def test_invalid_commit_leaves_state_and_subscribers_untouched() -> None:
    store = StateStore()
    store.initialize([_apple()], [CartItem(id=1, name="Apple", amount=1)])
    before = store.snapshot()
    seen = _counting(store)

    with pytest.raises(ValidationError, match="duplicate ids"):
        store.set_cart([CartItem(id=1, name="Apple", amount=1), CartItem(id=1, name="Apple", amount=3)])
    with pytest.raises(ValidationError):
        store.set_inventory([{"id": 1, "name": "Apple", "count": -2}])

    assert store.snapshot() is before
    assert seen == []


def test_subscribers_run_in_registration_order_and_accumulate() -> None:
    store = StateStore()
    order: list[str] = []
    store.subscribe(lambda: order.append("first"))
    store.subscribe(lambda: order.append("second"))

    store.set_cart([])

    assert order == ["first", "second"]


def test_unsubscribe() -> None:
    store = StateStore()
    calls: list[str] = []
    unsubscribe = store.subscribe(lambda: calls.append("a"))
    store.set_cart([])
    unsubscribe()
    unsubscribe()
    store.set_cart([])
    assert calls == ["a"]


def test_subscriber_reads_committed_state() -> None:
    store = StateStore()
    observed: list[tuple[InventoryItem, ...]] = []
    store.subscribe(lambda: observed.append(store.inventory))

    store.set_inventory([_apple(2)])

    assert observed == [(_apple(2),)]


def test_reentrant_mutation_is_rejected() -> None:
    store = StateStore()
    errors: list[Exception] = []

    def _mutating_subscriber() -> None:
        try:
            store.set_cart([])
        except CartSyncError as exc:
            errors.append(exc)

    store.subscribe(_mutating_subscriber)
    store.set_inventory([_apple()])

    assert len(errors) == 1
    assert store.revision == 1
    # Mutations are allowed again once notification has finished.
    store.set_cart([])
    assert store.revision == 2


def test_uncaught_reentrant_mutation_reaches_the_outer_caller(caplog: pytest.LogCaptureFixture) -> None:
    store = StateStore()
    store.subscribe(lambda: store.set_cart([]))

    with caplog.at_level(logging.ERROR, logger="cartsync.state.store"):
        with pytest.raises(ReentrantMutationError):
            store.set_inventory([_apple()])

    # The outer commit stands; the nested one never happened.
    assert store.revision == 1
    assert store.last_commit is not None
    assert store.last_commit.sections == frozenset({StateSection.INVENTORY})
    assert "State subscriber" not in caplog.text
    assert issubclass(ReentrantMutationError, CartSyncError)


def test_failing_subscriber_is_logged_and_others_still_run(caplog: pytest.LogCaptureFixture) -> None:
    store = StateStore()
    calls: list[str] = []

    def _boom() -> None:
        raise RuntimeError("render failed")

    store.subscribe(_boom)
    store.subscribe(lambda: calls.append("after"))

    with caplog.at_level(logging.ERROR, logger="cartsync.state.store"):
        store.set_cart([])

    assert calls == ["after"]
    assert store.revision == 1
    assert "State subscriber" in caplog.text


def test_reads_are_immutable_snapshots() -> None:
    store = StateStore()
    store.set_inventory([_apple()])
    snapshot = store.inventory

    assert isinstance(snapshot, tuple)
    store.set_inventory([_apple(1)])
    assert snapshot == (_apple(),)
