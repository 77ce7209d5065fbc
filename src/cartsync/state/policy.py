"""Deterministic collection update policy.

Pure functions only: they take the current collections and return new
tuples. Nothing here touches the store or the network.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, TypeVar


class _HasId(Protocol):
    @property
    def id(self) -> int: ...


_T = TypeVar("_T", bound=_HasId)


def find_item(items: Iterable[_T], item_id: int) -> _T | None:
    for item in items:
        if item.id == item_id:
            return item
    return None


def adjusted_count(count: int, delta: int) -> int:
    """Apply *delta* to *count*, flooring at zero."""
    return max(0, count + delta)


def upsert_item(items: Iterable[_T], item: _T) -> tuple[_T, ...]:
    """Replace the entry with ``item.id`` in place, or append it."""
    result: list[_T] = []
    replaced = False
    for existing in items:
        if existing.id == item.id:
            result.append(item)
            replaced = True
        else:
            result.append(existing)
    if not replaced:
        result.append(item)
    return tuple(result)


def remove_item(items: Iterable[_T], item_id: int) -> tuple[_T, ...]:
    return tuple(item for item in items if item.id != item_id)
