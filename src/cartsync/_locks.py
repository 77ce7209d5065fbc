"""Per-key serialization points for the reconciliation controller."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Hashable


class KeyedLock:
    """Mutual exclusion per key, plus an exclusive hold over every key.

    ``hold(key)`` serializes holders of the same key; different keys
    proceed concurrently. ``hold_all()`` waits for every current holder
    to finish and blocks new ones until it is released. Waiters are
    woken in arrival order.
    """

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._held: set[Hashable] = set()
        self._exclusive = False

    def locked(self, key: Hashable) -> bool:
        return self._exclusive or key in self._held

    @contextlib.asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._exclusive and key not in self._held)
            self._held.add(key)
        try:
            yield
        finally:
            async with self._cond:
                self._held.discard(key)
                self._cond.notify_all()

    @contextlib.asynccontextmanager
    async def hold_all(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._exclusive)
            self._exclusive = True
            try:
                await self._cond.wait_for(lambda: not self._held)
            except BaseException:
                self._exclusive = False
                self._cond.notify_all()
                raise
        try:
            yield
        finally:
            async with self._cond:
                self._exclusive = False
                self._cond.notify_all()
