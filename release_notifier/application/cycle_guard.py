"""Single-cycle guard for the scrape orchestrator.

At most one scrape cycle may run at a time. A trigger that arrives while a
cycle is in flight is skipped outright: it does not wait and it is not
queued.

    async with guard.try_acquire() as acquired:
        if not acquired:
            return skipped
        ...run the cycle...

The guard is process-local. Across worker processes the same guarantee comes
from the Temporal schedule (overlap policy SKIP), which starts every
cycle, manual ones included.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class CycleGuard:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def try_acquire(self) -> AsyncIterator[bool]:
        """Yield True when the guard was taken, False when a cycle is running.

        The check and the acquisition happen without an intervening await, so
        two triggers scheduled on the same event loop cannot both win.
        """
        if self._lock.locked():
            yield False
            return

        await self._lock.acquire()
        try:
            yield True
        finally:
            self._lock.release()
