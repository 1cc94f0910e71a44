"""
Advisory write lock for the gateway.

Every mutating action runs while holding one process-wide lock so that, for
example, two fund appends can never read the same "last balance".  Waiting is
bounded: when the lock is not free within ``timeout`` seconds the write is
rejected with :class:`LockTimeout` rather than queued.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from pharmahr.core.exceptions import LockTimeout

logger = logging.getLogger(__name__)


class WriteLock:
    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        self._lock = asyncio.Lock()

    def locked(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def hold(self, action: str) -> AsyncIterator[None]:
        try:
            await asyncio.wait_for(self._lock.acquire(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Write lock busy for %.1fs, rejecting %s", self.timeout, action)
            raise LockTimeout(
                f"Server is busy, '{action}' was not applied. Please retry."
            ) from None
        try:
            yield
        finally:
            self._lock.release()
