"""
Per-key mutual exclusion for a single process.

Serializes check-then-write sequences on the same inventory key while letting
different keys proceed concurrently. Multi-process deployments additionally
rely on the row lock taken by the SQL store.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio

from src.platform.exception.exceptions import LockTimeoutError
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import inventory_key_var


class KeyedLock:
    def __init__(self, *, timeout: float) -> None:
        self.timeout = timeout
        self._locks: dict[str, anyio.Lock] = {}
        self._holders: dict[str, int] = {}  # holders + waiters per key, for cleanup

    @asynccontextmanager
    async def hold(self, *, key: str) -> AsyncIterator[None]:
        """
        Hold the lock for `key` for the duration of the block.

        Raises:
            LockTimeoutError: If the lock could not be acquired within `timeout` seconds
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = anyio.Lock()
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            try:
                with anyio.fail_after(self.timeout):
                    await lock.acquire()
            except TimeoutError as e:
                Logger.base.warning(f'⏳ [LOCK] Timed out waiting for {key} ({self.timeout}s)')
                raise LockTimeoutError('Booking is busy for this movie, retry later') from e

            context_token = inventory_key_var.set(key)
            Logger.base.debug(f'🔒 [LOCK] Acquired {key}')
            try:
                yield
            finally:
                lock.release()
                Logger.base.debug(f'🔓 [LOCK] Released {key}')
                inventory_key_var.reset(context_token)
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]

    def is_locked(self, *, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
