"""Per-user balance locks.

Every read-modify-write of a balance runs while holding its owner's lock.
Operations touching several users acquire the locks in ascending user-id
order, so two opposite-direction transfers can never deadlock. Acquisition is
bounded; on timeout BalanceBusyError is raised before anything is mutated.

Backends:
  - LocalBalanceLocks: one asyncio.Lock per user id (single process),
    kept only while held or awaited
  - RedisBalanceLocks: redis-py distributed lock with a lease (multi-worker)
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Protocol

import redis.asyncio as aioredis
from redis.exceptions import LockError

from config.settings import settings
from src.wl_common.enums import LockBackend
from src.wl_common.errors import BalanceBusyError
from src.wl_common.redis_client import get_redis

logger = logging.getLogger(__name__)

_REDIS_KEY_PREFIX = "wallet:balance-lock:"


class BalanceLockProtocol(Protocol):
    def hold(self, *user_ids: str) -> AbstractAsyncContextManager[None]: ...


def lock_order(user_ids: tuple[str, ...]) -> list[str]:
    """Distinct ids in the global acquisition order."""
    return sorted(set(user_ids))


class LocalBalanceLocks:
    """One asyncio.Lock per user id, dropped once nobody holds or awaits it."""

    def __init__(self, timeout_seconds: float = settings.BALANCE_LOCK_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout_seconds
        self._locks: dict[str, asyncio.Lock] = {}
        # holders + waiters per user id
        self._users: defaultdict[str, int] = defaultdict(int)

    def _checkout(self, user_id: str) -> asyncio.Lock:
        self._users[user_id] += 1
        return self._locks.setdefault(user_id, asyncio.Lock())

    def _checkin(self, user_id: str) -> None:
        self._users[user_id] -= 1
        if self._users[user_id] == 0:
            del self._users[user_id]
            del self._locks[user_id]

    @asynccontextmanager
    async def hold(self, *user_ids: str) -> AsyncIterator[None]:
        acquired: list[str] = []
        try:
            for user_id in lock_order(user_ids):
                lock = self._checkout(user_id)
                try:
                    await asyncio.wait_for(lock.acquire(), timeout=self._timeout)
                except TimeoutError:
                    self._checkin(user_id)
                    logger.warning("Balance lock timeout: user=%s", user_id)
                    raise BalanceBusyError(user_id) from None
                except BaseException:
                    self._checkin(user_id)
                    raise
                acquired.append(user_id)
            yield
        finally:
            for user_id in reversed(acquired):
                self._locks[user_id].release()
                self._checkin(user_id)


class RedisBalanceLocks:
    def __init__(
        self,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
        timeout_seconds: float = settings.BALANCE_LOCK_TIMEOUT_SECONDS,
        lease_seconds: float = settings.BALANCE_LOCK_LEASE_SECONDS,
    ) -> None:
        self._redis_factory = redis_factory
        self._timeout = timeout_seconds
        self._lease = lease_seconds

    @asynccontextmanager
    async def hold(self, *user_ids: str) -> AsyncIterator[None]:
        redis = await self._redis_factory()
        acquired = []
        try:
            for user_id in lock_order(user_ids):
                lock = redis.lock(
                    f"{_REDIS_KEY_PREFIX}{user_id}",
                    timeout=self._lease,
                    blocking_timeout=self._timeout,
                )
                if not await lock.acquire():
                    logger.warning("Balance lock timeout: user=%s", user_id)
                    raise BalanceBusyError(user_id)
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                try:
                    await lock.release()
                except LockError:
                    # Lease expired before release; the DB transaction already finished.
                    logger.warning("Balance lock lease expired before release: %s", lock.name)


def build_balance_locks(backend: str = settings.BALANCE_LOCK_BACKEND) -> BalanceLockProtocol:
    if LockBackend(backend) is LockBackend.REDIS:
        return RedisBalanceLocks()
    return LocalBalanceLocks()


# Process-wide registry: every service mutating balances must share it
balance_locks: BalanceLockProtocol = build_balance_locks()
