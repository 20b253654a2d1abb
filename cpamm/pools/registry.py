"""Pair registry: canonical pair keys, the pool store and per-pool locks.

The registry is an explicitly owned object. Engines receive it by reference;
there is no module-level pool state.
"""

from __future__ import annotations

import threading

import structlog

from cpamm.errors import ReentrantCall
from cpamm.pools.pool import PairKey, Pool

logger = structlog.get_logger()


class PoolLock:
    """Non-reentrant lock serializing operations on one pair.

    Other threads block until the holder releases it. The holding thread
    entering again, e.g. from inside a ledger callback, raises ReentrantCall
    instead of deadlocking or running a nested operation.
    """

    def __init__(self, key: PairKey) -> None:
        self.key = key
        self._lock = threading.Lock()
        self._owner: int | None = None

    def __enter__(self) -> PoolLock:
        me = threading.get_ident()
        if self._owner == me:
            logger.warning(
                "reentrant_call_rejected",
                token0=self.key.token0[-8:],
                token1=self.key.token1[-8:],
            )
            raise ReentrantCall(f"Pool {self.key.token0}/{self.key.token1} is busy with another operation")
        self._lock.acquire()
        self._owner = me
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._owner = None
        self._lock.release()


class PairRegistry:
    """Registry of pools keyed by canonical token pair.

    Pools enter the store through ``register`` once a first deposit commits,
    or through ``resolve``, and are never removed. Each pair also owns a
    PoolLock; operations hold it for their whole duration so operations on
    one pool never interleave or nest.
    """

    def __init__(self) -> None:
        self._pools: dict[PairKey, Pool] = {}
        self._locks: dict[PairKey, PoolLock] = {}
        # Guards creation of pools and locks
        self._registry_lock = threading.Lock()

    def resolve(self, token_a: str, token_b: str) -> tuple[PairKey, Pool]:
        """Return the pool for a pair, creating an empty one if needed.

        Args:
            token_a: First token address (any case, any order)
            token_b: Second token address

        Returns:
            Tuple of (PairKey, Pool)

        Raises:
            IdenticalTokens: If token_a == token_b
        """
        key = PairKey.of(token_a, token_b)
        return key, self.register(Pool(key=key))

    def register(self, pool: Pool) -> Pool:
        """Store pool under its key unless one is already there.

        Returns:
            The stored pool, which is ``pool`` unless the pair already had one
        """
        key = pool.key
        with self._registry_lock:
            stored = self._pools.setdefault(key, pool)
        if stored is pool:
            logger.info(
                "pool_created",
                token0=key.token0[-8:],
                token1=key.token1[-8:],
                pair_id=key.pair_id[:10],
            )
        return stored

    def find(self, token_a: str, token_b: str) -> Pool | None:
        """Get the pool for a pair without creating it.

        Raises:
            IdenticalTokens: If token_a == token_b
        """
        return self._pools.get(PairKey.of(token_a, token_b))

    def lock(self, key: PairKey) -> PoolLock:
        """Get the lock that serializes operations on a pair."""
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = PoolLock(key)
                self._locks[key] = lock
        return lock

    def pairs(self) -> list[PairKey]:
        """All registered pairs in canonical order."""
        return sorted(self._pools)

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    def __contains__(self, key: object) -> bool:
        return key in self._pools
