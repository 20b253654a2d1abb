"""Tests for PairRegistry."""

import threading

import pytest

from cpamm.errors import IdenticalTokens, ReentrantCall
from cpamm.pools import PairKey, PairRegistry, Pool
from tests.helpers import DAI, USDC, WETH


class TestPairRegistryResolve:
    """Tests for lazy pool creation."""

    def test_empty_registry(self, registry):
        assert registry.pool_count == 0
        assert registry.pairs() == []

    def test_resolve_creates_pool(self, registry):
        key, pool = registry.resolve(WETH, USDC)
        assert key == PairKey.of(USDC, WETH)
        assert pool.key == key
        assert pool.is_empty
        assert registry.pool_count == 1
        assert key in registry

    def test_resolve_is_order_independent(self, registry):
        """Both orderings resolve to the same pool object."""
        _, pool_ab = registry.resolve(WETH, USDC)
        _, pool_ba = registry.resolve(USDC, WETH)
        assert pool_ab is pool_ba
        assert registry.pool_count == 1

    def test_resolve_identical_tokens_raises(self, registry):
        with pytest.raises(IdenticalTokens):
            registry.resolve(WETH, WETH)
        assert registry.pool_count == 0

    def test_pairs_sorted(self, registry):
        registry.resolve(WETH, USDC)
        registry.resolve(WETH, DAI)
        registry.resolve(USDC, DAI)
        assert registry.pairs() == [
            PairKey.of(DAI, USDC),
            PairKey.of(DAI, WETH),
            PairKey.of(USDC, WETH),
        ]


class TestPairRegistryRegister:
    """Tests for storing a pool built outside the registry."""

    def test_register_new_pool(self, registry):
        pool = Pool(key=PairKey.of(WETH, USDC))

        assert registry.register(pool) is pool
        assert registry.find(USDC, WETH) is pool
        assert registry.pool_count == 1

    def test_register_keeps_existing_pool(self, registry):
        _, existing = registry.resolve(WETH, USDC)

        assert registry.register(Pool(key=PairKey.of(USDC, WETH))) is existing
        assert registry.pool_count == 1


class TestPairRegistryFind:
    """Tests for lookup without creation."""

    def test_find_missing_returns_none(self, registry):
        assert registry.find(WETH, USDC) is None
        assert registry.pool_count == 0

    def test_find_existing(self, registry):
        _, pool = registry.resolve(WETH, USDC)
        assert registry.find(USDC, WETH) is pool

    def test_find_identical_tokens_raises(self, registry):
        with pytest.raises(IdenticalTokens):
            registry.find(USDC, USDC)


class TestPairRegistryLocks:
    """Tests for per-pair locks."""

    def test_same_pair_same_lock(self, registry):
        key = PairKey.of(WETH, USDC)
        assert registry.lock(key) is registry.lock(PairKey.of(USDC, WETH))

    def test_different_pairs_different_locks(self, registry):
        assert registry.lock(PairKey.of(WETH, USDC)) is not registry.lock(PairKey.of(WETH, DAI))

    def test_lock_rejects_reentry(self, registry):
        """The holding thread cannot enter the same pair lock again."""
        lock = registry.lock(PairKey.of(WETH, USDC))
        with lock:
            with pytest.raises(ReentrantCall):
                with lock:
                    pass

        with lock:
            pass

    def test_other_pair_lock_can_be_nested(self, registry):
        with registry.lock(PairKey.of(WETH, USDC)):
            with registry.lock(PairKey.of(WETH, DAI)):
                pass

    def test_other_thread_waits_for_lock(self, registry):
        lock = registry.lock(PairKey.of(WETH, USDC))
        entered = threading.Event()

        def worker():
            with lock:
                entered.set()

        with lock:
            thread = threading.Thread(target=worker)
            thread.start()
            assert not entered.wait(0.05)
        thread.join()

        assert entered.is_set()

    def test_concurrent_resolve_creates_one_pool(self, registry):
        pools = []

        def worker():
            pools.append(registry.resolve(WETH, USDC)[1])

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert registry.pool_count == 1
        assert all(pool is pools[0] for pool in pools)
