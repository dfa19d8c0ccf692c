"""
Tests for KeyedAsyncCache: freshness, coalescing, failure eviction and invalidation.
"""
import asyncio

import pytest

from freeexperience.shared.core.exceptions import TransportFailureError
from freeexperience.shared.infrastructure.cache import KeyedAsyncCache


class CountingFetch:
    """Fetch function that counts calls and can be held open."""

    def __init__(self, value="value", error=None, gate=None):
        self.value = value
        self.error = error
        self.gate = gate
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return f"{self.value}-{self.calls}"


class TestFreshness:

    async def test_fresh_value_is_served_without_fetching(self, cache):
        fetch = CountingFetch()

        first = await cache.get("specialists", fetch)
        second = await cache.get("specialists", fetch)

        assert first == second == "value-1"
        assert fetch.calls == 1

    async def test_expired_value_is_refetched(self, cache, clock):
        fetch = CountingFetch()
        await cache.get("projects", fetch, ttl=30)

        clock.advance(31)
        value = await cache.get("projects", fetch, ttl=30)

        assert value == "value-2"
        assert fetch.calls == 2

    async def test_force_refresh_skips_fresh_value(self, cache):
        fetch = CountingFetch()
        await cache.get("auth:user", fetch)

        value = await cache.get("auth:user", fetch, force_refresh=True)

        assert value == "value-2"

    async def test_peek_returns_only_fresh_values(self, cache, clock):
        await cache.get("k", CountingFetch(), ttl=5)

        assert cache.peek("k") == "value-1"
        clock.advance(6)
        assert cache.peek("k") is None

    async def test_empty_key_is_rejected(self, cache):
        with pytest.raises(ValueError):
            await cache.get("", CountingFetch())


class TestCoalescing:

    async def test_concurrent_callers_share_one_fetch(self, cache):
        gate = asyncio.Event()
        fetch = CountingFetch(gate=gate)

        first = asyncio.create_task(cache.get("specialist:1", fetch))
        second = asyncio.create_task(cache.get("specialist:1", fetch))
        await asyncio.sleep(0)
        gate.set()

        results = await asyncio.gather(first, second)

        assert results == ["value-1", "value-1"]
        assert fetch.calls == 1

    async def test_forced_call_joins_in_flight_fetch(self, cache):
        gate = asyncio.Event()
        fetch = CountingFetch(gate=gate)

        first = asyncio.create_task(cache.get("auth:user", fetch))
        await asyncio.sleep(0)
        forced = asyncio.create_task(cache.get("auth:user", fetch, force_refresh=True))
        await asyncio.sleep(0)
        gate.set()

        assert await asyncio.gather(first, forced) == ["value-1", "value-1"]
        assert fetch.calls == 1

    async def test_failure_reaches_every_coalesced_caller(self, cache):
        gate = asyncio.Event()
        fetch = CountingFetch(error=TransportFailureError("offline"), gate=gate)

        first = asyncio.create_task(cache.get("projects", fetch))
        second = asyncio.create_task(cache.get("projects", fetch))
        await asyncio.sleep(0)
        gate.set()

        results = await asyncio.gather(first, second, return_exceptions=True)

        assert all(isinstance(r, TransportFailureError) for r in results)
        assert results[0] is results[1]
        assert fetch.calls == 1


class TestFailureHandling:

    async def test_failures_are_not_cached(self, cache):
        failing = CountingFetch(error=RuntimeError("boom"))
        with pytest.raises(RuntimeError):
            await cache.get("projects", failing)

        assert len(cache) == 0
        value = await cache.get("projects", CountingFetch(value="ok"))
        assert value == "ok-1"

    async def test_timeout_raises_transport_failure_and_evicts(self, clock):
        cache = KeyedAsyncCache(request_timeout=0.01, clock=clock)

        async def slow():
            await asyncio.sleep(1)
            return "late"

        with pytest.raises(TransportFailureError):
            await cache.get("projects", slow)

        assert len(cache) == 0

    async def test_failure_keeps_error_type(self, cache):
        with pytest.raises(KeyError):
            await cache.get("k", CountingFetch(error=KeyError("missing")))


class TestInvalidation:

    async def test_prefix_invalidation_drops_matching_keys(self, cache):
        for key in ("auth:user", "auth:session", "specialist:1", "specialists"):
            await cache.get(key, CountingFetch())

        dropped = cache.invalidate("auth:")

        assert dropped == 2
        assert cache.peek("auth:user") is None
        assert cache.peek("specialist:1") == "value-1"
        assert cache.peek("specialists") == "value-1"

    async def test_invalidate_without_prefix_clears_everything(self, cache):
        await cache.get("a", CountingFetch())
        await cache.get("b", CountingFetch())

        cache.invalidate()

        assert len(cache) == 0

    async def test_invalidate_is_idempotent(self, cache):
        await cache.get("projects:open", CountingFetch())

        assert cache.invalidate("projects") == 1
        assert cache.invalidate("projects") == 0

    async def test_invalidated_in_flight_fetch_does_not_repopulate(self, cache):
        gate = asyncio.Event()
        fetch = CountingFetch(gate=gate)

        pending = asyncio.create_task(cache.get("specialists", fetch))
        await asyncio.sleep(0)
        cache.invalidate("specialists")
        gate.set()

        assert await pending == "value-1"
        assert cache.peek("specialists") is None
        assert len(cache) == 0
