from __future__ import annotations

import asyncio

import pytest

import assetdash.cache as cache_module
from assetdash.cache import QueryCache, get_query_cache


class _Fetcher:
    def __init__(self, value: object = "value") -> None:
        self.value = value
        self.calls = 0
        self.release = asyncio.Event()

    async def __call__(self) -> object:
        self.calls += 1
        await self.release.wait()
        return self.value


def test_get_and_set() -> None:
    cache = QueryCache()
    assert cache.get(("assets", None)) is None
    cache.set(("assets", None), [1, 2])
    assert ("assets", None) in cache
    assert cache.get(("assets", None)) == [1, 2]
    assert len(cache) == 1


def test_invalidate_single_key() -> None:
    cache = QueryCache()
    cache.set(("configuration", "A1"), "a1")
    cache.set(("configuration", "A2"), "a2")
    cache.invalidate("configuration", "A1")
    assert ("configuration", "A1") not in cache
    assert cache.get(("configuration", "A2")) == "a2"


def test_invalidate_endpoint_and_clear() -> None:
    cache = QueryCache()
    cache.set(("telemetry", "A1"), 1)
    cache.set(("telemetry", "A2"), 2)
    cache.set(("assets", None), [])
    cache.invalidate_endpoint("telemetry")
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_get_or_fetch_caches_result() -> None:
    cache = QueryCache()
    fetcher = _Fetcher()
    fetcher.release.set()

    assert await cache.get_or_fetch(("assets", None), fetcher) == "value"
    assert await cache.get_or_fetch(("assets", None), fetcher) == "value"
    assert fetcher.calls == 1


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_fetch() -> None:
    cache = QueryCache()
    fetcher = _Fetcher()

    tasks = [asyncio.create_task(cache.get_or_fetch(("asset", "A1"), fetcher)) for _ in range(3)]
    await asyncio.sleep(0)
    fetcher.release.set()

    assert await asyncio.gather(*tasks) == ["value", "value", "value"]
    assert fetcher.calls == 1


@pytest.mark.asyncio
async def test_failed_fetch_reaches_every_caller_and_is_not_cached() -> None:
    cache = QueryCache()
    release = asyncio.Event()
    calls = 0

    async def _failing() -> object:
        nonlocal calls
        calls += 1
        await release.wait()
        raise RuntimeError("boom")

    tasks = [asyncio.create_task(cache.get_or_fetch(("power", "A1"), _failing)) for _ in range(2)]
    await asyncio.sleep(0)
    release.set()

    results = await asyncio.gather(*tasks, return_exceptions=True)
    assert all(isinstance(r, RuntimeError) for r in results)
    assert calls == 1
    assert ("power", "A1") not in cache


@pytest.mark.asyncio
async def test_result_landing_after_invalidation_is_not_stored() -> None:
    cache = QueryCache()
    fetcher = _Fetcher("stale")

    task = asyncio.create_task(cache.get_or_fetch(("configuration", "A1"), fetcher))
    await asyncio.sleep(0)
    cache.invalidate("configuration", "A1")
    fetcher.release.set()

    assert await task == "stale"
    assert ("configuration", "A1") not in cache


def test_get_query_cache_is_lazy_singleton(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cache_module, "_query_cache", None)
    first = get_query_cache()
    assert get_query_cache() is first
