"""Process-wide query cache shared by every client and view.

Pull results are stored under ``(endpoint, id)`` keys, e.g.
``("assets", None)`` or ``("configuration", "P-1")``. Entries live until
they are invalidated explicitly (after a configuration save) or the
process exits.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheKey = tuple[str, str | None]


@dataclass
class CacheEntry:
    value: Any
    generation: int = 0


@dataclass
class _Inflight:
    future: asyncio.Future[Any]
    waiters: int = 0


class QueryCache:
    """Keyed store of pull results.

    Concurrent :meth:`get_or_fetch` calls for the same key share one
    in-flight fetch. A fetch that completes after its key was invalidated
    is returned to its callers but not stored.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._inflight: dict[CacheKey, _Inflight] = {}
        self._generations: dict[CacheKey, int] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: CacheKey) -> Any | None:
        entry = self._entries.get(key)
        return None if entry is None else entry.value

    def set(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, generation=self._generations.get(key, 0))

    async def get_or_fetch(self, key: CacheKey, fetch: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value for *key*, fetching it once if missing."""
        entry = self._entries.get(key)
        if entry is not None:
            return entry.value  # type: ignore[no-any-return]

        inflight = self._inflight.get(key)
        if inflight is not None:
            inflight.waiters += 1
            return await asyncio.shield(inflight.future)  # type: ignore[no-any-return]

        generation = self._generations.get(key, 0)
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        inflight = _Inflight(future=future)
        self._inflight[key] = inflight
        try:
            value = await fetch()
        except Exception as exc:
            if inflight.waiters:
                future.set_exception(exc)
            else:
                future.cancel()
            raise
        except BaseException:
            future.cancel()
            raise
        else:
            if not future.done():
                future.set_result(value)
            if self._generations.get(key, 0) == generation:
                self._entries[key] = CacheEntry(value=value, generation=generation)
            else:
                _logger.debug("Dropping stale fetch result for %s", key)
            return value
        finally:
            current = self._inflight.get(key)
            if current is not None and current.future is future:
                self._inflight.pop(key, None)

    def invalidate(self, endpoint: str, resource_id: str | None = None) -> None:
        """Drop the entry for ``(endpoint, resource_id)``."""
        key: CacheKey = (endpoint, resource_id)
        self._generations[key] = self._generations.get(key, 0) + 1
        self._entries.pop(key, None)
        _logger.debug("Invalidated cache key %s", key)

    def invalidate_endpoint(self, endpoint: str) -> None:
        """Drop every entry for *endpoint*, whatever the id."""
        for key in [k for k in self._entries if k[0] == endpoint]:
            self.invalidate(*key)

    def clear(self) -> None:
        for key in list(self._entries):
            self.invalidate(*key)


_query_cache: QueryCache | None = None


def get_query_cache() -> QueryCache:
    """Return the process-wide cache, creating it on first access."""
    global _query_cache
    if _query_cache is None:
        _query_cache = QueryCache()
    return _query_cache
