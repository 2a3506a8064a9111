"""Caching utilities used across services."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, TypeVar

T = TypeVar("T")


async def call_fetcher(fetch: Callable[..., Any], *args: Any) -> Any:
    """Invoke a caller-supplied fetch callback, awaiting it when it is asynchronous."""

    result = fetch(*args)
    if inspect.isawaitable(result):
        return await result
    return result


class RequestScopedCache(Generic[T]):
    """Memoizes async lookups for the lifetime of a single request.

    Instances are meant to be created inside one call and dropped when it
    returns, so nothing leaks between requests. Concurrent lookups for the
    same key share a single in-flight task; a failed lookup is not cached so
    a later caller may retry it.
    """

    def __init__(self) -> None:
        self._tasks: Dict[Hashable, asyncio.Task] = {}
        self.hits = 0
        self.misses = 0

    async def get_or_fetch(self, key: Hashable, fetch: Callable[[], Awaitable[T]]) -> T:
        task = self._tasks.get(key)
        if task is None:
            self.misses += 1
            task = asyncio.ensure_future(fetch())
            self._tasks[key] = task
        else:
            self.hits += 1
        try:
            return await asyncio.shield(task)
        except Exception:
            if self._tasks.get(key) is task:
                del self._tasks[key]
            raise

    def __contains__(self, key: Hashable) -> bool:
        task = self._tasks.get(key)
        if task is None or not task.done() or task.cancelled():
            return False
        return task.exception() is None

    def __len__(self) -> int:
        return len(self._tasks)

    def clear(self) -> None:
        self._tasks.clear()


__all__ = ["RequestScopedCache", "call_fetcher"]
