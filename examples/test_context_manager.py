"""Example tests using a Prospector without the pytest fixture."""

from __future__ import annotations

import asyncio
import typing as t

import pytest

from prospect import MissingCallError, Predicate, Prospector


class Cache(t.Protocol):
    """Async key-value store."""

    async def get(self, key: str) -> bytes | None: ...

    async def put(self, key: str, value: bytes, ttl: int = 60) -> None: ...


async def _read_through(cache: Cache, key: str) -> bytes:
    cached = await cache.get(key)
    if cached is not None:
        return cached
    value = key.encode()
    await cache.put(key, value)
    return value


def test_async_methods_use_canned_outcomes() -> None:
    """Async methods are matched at call time and resolved on await."""
    with Prospector() as mox:
        cache = mox.mock(Cache)
        mox.prospect(cache, "get").with_args("user:1").returns(None)
        mox.prospect(cache, "put").with_args(
            "user:1", Predicate(lambda value: isinstance(value, bytes))
        )

        assert asyncio.run(_read_through(cache, "user:1")) == b"user:1"


def test_leaving_the_block_verifies() -> None:
    """Expectations left unconsumed fail when the block exits."""
    with pytest.raises(MissingCallError, match="Expected method call `get`"):
        with Prospector() as mox:
            cache = mox.mock(Cache)
            mox.prospect(cache, "get").with_args("user:2")
