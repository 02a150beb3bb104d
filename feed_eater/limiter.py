"""Bounding the number of requests in flight."""

from __future__ import annotations

import asyncio


class FetchLimiter:
    """
    Counts in-flight requests against a fixed ceiling. Usable either through
    :meth:`acquire` / :meth:`release` or as ``async with limiter:``.
    """

    def __init__(self, limit: int) -> None:
        """Create a limiter.

        Parameters
        ----------
        limit:
            Maximum number of concurrent holders. Must be at least one.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self._limit = limit
        self._active = 0
        self._peak = 0
        self._cond = asyncio.Condition()

    async def acquire(self) -> None:
        """Wait until a slot is free and take it."""
        async with self._cond:
            while self._active >= self._limit:
                await self._cond.wait()
            self._active += 1
            self._peak = max(self._peak, self._active)

    async def release(self) -> None:
        """Give back a slot and wake one waiter."""
        async with self._cond:
            self._active = max(0, self._active - 1)
            self._cond.notify()

    async def __aenter__(self) -> "FetchLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active(self) -> int:
        return self._active

    @property
    def peak(self) -> int:
        """Highest number of simultaneous holders seen so far."""
        return self._peak
