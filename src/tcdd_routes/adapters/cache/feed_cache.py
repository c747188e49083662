"""Construct-on-first-use cache for upstream feeds."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FeedCache(Generic[T]):
    """Holds one loaded feed value.

    The first caller triggers the load; callers arriving while it is running
    await the same load instead of starting their own. A failed load caches
    nothing, so the next caller retries.
    """

    def __init__(
        self,
        name: str,
        loader: Callable[[], Awaitable[T]],
        ttl_seconds: float | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            name: Feed name (for logging).
            loader: Coroutine function producing the value.
            ttl_seconds: Seconds a loaded value stays valid; None keeps it
                until invalidate() is called.
        """
        self.name = name
        self._loader = loader
        self._ttl_seconds = ttl_seconds
        self._value: T | None = None
        self._loaded_at: float | None = None
        self._pending: asyncio.Future[T] | None = None

    @property
    def is_loaded(self) -> bool:
        """Whether a still-valid value is held."""
        if self._loaded_at is None:
            return False
        if self._ttl_seconds is None:
            return True
        return time.monotonic() - self._loaded_at < self._ttl_seconds

    async def get(self) -> T:
        """Return the cached value, loading it if needed."""
        if self.is_loaded:
            return self._value  # type: ignore[return-value]

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._load())
        pending = self._pending
        # shield: a cancelled waiter must not cancel the shared load
        return await asyncio.shield(pending)

    async def _load(self) -> T:
        try:
            value = await self._loader()
        finally:
            self._pending = None
        self._value = value
        self._loaded_at = time.monotonic()
        logger.debug(f"Loaded {self.name} feed")
        return value

    def invalidate(self) -> None:
        """Drop the cached value; the next get() reloads."""
        self._value = None
        self._loaded_at = None
        logger.debug(f"Invalidated {self.name} feed cache")
