"""Throttle for outgoing requests to the booking service.

Caps the number of requests in flight and keeps a minimum delay between
request starts, so fan-out searches do not hammer the upstream service.
"""

from __future__ import annotations

import asyncio
import logging
import time

logger = logging.getLogger(__name__)


class RequestThrottle:
    """Concurrency cap plus minimum spacing between outgoing requests.

    Async-safe: the semaphore bounds concurrency, the lock serializes the
    spacing bookkeeping.
    """

    def __init__(
        self, api_name: str, max_concurrent: int = 4, min_delay_seconds: float = 0.0
    ) -> None:
        """Initialize the throttle.

        Args:
            api_name: Name of the API (for logging).
            max_concurrent: Maximum number of requests in flight.
            min_delay_seconds: Minimum delay between two request starts.
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.api_name = api_name
        self.max_concurrent = max_concurrent
        self.min_delay_seconds = min_delay_seconds
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._spacing_lock = asyncio.Lock()
        self._last_request_time: float = 0.0
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        """Number of requests currently holding a slot."""
        return self._in_flight

    async def _wait_for_spacing(self) -> None:
        if self.min_delay_seconds <= 0:
            return
        async with self._spacing_lock:
            elapsed = time.monotonic() - self._last_request_time
            wait_time = self.min_delay_seconds - elapsed
            if wait_time > 0:
                logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                await asyncio.sleep(wait_time)
            self._last_request_time = time.monotonic()

    async def __aenter__(self) -> RequestThrottle:
        """Take a concurrency slot, then honour the minimum spacing."""
        await self._semaphore.acquire()
        try:
            await self._wait_for_spacing()
        except BaseException:
            self._semaphore.release()
            raise
        self._in_flight += 1
        return self

    async def __aexit__(
        self, _exc_type: type | None, _exc_val: BaseException | None, _exc_tb: object
    ) -> None:
        """Release the concurrency slot."""
        self._in_flight -= 1
        self._semaphore.release()
