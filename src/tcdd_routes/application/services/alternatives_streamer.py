"""Incremental, cancellable stream of same-train alternatives for one departure."""

import asyncio
import logging
from collections.abc import AsyncIterator
from datetime import date

from tcdd_routes.application.cancellation import CancellationToken
from tcdd_routes.application.services.route_assembly import extract_time_slot, route_time_slot
from tcdd_routes.application.services.same_train_finder import SameTrainConnectionFinder
from tcdd_routes.domain.models.alternative_event import AlternativeEvent, JourneyFound, SearchDone

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 0.05

_END = object()


class AlternativesStreamer:
    """Streams same-train alternatives whose first leg departs at a target time.

    The underlying search runs as a producer task feeding a queue; the
    consumer drains the queue with a short idle poll. Exactly one SearchDone
    ends every stream, also after cancellation or a failed search. A
    cancelled stream stops at once while requests already sent are left to
    finish in the background.
    """

    def __init__(
        self,
        finder: SameTrainConnectionFinder,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        """Initialize with the same-train finder and the consumer's idle poll interval."""
        self._finder = finder
        self._poll_interval = poll_interval_seconds
        self._background_tasks: set[asyncio.Task[None]] = set()

    async def stream(
        self,
        from_station_id: int,
        to_station_id: int,
        service_date: date,
        target_time: str,
        cancellation: CancellationToken | None = None,
    ) -> AsyncIterator[AlternativeEvent]:
        """Yield StationProgress / JourneyFound events, then one SearchDone.

        Args:
            from_station_id: Origin station.
            to_station_id: Destination station.
            service_date: Travel date.
            target_time: Departure of the chosen direct train; compared on HH:MM.
            cancellation: Stops the stream when cancelled.
        """
        if cancellation is None:
            cancellation = CancellationToken()
        target_slot = extract_time_slot(target_time)
        queue: asyncio.Queue[object] = asyncio.Queue()
        failure: list[str] = []
        # Cancelled when the consumer leaves, also without touching the caller's token
        search_token = cancellation.child()

        async def produce() -> None:
            try:
                async for event in self._finder.search(
                    from_station_id, to_station_id, service_date, cancellation=search_token
                ):
                    if search_token.is_cancelled:
                        break
                    queue.put_nowait(event)
            except Exception as e:
                logger.error(f"Same-train alternatives search failed: {e}")
                failure.append(str(e))
            finally:
                queue.put_nowait(_END)

        producer = asyncio.create_task(produce())
        self._background_tasks.add(producer)
        producer.add_done_callback(self._background_tasks.discard)

        found = 0
        try:
            while not cancellation.is_cancelled:
                try:
                    item = queue.get_nowait()
                except asyncio.QueueEmpty:
                    await asyncio.sleep(self._poll_interval)
                    continue

                if item is _END:
                    break
                if isinstance(item, JourneyFound) and route_time_slot(item.journey) != target_slot:
                    continue
                if cancellation.is_cancelled:
                    break
                if isinstance(item, JourneyFound):
                    found += 1
                yield item  # type: ignore[misc]

            if cancellation.is_cancelled:
                logger.info(f"Alternatives stream cancelled after {found} alternatives")
            else:
                logger.info(f"Alternatives stream for {target_slot} finished with {found} alternatives")
            yield SearchDone(cancelled=cancellation.is_cancelled, error=failure[0] if failure else None)
        finally:
            if not producer.done():
                logger.debug("Alternatives stream closed early, stopping the search")
            search_token.cancel()
