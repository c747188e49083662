"""Per-search memo of availability queries."""

import asyncio
import logging
from datetime import date

from tcdd_routes.domain.models.availability_result import AvailabilityResult
from tcdd_routes.domain.ports.schedule_gateway import ScheduleGateway

logger = logging.getLogger(__name__)

MemoKey = tuple[int, int, date]


class AvailabilityMemo:
    """Remembers availability results for the lifetime of one search.

    Entries are only ever inserted, never replaced. Concurrent requests for
    the same (from, to, date) share one upstream query.
    """

    def __init__(self, gateway: ScheduleGateway) -> None:
        self._gateway = gateway
        self._entries: dict[MemoKey, asyncio.Future[AvailabilityResult]] = {}
        self.upstream_queries = 0

    def __contains__(self, key: MemoKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def search(self, from_station_id: int, to_station_id: int, service_date: date) -> AvailabilityResult:
        """Availability for a station pair, queried at most once per search."""
        key = (from_station_id, to_station_id, service_date)
        entry = self._entries.get(key)
        if entry is None:
            self.upstream_queries += 1
            entry = asyncio.ensure_future(
                self._gateway.search_train_availability(from_station_id, to_station_id, service_date)
            )
            self._entries[key] = entry
        else:
            logger.debug(f"Availability memo hit for {from_station_id} -> {to_station_id}")
        # shield: one cancelled waiter must not cancel the query for the others
        return await asyncio.shield(entry)
