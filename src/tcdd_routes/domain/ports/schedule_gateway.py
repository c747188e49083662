"""Schedule gateway port."""

from datetime import date
from typing import Protocol

from tcdd_routes.domain.models.availability_result import AvailabilityResult
from tcdd_routes.domain.models.station import Station, StationAdjacency


class ScheduleGateway(Protocol):
    """Port for the upstream booking service's station feeds and availability query."""

    async def fetch_stations(self) -> list[Station]:
        """Get all queryable passenger stations."""
        ...

    async def fetch_station_adjacency(self) -> list[StationAdjacency]:
        """Get the station adjacency feed (empty when unavailable)."""
        ...

    async def search_train_availability(
        self, from_station_id: int, to_station_id: int, service_date: date
    ) -> AvailabilityResult:
        """Get the trains and free seats for a station pair on a date."""
        ...

    async def has_direct_route(self, from_station_id: int, to_station_id: int) -> bool:
        """Whether the adjacency feed lists a through-service between the two stations."""
        ...
