"""Station domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Station:
    """Represents a passenger station known to the upstream booking service."""

    id: int
    name: str
    city_id: int | None = None
    district_id: int | None = None
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass(frozen=True)
class StationAdjacency:
    """One entry of the adjacency feed: stations with through-service from this one.

    The feed is directional and may be incomplete.
    """

    station_id: int
    name: str
    connected_ids: tuple[int, ...]
