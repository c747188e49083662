"""Caller-facing itinerary models."""

from dataclasses import dataclass

from tcdd_routes.domain.models.route import RouteKind
from tcdd_routes.domain.models.train_offer import SeatCategory


@dataclass(frozen=True)
class JourneyLeg:
    """A single train ride as shown to the caller."""

    id: str
    from_station_id: int
    from_station_name: str
    to_station_id: int
    to_station_name: str
    departure: str  # HH:MM
    arrival: str  # HH:MM, with " +1" on a day change
    duration: int  # minutes
    train_number: str
    train_name: str
    price: float
    currency: str
    available_seats: int
    seat_categories: tuple[SeatCategory, ...] = ()


@dataclass(frozen=True)
class Journey:
    """A complete itinerary as shown to the caller."""

    id: str
    legs: tuple[JourneyLeg, ...]
    kind: RouteKind
    total_duration: int
    total_price: float
    connection_count: int
    transfer_stations: tuple[str, ...] = ()
    min_transfer_minutes: int = 0
    available_seats: int | None = None  # seats bookable for the whole journey

    @property
    def is_direct(self) -> bool:
        """Whether no change of ticket is involved."""
        return self.kind is RouteKind.DIRECT
