"""Route domain models produced by the route search engine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from tcdd_routes.domain.models.train_offer import TrainOffer


class RouteKind(str, Enum):
    """How an itinerary is travelled."""

    DIRECT = "direct"
    SAME_TRAIN = "same-train"  # one physical train, two tickets
    CONNECTED = "connected"  # change to a different train


@dataclass(frozen=True)
class RouteSegment:
    """One leg of an itinerary with the offers available for it."""

    from_station_id: int
    from_station_name: str
    to_station_id: int
    to_station_name: str
    offers: tuple[TrainOffer, ...]

    @property
    def offer(self) -> TrainOffer:
        """The chosen (first) offer of this leg."""
        return self.offers[0]


@dataclass(frozen=True)
class ConnectedRoute:
    """An ordered list of route segments plus aggregates."""

    segments: tuple[RouteSegment, ...]
    kind: RouteKind
    total_duration: int
    total_price: float
    connection_count: int
    total_distance: float = 0.0
    transfer_stations: tuple[str, ...] = field(default_factory=tuple)
    min_transfer_minutes: int = 0
    available_seats: int | None = None

    @property
    def departure_time(self) -> datetime:
        """Departure of the first leg."""
        return self.segments[0].offer.departure_time

    def station_sequence(self) -> str:
        """Station pairs of all legs, e.g. ``98-87|87-1325``."""
        return "|".join(f"{s.from_station_id}-{s.to_station_id}" for s in self.segments)

    def signature(self) -> str:
        """Key used to drop duplicate itineraries.

        Direct routes are distinguished by train number, same-train routes by
        train number and intermediate station, connected routes by their
        connection count, duration and price.
        """
        sequence = self.station_sequence()
        if self.kind is RouteKind.DIRECT:
            train_number = self.segments[0].offer.train_number or "unknown"
            return f"direct:{sequence}:{train_number}"
        if self.kind is RouteKind.SAME_TRAIN:
            train_number = self.segments[0].offer.train_number or "unknown"
            intermediate = self.transfer_stations[0] if self.transfer_stations else "unknown"
            return f"same-train:{sequence}:{train_number}:{intermediate}"
        return (
            f"connected:{sequence}:{self.connection_count}:"
            f"{self.total_duration}:{self.total_price:.2f}"
        )
