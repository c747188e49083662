"""Train offer domain models."""

from dataclasses import dataclass, field
from datetime import datetime

# Seat categories whose code or name contains one of these (case-insensitive)
# count as the standard bookable class.
ECONOMY_KEYWORDS = ("eco", "ekonomi", "economy")

NEXT_DAY_SUFFIX = " +1"


@dataclass(frozen=True)
class SeatCategory:
    """Remaining seats and fare for one seat category of a train."""

    category_id: int
    name: str
    code: str
    available_seats: int
    price: float
    currency: str

    @property
    def is_economy(self) -> bool:
        """Whether this category matches one of the economy keywords."""
        haystack = f"{self.code} {self.name}".lower()
        return any(keyword in haystack for keyword in ECONOMY_KEYWORDS)


@dataclass(frozen=True)
class TrainSegment:
    """One station-to-station leg the physical train passes through."""

    departure_station_id: int
    arrival_station_id: int
    departure_time: datetime | None = None
    arrival_time: datetime | None = None
    departure_station_name: str = ""
    arrival_station_name: str = ""
    duration_minutes: int = 0
    distance_km: float = 0.0


@dataclass(frozen=True)
class TrainOffer:
    """One bookable train on one station pair for one date."""

    train_number: str
    train_name: str
    departure_time: datetime
    arrival_time: datetime
    duration_minutes: int
    price: float
    currency: str
    available_seats: int
    train_type: str = ""
    distance_km: float = 0.0
    reservable: bool = False
    seat_categories: tuple[SeatCategory, ...] = field(default_factory=tuple)
    train_segments: tuple[TrainSegment, ...] = field(default_factory=tuple)

    @property
    def arrives_next_day(self) -> bool:
        """True when arrival falls on a later calendar day than departure."""
        return self.arrival_time.date() != self.departure_time.date()

    @property
    def departure_clock(self) -> str:
        """Departure wall-clock time as HH:MM."""
        return self.departure_time.strftime("%H:%M")

    @property
    def arrival_display(self) -> str:
        """Arrival wall-clock time as HH:MM, flagged with +1 on a day change."""
        clock = self.arrival_time.strftime("%H:%M")
        return clock + NEXT_DAY_SUFFIX if self.arrives_next_day else clock

    def economy_seats(self) -> int:
        """Remaining seats in economy categories.

        Falls back to the total remaining seats when the offer exposes no
        economy category at all.
        """
        economy = [category for category in self.seat_categories if category.is_economy]
        if economy:
            return sum(category.available_seats for category in economy)
        return self.available_seats

    def intermediate_station_ids(self, origin_id: int, destination_id: int) -> list[int]:
        """Stations the train passes through between origin and destination, in order."""
        stations: list[int] = []
        for segment in self.train_segments:
            for station_id in (segment.departure_station_id, segment.arrival_station_id):
                if station_id in (origin_id, destination_id) or station_id in stations:
                    continue
                stations.append(station_id)
        return stations
