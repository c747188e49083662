"""Events emitted while same-train alternatives are being discovered."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from tcdd_routes.domain.models.route import ConnectedRoute

T = TypeVar("T")


@dataclass(frozen=True)
class StationProgress:
    """The search moved on to examine another intermediate station."""

    station_name: str


@dataclass(frozen=True)
class JourneyFound(Generic[T]):
    """An alternative itinerary was found."""

    journey: T


@dataclass(frozen=True)
class SearchDone:
    """Terminal marker, emitted exactly once per stream."""

    cancelled: bool = False
    error: str | None = None


AlternativeEvent = StationProgress | JourneyFound[ConnectedRoute] | SearchDone
