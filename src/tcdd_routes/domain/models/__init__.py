"""Domain models for TCDD route discovery."""

from tcdd_routes.domain.models.alternative_event import (
    AlternativeEvent,
    JourneyFound,
    SearchDone,
    StationProgress,
)
from tcdd_routes.domain.models.availability_result import AvailabilityResult
from tcdd_routes.domain.models.connection_info import ConnectionInfo
from tcdd_routes.domain.models.journey import Journey, JourneyLeg
from tcdd_routes.domain.models.route import ConnectedRoute, RouteKind, RouteSegment
from tcdd_routes.domain.models.routing_policy import DetourRule, GroupDetourRule, RoutingPolicy
from tcdd_routes.domain.models.search_options import SearchMode, SearchOptions
from tcdd_routes.domain.models.station import Station, StationAdjacency
from tcdd_routes.domain.models.train_offer import SeatCategory, TrainOffer, TrainSegment

__all__ = [
    "AlternativeEvent",
    "AvailabilityResult",
    "ConnectedRoute",
    "ConnectionInfo",
    "DetourRule",
    "GroupDetourRule",
    "Journey",
    "JourneyFound",
    "JourneyLeg",
    "RouteKind",
    "RouteSegment",
    "RoutingPolicy",
    "SearchDone",
    "SearchMode",
    "SearchOptions",
    "SeatCategory",
    "Station",
    "StationAdjacency",
    "StationProgress",
    "TrainOffer",
    "TrainSegment",
]
