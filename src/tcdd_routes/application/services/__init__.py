"""Application services."""

from tcdd_routes.application.services.alternatives_streamer import AlternativesStreamer
from tcdd_routes.application.services.availability_memo import AvailabilityMemo
from tcdd_routes.application.services.journey_planner import JourneyPlanner
from tcdd_routes.application.services.journey_presenter import JourneyPresenter
from tcdd_routes.application.services.route_search_service import RouteSearchService
from tcdd_routes.application.services.same_train_finder import SameTrainConnectionFinder
from tcdd_routes.application.services.station_graph import StationGraph, StationGraphBuilder

__all__ = [
    "AlternativesStreamer",
    "AvailabilityMemo",
    "JourneyPlanner",
    "JourneyPresenter",
    "RouteSearchService",
    "SameTrainConnectionFinder",
    "StationGraph",
    "StationGraphBuilder",
]
