"""TCDD booking service adapters."""

from tcdd_routes.adapters.tcdd_api.availability_parser import TrainAvailabilityParser
from tcdd_routes.adapters.tcdd_api.http_client import TcddHttpClient
from tcdd_routes.adapters.tcdd_api.offer_filter import OfferFilterPolicy
from tcdd_routes.adapters.tcdd_api.station_parser import StationFeedParser
from tcdd_routes.adapters.tcdd_api.tcdd_schedule_gateway import TcddScheduleGateway

__all__ = [
    "OfferFilterPolicy",
    "StationFeedParser",
    "TcddHttpClient",
    "TcddScheduleGateway",
    "TrainAvailabilityParser",
]
