"""Adapters layer - external system integrations."""

from tcdd_routes.adapters.config import AppConfig, RoutingPolicyLoader
from tcdd_routes.adapters.tcdd_api import (
    OfferFilterPolicy,
    TcddHttpClient,
    TcddScheduleGateway,
    TrainAvailabilityParser,
)

__all__ = [
    "AppConfig",
    "OfferFilterPolicy",
    "RoutingPolicyLoader",
    "TcddHttpClient",
    "TcddScheduleGateway",
    "TrainAvailabilityParser",
]
