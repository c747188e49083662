"""Domain layer - core models, ports and errors."""

from tcdd_routes.domain.exceptions import AuthenticationError, ScheduleGatewayError
from tcdd_routes.domain.models import (
    ConnectedRoute,
    Journey,
    Station,
    TrainOffer,
)
from tcdd_routes.domain.ports import ScheduleGateway

__all__ = [
    "AuthenticationError",
    "ConnectedRoute",
    "Journey",
    "ScheduleGateway",
    "ScheduleGatewayError",
    "Station",
    "TrainOffer",
]
