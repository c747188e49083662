"""Application layer - the route discovery engine."""

from tcdd_routes.application.cancellation import CancellationToken

__all__ = ["CancellationToken"]
