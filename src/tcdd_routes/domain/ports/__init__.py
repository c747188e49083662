"""Ports (interfaces) for the ports-and-adapters architecture."""

from tcdd_routes.domain.ports.schedule_gateway import ScheduleGateway

__all__ = ["ScheduleGateway"]
