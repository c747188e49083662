"""Journey planner facade."""

import logging
from collections.abc import AsyncIterator
from datetime import date

from tcdd_routes.application.cancellation import CancellationToken
from tcdd_routes.application.services.alternatives_streamer import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    AlternativesStreamer,
)
from tcdd_routes.application.services.journey_presenter import JourneyPresenter
from tcdd_routes.application.services.route_search_service import RouteSearchService
from tcdd_routes.application.services.same_train_finder import SameTrainConnectionFinder
from tcdd_routes.application.services.station_graph import StationGraphBuilder
from tcdd_routes.domain.models.alternative_event import JourneyFound, SearchDone, StationProgress
from tcdd_routes.domain.models.connection_info import ConnectionInfo
from tcdd_routes.domain.models.journey import Journey
from tcdd_routes.domain.models.routing_policy import RoutingPolicy
from tcdd_routes.domain.models.search_options import SearchMode, SearchOptions
from tcdd_routes.domain.ports.schedule_gateway import ScheduleGateway

logger = logging.getLogger(__name__)

JourneyEvent = StationProgress | JourneyFound[Journey] | SearchDone


class JourneyPlanner:
    """Entry point for callers: route search and alternatives as Journey values."""

    def __init__(
        self,
        gateway: ScheduleGateway,
        routing_policy: RoutingPolicy | None = None,
        options: SearchOptions | None = None,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        """Wire the search engine, the alternatives streamer and the presenter."""
        self._graph_builder = StationGraphBuilder(gateway)
        self._search = RouteSearchService(gateway, self._graph_builder, routing_policy, options)
        self._streamer = AlternativesStreamer(
            SameTrainConnectionFinder(gateway, self._graph_builder), poll_interval_seconds
        )

    async def find_routes(
        self,
        from_station_id: int,
        to_station_id: int,
        service_date: date,
        max_connections: int | None = None,
        mode: SearchMode | None = None,
        cancellation: CancellationToken | None = None,
    ) -> list[Journey]:
        """Search routes and present them; gateway errors of the direct query propagate."""
        routes = await self._search.find_routes(
            from_station_id, to_station_id, service_date, max_connections, mode, cancellation
        )
        return JourneyPresenter.to_journeys(routes)

    async def find_same_train_alternatives(
        self,
        from_station_id: int,
        to_station_id: int,
        service_date: date,
        target_time: str,
        cancellation: CancellationToken | None = None,
    ) -> AsyncIterator[JourneyEvent]:
        """Stream reseat alternatives for the train departing at ``target_time``."""
        async for event in self._streamer.stream(
            from_station_id, to_station_id, service_date, target_time, cancellation
        ):
            if isinstance(event, JourneyFound):
                yield JourneyFound(journey=JourneyPresenter.to_journey(event.journey))
            else:
                yield event

    async def has_direct_route(self, from_station_id: int, to_station_id: int) -> bool:
        """Whether the adjacency feed lists the pair."""
        return await self._search.has_direct_route(from_station_id, to_station_id)

    async def connection_info(self, from_station_id: int, to_station_id: int) -> ConnectionInfo:
        """Direct connectivity and possible transfer stations."""
        return await self._search.connection_info(from_station_id, to_station_id)

    def reset(self) -> None:
        """Rebuild the station graph on the next search."""
        logger.info("Resetting station graph")
        self._graph_builder.reset()
