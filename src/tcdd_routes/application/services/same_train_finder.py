"""Same-train reseat search.

Finds one physical train that passes through an intermediate station and is
bookable as two tickets, origin -> intermediate and intermediate ->
destination, when the end-to-end fare class is sold out.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from datetime import date

from tcdd_routes.application.cancellation import CancellationToken
from tcdd_routes.application.services.availability_memo import AvailabilityMemo
from tcdd_routes.application.services.route_assembly import same_train_route
from tcdd_routes.application.services.station_graph import StationGraphBuilder
from tcdd_routes.domain.exceptions import ScheduleGatewayError
from tcdd_routes.domain.models.alternative_event import JourneyFound, StationProgress
from tcdd_routes.domain.models.route import ConnectedRoute, RouteSegment
from tcdd_routes.domain.models.train_offer import TrainOffer
from tcdd_routes.domain.ports.schedule_gateway import ScheduleGateway

logger = logging.getLogger(__name__)

SameTrainEvent = StationProgress | JourneyFound[ConnectedRoute]


def _bookable_offer(offers: tuple[TrainOffer, ...], train_number: str) -> TrainOffer | None:
    for offer in offers:
        if offer.train_number == train_number and offer.economy_seats() > 0:
            return offer
    return None


class SameTrainConnectionFinder:
    """Finds same-train reseat itineraries."""

    def __init__(self, gateway: ScheduleGateway, graph_builder: StationGraphBuilder) -> None:
        """Initialize with a schedule gateway and the station graph builder (for names)."""
        self._gateway = gateway
        self._graph_builder = graph_builder

    @staticmethod
    def trains_by_station(
        offers: tuple[TrainOffer, ...], from_station_id: int, to_station_id: int
    ) -> dict[int, list[str]]:
        """Map every intermediate station to the train numbers passing through it.

        Only offers with a populated segment list and free economy seats count.
        Stations keep the order in which the trains reach them.
        """
        stations: dict[int, list[str]] = {}
        for offer in offers:
            if not offer.train_segments or offer.economy_seats() <= 0:
                continue
            for station_id in offer.intermediate_station_ids(from_station_id, to_station_id):
                trains = stations.setdefault(station_id, [])
                if offer.train_number not in trains:
                    trains.append(offer.train_number)
        return stations

    async def search(
        self,
        from_station_id: int,
        to_station_id: int,
        service_date: date,
        memo: AvailabilityMemo | None = None,
        cancellation: CancellationToken | None = None,
    ) -> AsyncIterator[SameTrainEvent]:
        """Yield progress for each examined station and every itinerary found.

        A failed direct query raises ScheduleGatewayError (AuthenticationError
        for credential problems); failures on intermediate stations are
        logged and skipped.
        """
        if memo is None:
            memo = AvailabilityMemo(self._gateway)
        if cancellation is None:
            cancellation = CancellationToken()
        graph = await self._graph_builder.get_graph()

        direct = await memo.search(from_station_id, to_station_id, service_date)
        direct.raise_for_failure()

        stations = self.trains_by_station(direct.offers, from_station_id, to_station_id)
        logger.info(
            f"Same-train search {from_station_id} -> {to_station_id}: "
            f"{len(stations)} intermediate stations"
        )

        for station_id, train_numbers in stations.items():
            if cancellation.is_cancelled:
                logger.info("Same-train search cancelled")
                return

            station_name = graph.station_name(station_id)
            yield StationProgress(station_name=station_name)

            try:
                first_leg, second_leg = await asyncio.gather(
                    memo.search(from_station_id, station_id, service_date),
                    memo.search(station_id, to_station_id, service_date),
                )
            except ScheduleGatewayError as e:
                logger.warning(f"Skipping {station_name}: {e}")
                continue
            if not first_leg.success or not second_leg.success:
                logger.warning(
                    f"Skipping {station_name}: {first_leg.message or second_leg.message}"
                )
                continue

            for train_number in train_numbers:
                if cancellation.is_cancelled:
                    logger.info("Same-train search cancelled")
                    return

                first_offer = _bookable_offer(first_leg.offers, train_number)
                second_offer = _bookable_offer(second_leg.offers, train_number)
                if first_offer is None or second_offer is None:
                    continue

                route = same_train_route(
                    RouteSegment(
                        from_station_id=from_station_id,
                        from_station_name=graph.station_name(from_station_id),
                        to_station_id=station_id,
                        to_station_name=station_name,
                        offers=(first_offer,),
                    ),
                    RouteSegment(
                        from_station_id=station_id,
                        from_station_name=station_name,
                        to_station_id=to_station_id,
                        to_station_name=graph.station_name(to_station_id),
                        offers=(second_offer,),
                    ),
                )
                logger.debug(f"Same-train option: train {train_number} via {station_name}")
                yield JourneyFound(journey=route)
