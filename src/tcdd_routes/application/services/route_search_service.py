"""Route search service."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date

from tcdd_routes.application.cancellation import CancellationToken
from tcdd_routes.application.services.availability_memo import AvailabilityMemo
from tcdd_routes.application.services.route_assembly import (
    connected_route,
    deduplicate,
    direct_route,
    filter_same_train_by_time_slot,
    rank,
)
from tcdd_routes.application.services.same_train_finder import SameTrainConnectionFinder
from tcdd_routes.application.services.station_graph import StationGraph, StationGraphBuilder
from tcdd_routes.application.services.transfer_rules import is_feasible_transfer
from tcdd_routes.domain.exceptions import ScheduleGatewayError
from tcdd_routes.domain.models.alternative_event import JourneyFound
from tcdd_routes.domain.models.connection_info import ConnectionInfo
from tcdd_routes.domain.models.route import ConnectedRoute, RouteSegment
from tcdd_routes.domain.models.routing_policy import RoutingPolicy
from tcdd_routes.domain.models.search_options import SearchMode, SearchOptions
from tcdd_routes.domain.models.train_offer import TrainOffer
from tcdd_routes.domain.ports.schedule_gateway import ScheduleGateway

logger = logging.getLogger(__name__)

Chain = tuple[RouteSegment, ...]


@dataclass(frozen=True)
class _SearchContext:
    """State shared by all branches of one connected search."""

    graph: StationGraph
    memo: AvailabilityMemo
    origin_id: int
    destination_id: int
    service_date: date
    cancellation: CancellationToken


class RouteSearchService:
    """Finds direct, same-train and multi-train routes between two stations."""

    def __init__(
        self,
        gateway: ScheduleGateway,
        graph_builder: StationGraphBuilder | None = None,
        routing_policy: RoutingPolicy | None = None,
        options: SearchOptions | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            gateway: Schedule gateway for availability queries.
            graph_builder: Station graph builder; one is created if omitted.
            routing_policy: Hub priorities and detour rules.
            options: Search tunables.
        """
        self._gateway = gateway
        self._graph_builder = graph_builder or StationGraphBuilder(gateway)
        self._policy = routing_policy or RoutingPolicy()
        self._options = options or SearchOptions()
        self._same_train_finder = SameTrainConnectionFinder(gateway, self._graph_builder)

    @property
    def options(self) -> SearchOptions:
        """Search tunables in use."""
        return self._options

    async def find_routes(
        self,
        from_station_id: int,
        to_station_id: int,
        service_date: date,
        max_connections: int | None = None,
        mode: SearchMode | None = None,
        cancellation: CancellationToken | None = None,
    ) -> list[ConnectedRoute]:
        """Find routes, deduplicated and ranked direct first.

        Args:
            from_station_id: Origin station.
            to_station_id: Destination station.
            service_date: Travel date.
            max_connections: Train changes allowed in connected routes.
            mode: How much to search beyond direct trains.
            cancellation: Stops same-train and connected search early.

        Returns:
            Ranked routes; each direct train is its own route.

        Raises:
            AuthenticationError: The credential was rejected on the direct query.
            ScheduleGatewayError: The direct query failed.
        """
        mode = mode or self._options.mode
        max_connections = self._options.max_connections if max_connections is None else max_connections
        if cancellation is None:
            cancellation = CancellationToken()
        memo = AvailabilityMemo(self._gateway)
        graph = await self._graph_builder.get_graph()

        direct = await memo.search(from_station_id, to_station_id, service_date)
        direct.raise_for_failure()
        routes = [
            direct_route(self._segment(graph, from_station_id, to_station_id, (offer,)))
            for offer in direct.offers
        ]
        logger.info(f"Found {len(routes)} direct trains {from_station_id} -> {to_station_id}")

        if mode in (SearchMode.WITH_SAME_TRAIN, SearchMode.FULL) and not cancellation.is_cancelled:
            same_train = await self._collect_same_train(
                from_station_id, to_station_id, service_date, memo, cancellation
            )
            routes.extend(filter_same_train_by_time_slot(same_train, direct.offers))

        if mode is SearchMode.FULL and max_connections >= 1 and not cancellation.is_cancelled:
            context = _SearchContext(
                graph=graph,
                memo=memo,
                origin_id=from_station_id,
                destination_id=to_station_id,
                service_date=service_date,
                cancellation=cancellation,
            )
            routes.extend(await self._search_connected(context, max_connections))

        ranked = rank(deduplicate(routes))
        logger.info(
            f"Route search {from_station_id} -> {to_station_id} on {service_date}: "
            f"{len(ranked)} routes, {memo.upstream_queries} availability queries"
        )
        if self._options.result_limit is not None:
            return ranked[: self._options.result_limit]
        return ranked

    async def find_same_train_connections(
        self,
        from_station_id: int,
        to_station_id: int,
        service_date: date,
        cancellation: CancellationToken | None = None,
    ) -> list[ConnectedRoute]:
        """Collect all same-train reseat routes, ranked."""
        memo = AvailabilityMemo(self._gateway)
        routes = await self._collect_same_train(
            from_station_id, to_station_id, service_date, memo, cancellation
        )
        return rank(deduplicate(routes))

    async def has_direct_route(self, from_station_id: int, to_station_id: int) -> bool:
        """Whether the adjacency feed lists the pair."""
        return await self._gateway.has_direct_route(from_station_id, to_station_id)

    async def connection_info(self, from_station_id: int, to_station_id: int) -> ConnectionInfo:
        """Direct connectivity and the stations connected to both endpoints."""
        graph = await self._graph_builder.get_graph()
        if from_station_id not in graph or to_station_id not in graph:
            return ConnectionInfo(has_direct=False)
        return ConnectionInfo(
            has_direct=graph.is_directly_connected(from_station_id, to_station_id),
            possible_transfer_stations=graph.transfer_candidates(from_station_id, to_station_id),
        )

    async def _collect_same_train(
        self,
        from_station_id: int,
        to_station_id: int,
        service_date: date,
        memo: AvailabilityMemo,
        cancellation: CancellationToken | None,
    ) -> list[ConnectedRoute]:
        routes = []
        async for event in self._same_train_finder.search(
            from_station_id, to_station_id, service_date, memo=memo, cancellation=cancellation
        ):
            if isinstance(event, JourneyFound):
                routes.append(event.journey)
        return routes

    @staticmethod
    def _segment(
        graph: StationGraph, from_station_id: int, to_station_id: int, offers: tuple[TrainOffer, ...]
    ) -> RouteSegment:
        return RouteSegment(
            from_station_id=from_station_id,
            from_station_name=graph.station_name(from_station_id),
            to_station_id=to_station_id,
            to_station_name=graph.station_name(to_station_id),
            offers=offers,
        )

    def _transfer_ok(self, arriving: TrainOffer, departing: TrainOffer) -> bool:
        return is_feasible_transfer(
            arriving.arrival_time,
            departing.departure_time,
            self._options.min_transfer_minutes,
            self._options.max_transfer_minutes,
        )

    def _candidates(self, context: _SearchContext, station_id: int, visited: frozenset[int]) -> list[int]:
        """Next stations to explore: policy-pruned, hubs first, truncated to the fan-out limit."""
        candidates = [
            hub
            for hub in context.graph.next_hops(station_id, context.destination_id, visited)
            if not self._policy.is_illogical(station_id, hub, context.destination_id)
            and not self._policy.is_illogical(context.origin_id, hub, context.destination_id)
        ]
        candidates.sort(key=lambda hub: not self._policy.is_hub(hub))
        return candidates[: self._options.hub_fanout_limit]

    async def _search_connected(self, context: _SearchContext, max_connections: int) -> list[ConnectedRoute]:
        graph = context.graph
        if context.origin_id not in graph or context.destination_id not in graph:
            logger.info("Origin or destination missing from the station graph, skipping connected search")
            return []

        chains = await self._explore(
            context, context.origin_id, (), frozenset({context.origin_id}), max_connections
        )
        overhead = self._options.transfer_overhead_minutes
        routes = [connected_route(chain, overhead) for chain in chains]
        logger.info(f"Found {len(routes)} connected routes")
        return routes

    async def _explore(
        self,
        context: _SearchContext,
        station_id: int,
        legs: Chain,
        visited: frozenset[int],
        budget: int,
    ) -> list[Chain]:
        """Complete chains from ``station_id`` using at most ``budget`` more changes."""
        if budget <= 0 or context.cancellation.is_cancelled:
            return []

        candidates = self._candidates(context, station_id, visited)
        logger.debug(
            f"Exploring {len(candidates)} transfer stations from "
            f"{context.graph.station_name(station_id)}"
        )
        results = await asyncio.gather(
            *(self._explore_via(context, station_id, hub, legs, visited, budget) for hub in candidates)
        )
        chains = [chain for hub_chains in results for chain in hub_chains]
        return chains[: self._options.max_partial_chains]

    async def _explore_via(
        self,
        context: _SearchContext,
        station_id: int,
        hub_id: int,
        legs: Chain,
        visited: frozenset[int],
        budget: int,
    ) -> list[Chain]:
        """Chains whose next change is at ``hub_id``. Failures mean "no route via this hub"."""
        if context.cancellation.is_cancelled:
            return []

        graph = context.graph
        try:
            to_hub = await context.memo.search(station_id, hub_id, context.service_date)
            if not to_hub.success or not to_hub.offers:
                return []

            offers = to_hub.offers
            if legs:
                offers = tuple(o for o in offers if self._transfer_ok(legs[-1].offer, o))
            if not offers:
                return []

            chains: list[Chain] = []
            if graph.is_directly_connected(hub_id, context.destination_id):
                final = await context.memo.search(hub_id, context.destination_id, context.service_date)
                if final.success:
                    chain = self._pair_final_leg(graph, station_id, hub_id, offers, final.offers, context)
                    if chain:
                        chains.append(legs + chain)

            if budget > 1:
                leg = self._segment(graph, station_id, hub_id, offers)
                chains.extend(
                    await self._explore(context, hub_id, legs + (leg,), visited | {hub_id}, budget - 1)
                )
            return chains
        except ScheduleGatewayError as e:
            logger.warning(f"Skipping transfer station {graph.station_name(hub_id)}: {e}")
            return []

    def _pair_final_leg(
        self,
        graph: StationGraph,
        station_id: int,
        hub_id: int,
        offers: tuple[TrainOffer, ...],
        final_offers: tuple[TrainOffer, ...],
        context: _SearchContext,
    ) -> Chain | None:
        """Earliest train into the hub that has a feasible onward train, with that onward train."""
        for arriving in offers:
            onward = tuple(o for o in final_offers if self._transfer_ok(arriving, o))
            if onward:
                rest = tuple(o for o in offers if o is not arriving)
                return (
                    self._segment(graph, station_id, hub_id, (arriving, *rest)),
                    self._segment(graph, hub_id, context.destination_id, onward),
                )
        return None
