"""Undirected station adjacency graph built from the upstream feeds."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from tcdd_routes.domain.models.station import Station, StationAdjacency
from tcdd_routes.domain.ports.schedule_gateway import ScheduleGateway

logger = logging.getLogger(__name__)


class StationGraph:
    """Immutable station graph.

    The adjacency feed is directional and incomplete, so edges are
    symmetrized: if either station lists the other, both are neighbours.
    """

    def __init__(self, edges: dict[int, frozenset[int]], names: dict[int, str]) -> None:
        self._edges = edges
        self._names = names

    @classmethod
    def from_feed(
        cls, adjacency: Iterable[StationAdjacency], stations: Iterable[Station] = ()
    ) -> StationGraph:
        """Build the graph from adjacency entries and the station list.

        Args:
            adjacency: Adjacency feed entries.
            stations: Station list, used for names the adjacency feed lacks.

        Returns:
            StationGraph with symmetric edges.
        """
        edges: dict[int, set[int]] = {}
        names = {station.id: station.name for station in stations}

        for entry in adjacency:
            names[entry.station_id] = entry.name
            edges.setdefault(entry.station_id, set())
            for connected_id in entry.connected_ids:
                if connected_id == entry.station_id:
                    continue
                edges[entry.station_id].add(connected_id)
                edges.setdefault(connected_id, set()).add(entry.station_id)

        return cls({station_id: frozenset(ids) for station_id, ids in edges.items()}, names)

    def __contains__(self, station_id: object) -> bool:
        return station_id in self._edges

    def __len__(self) -> int:
        return len(self._edges)

    def connections_of(self, station_id: int) -> frozenset[int]:
        """Neighbours of a station (empty for unknown stations)."""
        return self._edges.get(station_id, frozenset())

    def is_directly_connected(self, from_station_id: int, to_station_id: int) -> bool:
        """Whether the two stations are neighbours in either direction of the feed."""
        return to_station_id in self.connections_of(from_station_id)

    def transfer_candidates(self, from_station_id: int, to_station_id: int) -> list[int]:
        """Stations connected to both endpoints, in ascending id order."""
        common = self.connections_of(from_station_id) & self.connections_of(to_station_id)
        return sorted(common - {from_station_id, to_station_id})

    def next_hops(
        self, station_id: int, destination_id: int, exclude: Iterable[int] = ()
    ) -> list[int]:
        """Neighbours to continue a search through, in ascending id order.

        The destination and excluded (already visited) stations are left out.
        """
        excluded = set(exclude) | {station_id, destination_id}
        return sorted(self.connections_of(station_id) - excluded)

    def station_name(self, station_id: int) -> str:
        """Display name of a station."""
        return self._names.get(station_id) or f"Station {station_id}"


class StationGraphBuilder:
    """Builds the station graph once, on first use."""

    def __init__(self, gateway: ScheduleGateway) -> None:
        """Initialize with a schedule gateway."""
        self._gateway = gateway
        self._graph: StationGraph | None = None
        self._lock = asyncio.Lock()

    async def get_graph(self) -> StationGraph:
        """Return the graph, fetching both feeds on the first call.

        A graph without edges means the adjacency feed failed; it is returned
        but not kept, so the next call asks the gateway again.
        """
        if self._graph is not None:
            return self._graph

        async with self._lock:
            if self._graph is not None:
                return self._graph
            adjacency, stations = await asyncio.gather(
                self._gateway.fetch_station_adjacency(), self._gateway.fetch_stations()
            )
            graph = StationGraph.from_feed(adjacency, stations)
            if len(graph) == 0:
                logger.warning("Station adjacency feed is empty, graph will be rebuilt on next use")
                return graph
            self._graph = graph
            logger.info(f"Built station graph with {len(graph)} stations")
            return graph

    def reset(self) -> None:
        """Drop the graph; the next get_graph() rebuilds it."""
        self._graph = None
