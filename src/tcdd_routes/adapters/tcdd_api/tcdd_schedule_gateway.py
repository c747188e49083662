"""TCDD schedule gateway adapter implementing the ScheduleGateway port."""

import logging
from datetime import date

from tcdd_routes.adapters.cache.feed_cache import FeedCache
from tcdd_routes.adapters.tcdd_api.availability_parser import TrainAvailabilityParser
from tcdd_routes.adapters.tcdd_api.fallback_stations import FALLBACK_STATIONS
from tcdd_routes.adapters.tcdd_api.http_client import TcddHttpClient
from tcdd_routes.adapters.tcdd_api.offer_filter import OfferFilterPolicy
from tcdd_routes.adapters.tcdd_api.station_parser import StationFeedParser
from tcdd_routes.domain.exceptions import AuthenticationError, ScheduleGatewayError
from tcdd_routes.domain.models.availability_result import AvailabilityResult
from tcdd_routes.domain.models.station import Station, StationAdjacency
from tcdd_routes.domain.ports.schedule_gateway import ScheduleGateway

logger = logging.getLogger(__name__)

MAX_QUERY_RESULTS = 10
INVALID_STATIONS_MESSAGE = "Invalid station IDs"

# Dotted and dotless I lowercase differently in Turkish
_TURKISH_LOWER = str.maketrans({"İ": "i", "I": "ı"})


def normalize_station_name(name: str) -> str:
    """Lowercase a station name using Turkish casing rules."""
    return name.translate(_TURKISH_LOWER).lower().strip()


class TcddScheduleGateway(ScheduleGateway):
    """Adapter for the TCDD booking service.

    Station and adjacency feeds are fetched once and cached; availability
    queries always go to the upstream. No method raises for upstream
    failures: feeds degrade to fallbacks and availability queries return a
    failed AvailabilityResult.
    """

    def __init__(
        self,
        http_client: TcddHttpClient,
        availability_parser: TrainAvailabilityParser,
        offer_filter: OfferFilterPolicy | None = None,
        station_cache_ttl: float | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            http_client: Client for the upstream endpoints.
            availability_parser: Parser for availability responses.
            offer_filter: Sold-out filter applied to every availability result.
            station_cache_ttl: Seconds the station list stays cached; None
                keeps it for the process lifetime.
        """
        self._http_client = http_client
        self._availability_parser = availability_parser
        self._offer_filter = offer_filter or OfferFilterPolicy()
        self._stations = FeedCache[list[Station]]("stations", self._load_stations, station_cache_ttl)
        self._adjacency = FeedCache[list[StationAdjacency]]("station pairs", self._load_adjacency)

    async def _load_stations(self) -> list[Station]:
        stations = StationFeedParser.parse_stations(await self._http_client.fetch_stations())
        if not stations:
            raise ScheduleGatewayError("Station feed contained no usable stations")
        logger.info(f"Loaded {len(stations)} stations from TCDD")
        return stations

    async def _load_adjacency(self) -> list[StationAdjacency]:
        adjacency = StationFeedParser.parse_adjacency(await self._http_client.fetch_station_pairs())
        logger.info(f"Loaded {len(adjacency)} station adjacency entries from TCDD")
        return adjacency

    async def fetch_stations(self) -> list[Station]:
        """Get all queryable passenger stations, or the static list on failure."""
        try:
            return await self._stations.get()
        except ScheduleGatewayError as e:
            logger.warning(f"Failed to fetch stations, using fallback list: {e}")
            return list(FALLBACK_STATIONS)

    async def fetch_station_adjacency(self) -> list[StationAdjacency]:
        """Get the adjacency feed, or an empty list on failure."""
        try:
            return await self._adjacency.get()
        except ScheduleGatewayError as e:
            logger.warning(f"Failed to fetch station pairs: {e}")
            return []

    async def has_direct_route(self, from_station_id: int, to_station_id: int) -> bool:
        """Whether the raw (unsymmetrized) adjacency feed lists the pair."""
        for entry in await self.fetch_station_adjacency():
            if entry.station_id == from_station_id:
                return to_station_id in entry.connected_ids
        return False

    async def station_name(self, station_id: int) -> str | None:
        """Name of a station from the station list, else the static list."""
        for station in await self.fetch_stations():
            if station.id == station_id:
                return station.name
        for station in FALLBACK_STATIONS:
            if station.id == station_id:
                return station.name
        return None

    async def find_station_by_name(self, name: str) -> Station | None:
        """First station whose name contains, or is contained in, the given name."""
        needle = normalize_station_name(name)
        if not needle:
            return None
        for station in await self.fetch_stations():
            candidate = normalize_station_name(station.name)
            if needle in candidate or candidate in needle:
                return station
        return None

    async def find_stations_by_query(self, query: str, limit: int = MAX_QUERY_RESULTS) -> list[Station]:
        """Stations whose name contains the query, at most ``limit`` of them."""
        needle = normalize_station_name(query)
        if not needle:
            return []
        matches = [s for s in await self.fetch_stations() if needle in normalize_station_name(s.name)]
        return matches[:limit]

    async def search_train_availability(
        self, from_station_id: int, to_station_id: int, service_date: date
    ) -> AvailabilityResult:
        """Query trains and free seats for a station pair on a date.

        Returns:
            AvailabilityResult; failures are reported with success=False and,
            for credential problems, auth_failed=True.
        """
        from_name = await self.station_name(from_station_id)
        to_name = await self.station_name(to_station_id)
        if not from_name or not to_name:
            logger.warning(f"Unknown station in query {from_station_id} -> {to_station_id}")
            return AvailabilityResult.failed(INVALID_STATIONS_MESSAGE)

        try:
            data = await self._http_client.search_availability(
                from_station_id, from_name, to_station_id, to_name, service_date
            )
        except AuthenticationError as e:
            logger.error(f"TCDD rejected the credential: {e}")
            return AvailabilityResult.failed(str(e), auth_failed=True)
        except ScheduleGatewayError as e:
            logger.warning(
                f"Availability query {from_station_id} -> {to_station_id} on {service_date} failed: {e}"
            )
            return AvailabilityResult.failed(str(e))

        offers = self._offer_filter.apply(self._availability_parser.parse(data, service_date))
        logger.debug(
            f"{len(offers)} bookable trains {from_station_id} -> {to_station_id} on {service_date}"
        )
        return AvailabilityResult(success=True, offers=tuple(offers))

    def set_auth_token(self, token: str) -> None:
        """Replace the credential and drop feeds fetched with the old one."""
        self._http_client.set_auth_token(token)
        self.invalidate()

    def invalidate(self) -> None:
        """Drop the cached station and adjacency feeds."""
        self._stations.invalidate()
        self._adjacency.invalidate()
