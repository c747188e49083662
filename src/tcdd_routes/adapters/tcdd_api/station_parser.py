"""Parser for the TCDD station list and station-pairs feeds."""

import logging
from typing import Any

from tcdd_routes.domain.models.station import Station, StationAdjacency

logger = logging.getLogger(__name__)

# Flags a station-list entry needs to be offered for passenger queries
REQUIRED_STATION_FLAGS = ("showOnQuery", "active", "passengerDrop")


class StationFeedParser:
    """Parses the two station feeds into domain objects."""

    @staticmethod
    def _as_int(value: Any) -> int | None:
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def parse_stations(records: list[Any]) -> list[Station]:
        """Keep active, queryable, passenger-capable stations."""
        stations = []
        for record in records:
            if not isinstance(record, dict):
                continue
            station_id = StationFeedParser._as_int(record.get("id"))
            name = record.get("name")
            if not station_id or not name:
                continue
            if not all(record.get(flag) is True for flag in REQUIRED_STATION_FLAGS):
                continue

            stations.append(
                Station(
                    id=station_id,
                    name=str(name),
                    city_id=StationFeedParser._as_int(record.get("cityId")),
                    district_id=StationFeedParser._as_int(record.get("districtId")),
                    latitude=float(record.get("latitude") or 0.0),
                    longitude=float(record.get("longitude") or 0.0),
                )
            )
        return stations

    @staticmethod
    def parse_adjacency(records: list[Any]) -> list[StationAdjacency]:
        """Keep domestic entries that list at least one connected station."""
        entries = []
        for record in records:
            if not isinstance(record, dict):
                continue
            station_id = StationFeedParser._as_int(record.get("id"))
            name = record.get("name")
            pairs = record.get("pairs")
            if not station_id or not name or record.get("domestic") is not True:
                continue
            if not isinstance(pairs, list) or not pairs:
                continue

            connected = []
            for pair in pairs:
                pair_id = StationFeedParser._as_int(pair)
                if pair_id and pair_id != station_id and pair_id not in connected:
                    connected.append(pair_id)
            if not connected:
                continue

            entries.append(
                StationAdjacency(station_id=station_id, name=str(name), connected_ids=tuple(connected))
            )
        return entries
