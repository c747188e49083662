"""Tests for the station feed parser."""

from tcdd_routes.adapters.tcdd_api.station_parser import StationFeedParser


def station_record(station_id: int, name: str, **flags: bool) -> dict:
    record = {"id": station_id, "name": name, "showOnQuery": True, "active": True, "passengerDrop": True}
    record.update(flags)
    return record


def test_parse_stations_keeps_only_queryable_passenger_stations() -> None:
    """Given stations with mixed flags, when parsing, then only fully flagged ones remain."""
    records = [
        station_record(98, "ANKARA GAR"),
        station_record(1, "DEPO", passengerDrop=False),
        station_record(2, "ESKİ", active=False),
        station_record(3, "GİZLİ", showOnQuery=False),
        {"id": None, "name": "BROKEN", "showOnQuery": True, "active": True, "passengerDrop": True},
        "garbage",
    ]

    stations = StationFeedParser.parse_stations(records)

    assert [(s.id, s.name) for s in stations] == [(98, "ANKARA GAR")]


def test_parse_adjacency_keeps_domestic_entries_with_pairs() -> None:
    """Given adjacency entries, when parsing, then foreign and empty entries are dropped."""
    records = [
        {"id": 98, "name": "ANKARA GAR", "domestic": True, "pairs": [87, 48, 98, 87]},
        {"id": 1, "name": "SOFYA", "domestic": False, "pairs": [98]},
        {"id": 87, "name": "ESKİŞEHİR", "domestic": True, "pairs": []},
    ]

    entries = StationFeedParser.parse_adjacency(records)

    assert len(entries) == 1
    assert entries[0].station_id == 98
    assert entries[0].connected_ids == (87, 48)
