"""Tests for route building, deduplication and ranking."""

from tcdd_routes.application.services.route_assembly import (
    connected_route,
    deduplicate,
    direct_route,
    extract_time_slot,
    rank,
    same_train_route,
)
from tcdd_routes.domain.models import ConnectedRoute, RouteKind, RouteSegment
from tests.fakes import make_offer


def direct(number: str, departure: str, arrival: str) -> ConnectedRoute:
    offer = make_offer(number, departure, arrival)
    return direct_route(RouteSegment(98, "ANKARA GAR", 48, "PENDİK", (offer,)))


def via_eskisehir(first: str, second: str, departure: str = "07:00") -> ConnectedRoute:
    return connected_route(
        [
            RouteSegment(98, "ANKARA GAR", 87, "ESKİŞEHİR", (make_offer(first, departure, "08:30"),)),
            RouteSegment(87, "ESKİŞEHİR", 48, "PENDİK", (make_offer(second, "09:30", "11:00"),)),
        ],
        transfer_overhead_minutes=45,
    )


class TestDeduplicate:
    """Tests for deduplicate()."""

    def test_different_trains_on_same_pair_both_survive(self) -> None:
        """Given two direct trains on one pair from two merged searches, when deduplicating, then both are kept."""
        first_search = [direct("81001", "07:00", "11:00")]
        second_search = [direct("81003", "09:00", "13:00"), direct("81001", "07:00", "11:00")]

        routes = deduplicate(first_search + second_search)

        assert [r.segments[0].offer.train_number for r in routes] == ["81001", "81003"]

    def test_identical_routes_collapse_to_the_first(self) -> None:
        """Given the same connection found twice, when deduplicating, then the first one is kept."""
        first = via_eskisehir("A", "B")
        again = via_eskisehir("A", "B")

        routes = deduplicate([first, again])

        assert len(routes) == 1
        assert routes[0] is first

    def test_reseats_at_different_stations_are_distinct(self) -> None:
        """Given one train split at two stations, when deduplicating, then both reseats are kept."""
        offer = make_offer("T", "07:00", "08:00")
        onward = make_offer("T", "08:05", "10:00")
        at_eskisehir = same_train_route(
            RouteSegment(98, "ANKARA GAR", 87, "ESKİŞEHİR", (offer,)),
            RouteSegment(87, "ESKİŞEHİR", 48, "PENDİK", (onward,)),
        )
        at_bozuyuk = same_train_route(
            RouteSegment(98, "ANKARA GAR", 5, "BOZÜYÜK", (offer,)),
            RouteSegment(5, "BOZÜYÜK", 48, "PENDİK", (onward,)),
        )

        assert len(deduplicate([at_eskisehir, at_bozuyuk, at_eskisehir])) == 2


class TestRank:
    """Tests for rank()."""

    def test_fewer_changes_come_first(self) -> None:
        """Given a fast connection and a slow direct train, when ranking, then the direct train leads."""
        slow_direct = direct("D", "06:00", "14:00")
        fast_connection = via_eskisehir("A", "B")

        ranked = rank([fast_connection, slow_direct])

        assert [r.kind for r in ranked] == [RouteKind.DIRECT, RouteKind.CONNECTED]

    def test_shorter_duration_then_earlier_departure(self) -> None:
        """Given direct trains of equal and different durations, when ranking, then duration then departure decide."""
        late_short = direct("C", "10:00", "13:00")
        early_long = direct("A", "06:00", "10:30")
        mid_long = direct("B", "08:00", "12:30")

        ranked = rank([mid_long, early_long, late_short])

        assert [r.segments[0].offer.train_number for r in ranked] == ["C", "A", "B"]

    def test_rank_keeps_input_untouched(self) -> None:
        """Given a list of routes, when ranking, then a new list is returned."""
        routes = [direct("B", "08:00", "12:00"), direct("A", "06:00", "10:00")]

        ranked = rank(routes)

        assert [r.segments[0].offer.train_number for r in routes] == ["B", "A"]
        assert [r.segments[0].offer.train_number for r in ranked] == ["A", "B"]


def test_extract_time_slot_ignores_seconds_and_day_marker() -> None:
    """Given clock strings with seconds and a +1 marker, when extracting, then HH:MM is returned."""
    assert extract_time_slot("9:05:30 +1") == "09:05"
    assert extract_time_slot("") is None
