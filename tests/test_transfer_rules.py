"""Tests for transfer feasibility rules."""

from tcdd_routes.application.services.transfer_rules import (
    is_feasible_transfer,
    minute_of_day,
    transfer_minutes,
)
from tests.fakes import at


def test_minute_of_day() -> None:
    """Given 14:30, when converting, then 870 minutes are returned."""
    assert minute_of_day(at("14:30")) == 870


def test_short_transfer_is_rejected() -> None:
    """Given a 15 minute wait and a 30 minute floor, when checking, then the transfer is rejected."""
    assert transfer_minutes(at("14:30"), at("14:45")) == 15
    assert is_feasible_transfer(at("14:30"), at("14:45"), 30, 480) is False


def test_transfer_within_window_is_accepted() -> None:
    """Given a 45 minute wait, when checking against [30, 480], then the transfer is accepted."""
    assert is_feasible_transfer(at("14:30"), at("15:15"), 30, 480) is True


def test_window_bounds_are_inclusive() -> None:
    """Given waits equal to both bounds, when checking, then both are accepted."""
    assert is_feasible_transfer(at("10:00"), at("10:30"), 30, 60) is True
    assert is_feasible_transfer(at("10:00"), at("11:00"), 30, 60) is True
    assert is_feasible_transfer(at("10:00"), at("11:01"), 30, 60) is False


def test_departure_before_arrival_wraps_to_next_day() -> None:
    """Given a departure earlier on the clock than the arrival, when checking, then it counts as next day."""
    assert transfer_minutes(at("23:30"), at("00:45")) == 75
    assert is_feasible_transfer(at("23:30"), at("00:45"), 30, 480) is True
    assert is_feasible_transfer(at("14:30"), at("14:00"), 30, 480) is False
