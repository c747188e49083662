"""Transfer feasibility between two consecutive trains."""

from datetime import datetime

MINUTES_PER_DAY = 24 * 60


def minute_of_day(moment: datetime) -> int:
    """Minutes since local midnight."""
    return moment.hour * 60 + moment.minute


def transfer_minutes(arrival: datetime, departure: datetime) -> int:
    """Wait between an arrival and the next departure, by wall clock.

    A departure earlier in the day than the arrival counts as the next day.
    """
    return (minute_of_day(departure) - minute_of_day(arrival)) % MINUTES_PER_DAY


def is_feasible_transfer(
    arrival: datetime, departure: datetime, min_minutes: int, max_minutes: int
) -> bool:
    """Whether the wait lies within ``[min_minutes, max_minutes]``."""
    return min_minutes <= transfer_minutes(arrival, departure) <= max_minutes
