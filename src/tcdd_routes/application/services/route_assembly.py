"""Building ConnectedRoute values from chosen train offers."""

import re
from collections.abc import Iterable, Sequence

from tcdd_routes.application.services.transfer_rules import transfer_minutes
from tcdd_routes.domain.models.route import ConnectedRoute, RouteKind, RouteSegment
from tcdd_routes.domain.models.train_offer import TrainOffer

_TIME_SLOT = re.compile(r"(\d{1,2}):(\d{2})")


def extract_time_slot(clock: str) -> str | None:
    """Normalize a clock string to ``HH:MM``.

    Seconds and a trailing "+1" day marker are ignored, so "9:05:30 +1"
    becomes "09:05". Returns None for strings without a clock time.
    """
    match = _TIME_SLOT.search(clock or "")
    if not match:
        return None
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def route_time_slot(route: ConnectedRoute) -> str:
    """Departure slot (``HH:MM``) of the route's first leg."""
    return route.segments[0].offer.departure_clock


def direct_route(segment: RouteSegment) -> ConnectedRoute:
    """A zero-connection route for the single offer of a direct segment."""
    offer = segment.offer
    return ConnectedRoute(
        segments=(segment,),
        kind=RouteKind.DIRECT,
        total_duration=offer.duration_minutes,
        total_price=offer.price,
        total_distance=offer.distance_km,
        connection_count=0,
        available_seats=offer.available_seats,
    )


def same_train_route(first: RouteSegment, second: RouteSegment) -> ConnectedRoute:
    """One physical train bought as two tickets, split at ``first.to_station_id``."""
    first_offer, second_offer = first.offer, second.offer
    duration = round((second_offer.arrival_time - first_offer.departure_time).total_seconds() / 60)
    return ConnectedRoute(
        segments=(first, second),
        kind=RouteKind.SAME_TRAIN,
        total_duration=duration,
        total_price=first_offer.price + second_offer.price,
        total_distance=first_offer.distance_km + second_offer.distance_km,
        connection_count=1,
        transfer_stations=(first.to_station_name,),
        available_seats=min(first_offer.economy_seats(), second_offer.economy_seats()),
    )


def connected_route(segments: Sequence[RouteSegment], transfer_overhead_minutes: int) -> ConnectedRoute:
    """A multi-train route; each change adds a fixed overhead to the duration."""
    offers = [segment.offer for segment in segments]
    transfers = len(segments) - 1
    waits = [transfer_minutes(a.arrival_time, b.departure_time) for a, b in zip(offers, offers[1:])]
    return ConnectedRoute(
        segments=tuple(segments),
        kind=RouteKind.CONNECTED,
        total_duration=sum(o.duration_minutes for o in offers) + transfer_overhead_minutes * transfers,
        total_price=sum(o.price for o in offers),
        total_distance=sum(o.distance_km for o in offers),
        connection_count=transfers,
        transfer_stations=tuple(segment.to_station_name for segment in segments[:-1]),
        min_transfer_minutes=min(waits) if waits else 0,
        available_seats=min(o.economy_seats() for o in offers),
    )


def deduplicate(routes: Iterable[ConnectedRoute]) -> list[ConnectedRoute]:
    """Keep the first route of every signature."""
    unique: dict[str, ConnectedRoute] = {}
    for route in routes:
        unique.setdefault(route.signature(), route)
    return list(unique.values())


def rank(routes: Iterable[ConnectedRoute]) -> list[ConnectedRoute]:
    """Direct first, then by total duration, then by departure."""
    return sorted(routes, key=lambda r: (r.connection_count, r.total_duration, r.departure_time))


def filter_same_train_by_time_slot(
    same_train_routes: Iterable[ConnectedRoute], direct_offers: Iterable[TrainOffer]
) -> list[ConnectedRoute]:
    """Drop reseat routes for slots where a direct train still has economy seats."""
    bookable_slots = {offer.departure_clock for offer in direct_offers if offer.economy_seats() > 0}
    return [route for route in same_train_routes if route_time_slot(route) not in bookable_slots]
