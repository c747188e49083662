"""Conversion of engine routes into caller-facing journeys."""

from tcdd_routes.domain.models.journey import Journey, JourneyLeg
from tcdd_routes.domain.models.route import ConnectedRoute

CURRENCY_SYMBOLS = {"TRY": "₺"}


def format_duration(minutes: int) -> str:
    """Format minutes the way the booking site does, e.g. ``4sa 15dk``."""
    hours, mins = divmod(max(minutes, 0), 60)
    if hours == 0:
        return f"{mins}dk"
    if mins == 0:
        return f"{hours}sa"
    return f"{hours}sa {mins}dk"


def format_price(price: float, currency: str = "TRY") -> str:
    """Format a fare, e.g. ``545.50 ₺``."""
    return f"{price:.2f} {CURRENCY_SYMBOLS.get(currency, currency)}"


class JourneyPresenter:
    """Maps ConnectedRoute values to Journey values."""

    @staticmethod
    def to_journey(route: ConnectedRoute) -> Journey:
        """Flatten a route into legs showing the chosen offer of each segment."""
        journey_id = route.signature()
        legs = []
        for index, segment in enumerate(route.segments):
            offer = segment.offer
            legs.append(
                JourneyLeg(
                    id=f"{journey_id}#{index}",
                    from_station_id=segment.from_station_id,
                    from_station_name=segment.from_station_name,
                    to_station_id=segment.to_station_id,
                    to_station_name=segment.to_station_name,
                    departure=offer.departure_clock,
                    arrival=offer.arrival_display,
                    duration=offer.duration_minutes,
                    train_number=offer.train_number,
                    train_name=offer.train_name,
                    price=offer.price,
                    currency=offer.currency,
                    available_seats=offer.available_seats,
                    seat_categories=offer.seat_categories,
                )
            )

        return Journey(
            id=journey_id,
            legs=tuple(legs),
            kind=route.kind,
            total_duration=route.total_duration,
            total_price=route.total_price,
            connection_count=route.connection_count,
            transfer_stations=route.transfer_stations,
            min_transfer_minutes=route.min_transfer_minutes,
            available_seats=route.available_seats,
        )

    @staticmethod
    def to_journeys(routes: list[ConnectedRoute]) -> list[Journey]:
        """Convert routes, keeping their order."""
        return [JourneyPresenter.to_journey(route) for route in routes]
