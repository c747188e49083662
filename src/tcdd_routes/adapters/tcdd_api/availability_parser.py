"""Parser for TCDD train availability responses.

The upstream nests trains as trainLegs -> trainAvailabilities -> trains, with
seat counts and fares spread over several optional structures. This parser
flattens each train into one TrainOffer.

Remaining-seat sources, in order of precedence:

1. ``availableFareInfo[].cabinClasses[].availabilityCount`` (fare-class level,
   the only source reporting true remaining seats)
2. ``cars[].availabilities[].availability`` (per car)
3. ``cabinClassAvailabilities[].availabilityCount`` (per cabin class)

``bookingClassCapacities`` holds total seats, not remaining seats, and is
never read.

Fare-info counts of one cabin class are merged with the maximum across fare
families, not summed. Every family of a class sells from the same physical
seats, so summing would count those seats once per family.
"""

import logging
from datetime import date, datetime, time, tzinfo
from typing import Any

from tcdd_routes.adapters.tcdd_api.constants import DEFAULT_CURRENCY
from tcdd_routes.domain.models.train_offer import SeatCategory, TrainOffer, TrainSegment

logger = logging.getLogger(__name__)

NO_AVAILABLE_SEATS = 0
NO_PRICE = 0.0
DISTANCE_DECIMALS = 2


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class _CategoryAccumulator:
    """Merges seat counts and fares of one cabin class across records."""

    def __init__(self) -> None:
        self._categories: dict[str, dict[str, Any]] = {}

    def add(
        self,
        cabin_class: dict[str, Any],
        seats: int,
        price: float = NO_PRICE,
        currency: str = "",
        merge_seats: str = "sum",
    ) -> None:
        code = str(cabin_class.get("code") or "")
        name = str(cabin_class.get("name") or "")
        category_id = _as_int(cabin_class.get("id"))
        key = str(category_id) if category_id else f"{code}|{name}"
        entry = self._categories.setdefault(
            key,
            {"id": category_id, "code": code, "name": name, "seats": 0, "price": NO_PRICE, "currency": ""},
        )
        if merge_seats == "max":
            entry["seats"] = max(entry["seats"], seats)
        else:
            entry["seats"] += seats
        if price > 0 and (entry["price"] <= 0 or price < entry["price"]):
            entry["price"] = price
            entry["currency"] = currency

    def __bool__(self) -> bool:
        return bool(self._categories)

    def build(self) -> tuple[SeatCategory, ...]:
        return tuple(
            SeatCategory(
                category_id=entry["id"],
                name=entry["name"],
                code=entry["code"],
                available_seats=entry["seats"],
                price=entry["price"],
                currency=entry["currency"] or DEFAULT_CURRENCY,
            )
            for entry in self._categories.values()
        )


class TrainAvailabilityParser:
    """Parses availability responses into TrainOffer objects."""

    def __init__(self, timezone: tzinfo) -> None:
        """Initialize with the timezone wall-clock times are shown in.

        Args:
            timezone: Timezone the upstream epoch timestamps are converted to.
        """
        self._timezone = timezone

    def parse(self, data: dict[str, Any], service_date: date) -> list[TrainOffer]:
        """Parse every train of the response, sorted by departure time.

        Args:
            data: Raw availability response body.
            service_date: Queried date, used when a train carries no times at all.

        Returns:
            List of TrainOffer objects; completely empty records are dropped.
        """
        offers: list[TrainOffer] = []

        for leg in _as_list(data.get("trainLegs")):
            leg = _as_dict(leg)
            availabilities = _as_list(leg.get("trainAvailabilities"))
            single_train_leg = sum(len(_as_list(_as_dict(a).get("trains"))) for a in availabilities) == 1

            for availability in availabilities:
                availability = _as_dict(availability)
                for train in _as_list(availability.get("trains")):
                    offer = self._parse_train(
                        _as_dict(train), availability, leg, single_train_leg, service_date
                    )
                    if offer:
                        offers.append(offer)

        offers.sort(key=lambda o: o.departure_time)
        logger.debug(f"Parsed {len(offers)} trains from availability response")
        return offers

    def _parse_train(
        self,
        train: dict[str, Any],
        availability: dict[str, Any],
        leg: dict[str, Any],
        single_train_leg: bool,
        service_date: date,
    ) -> TrainOffer | None:
        try:
            train_number = str(train.get("number") or "").strip()
            train_name = str(train.get("name") or train.get("commercialName") or "").strip()

            leg_data = leg if single_train_leg else {}
            seat_categories, available_seats = self._parse_seats(train, availability, leg_data)
            price, currency = self._parse_price(train, availability, leg_data)

            if price <= 0 and not train_number and not train_name:
                return None

            segments = self._parse_segments(train, leg_data)
            departure_time, arrival_time = self._journey_times(train, segments, service_date)
            duration = round((arrival_time - departure_time).total_seconds() / 60)
            distance = sum(_as_float(s.get("distance")) for s in map(_as_dict, _as_list(train.get("segments"))))

            return TrainOffer(
                train_number=train_number,
                train_name=train_name,
                train_type=str(train.get("type") or ""),
                departure_time=departure_time,
                arrival_time=arrival_time,
                duration_minutes=max(duration, 0),
                distance_km=round(distance, DISTANCE_DECIMALS),
                price=price,
                currency=currency,
                available_seats=available_seats,
                reservable=bool(train.get("reservable", False)),
                seat_categories=seat_categories,
                train_segments=segments,
            )
        except Exception as e:
            logger.warning(f"Error parsing train {train.get('number')!r}: {e}")
            return None

    def _parse_timestamp(self, value: Any) -> datetime | None:
        """Parse epoch milliseconds or a local ISO 8601 string."""
        if value is None or value == "":
            return None
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000, tz=self._timezone)
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=self._timezone)
        return parsed.astimezone(self._timezone)

    def _parse_segments(self, train: dict[str, Any], leg: dict[str, Any]) -> tuple[TrainSegment, ...]:
        """Station-to-station legs the physical train passes through."""
        segments = []
        for raw in map(_as_dict, _as_list(train.get("segments"))):
            info = _as_dict(raw.get("segment"))
            departure_station = _as_dict(info.get("departureStation"))
            arrival_station = _as_dict(info.get("arrivalStation"))
            from_id = _as_int(departure_station.get("id"))
            to_id = _as_int(arrival_station.get("id"))
            if not from_id or not to_id:
                continue
            segments.append(
                TrainSegment(
                    departure_station_id=from_id,
                    arrival_station_id=to_id,
                    departure_time=self._parse_timestamp(raw.get("departureTime")),
                    arrival_time=self._parse_timestamp(raw.get("arrivalTime")),
                    departure_station_name=str(departure_station.get("name") or ""),
                    arrival_station_name=str(arrival_station.get("name") or ""),
                    duration_minutes=_as_int(raw.get("duration")),
                    distance_km=_as_float(raw.get("distance")),
                )
            )
        if segments:
            return tuple(segments)

        flat_segments = _as_list(train.get("trainSegments")) or _as_list(leg.get("trainSegments"))
        for raw in map(_as_dict, flat_segments):
            from_id = _as_int(raw.get("departureStationId"))
            to_id = _as_int(raw.get("arrivalStationId"))
            if not from_id or not to_id:
                continue
            segments.append(
                TrainSegment(
                    departure_station_id=from_id,
                    arrival_station_id=to_id,
                    departure_time=self._parse_timestamp(raw.get("departureTime")),
                    arrival_time=self._parse_timestamp(raw.get("arrivalTime")),
                )
            )
        return tuple(segments)

    def _journey_times(
        self, train: dict[str, Any], segments: tuple[TrainSegment, ...], service_date: date
    ) -> tuple[datetime, datetime]:
        """Departure of the first segment and arrival of the last one."""
        raw_segments = [_as_dict(s) for s in _as_list(train.get("segments"))]
        departure = self._parse_timestamp(raw_segments[0].get("departureTime")) if raw_segments else None
        arrival = self._parse_timestamp(raw_segments[-1].get("arrivalTime")) if raw_segments else None

        if departure is None and segments:
            departure = segments[0].departure_time
        if arrival is None and segments:
            arrival = segments[-1].arrival_time

        midnight = datetime.combine(service_date, time(0, 0), tzinfo=self._timezone)
        departure = departure or midnight
        arrival = arrival or departure
        return departure, arrival

    def _fare_info(self, train: dict[str, Any], leg: dict[str, Any]) -> list[Any]:
        return _as_list(train.get("availableFareInfo")) or _as_list(leg.get("availableFareInfo"))

    def _train_cars(self, train: dict[str, Any], availability: dict[str, Any]) -> list[dict[str, Any]]:
        train_id = train.get("id")
        cars = []
        for car in map(_as_dict, _as_list(availability.get("cars"))):
            if train_id is not None and car.get("trainId") not in (None, train_id):
                continue
            cars.append(car)
        return cars

    def _parse_seats(
        self, train: dict[str, Any], availability: dict[str, Any], leg: dict[str, Any]
    ) -> tuple[tuple[SeatCategory, ...], int]:
        """Seat categories and total remaining seats, from the richest source available."""
        fare_categories = _CategoryAccumulator()
        for fare in map(_as_dict, self._fare_info(train, leg)):
            for cabin in map(_as_dict, _as_list(fare.get("cabinClasses"))):
                prices = [_as_float(cabin.get("minPrice"))]
                prices += [
                    _as_float(_as_dict(b).get("price"))
                    for b in _as_list(cabin.get("bookingClassAvailabilities"))
                ]
                positive = [p for p in prices if p > 0]
                # Fare families share the same physical seats
                fare_categories.add(
                    _as_dict(cabin.get("cabinClass")),
                    _as_int(cabin.get("availabilityCount")),
                    min(positive) if positive else NO_PRICE,
                    str(cabin.get("minPriceCurrency") or ""),
                    merge_seats="max",
                )
        if fare_categories:
            categories = fare_categories.build()
            return categories, sum(c.available_seats for c in categories)

        car_categories = _CategoryAccumulator()
        for car in self._train_cars(train, availability):
            for car_availability in map(_as_dict, _as_list(car.get("availabilities"))):
                fares = [
                    _as_dict(_as_dict(pricing).get("basePrice"))
                    for pricing in _as_list(car_availability.get("pricingList"))
                ]
                positive = [f for f in fares if _as_float(f.get("priceAmount")) > 0]
                cheapest = min(positive, key=lambda f: _as_float(f.get("priceAmount")), default={})
                car_categories.add(
                    _as_dict(car_availability.get("cabinClass")),
                    _as_int(car_availability.get("availability")),
                    _as_float(cheapest.get("priceAmount")),
                    str(cheapest.get("priceCurrency") or ""),
                )
        if car_categories:
            categories = car_categories.build()
            return categories, sum(c.available_seats for c in categories)

        cabin_categories = _CategoryAccumulator()
        for cabin in map(_as_dict, _as_list(leg.get("cabinClassAvailabilities"))):
            cabin_categories.add(
                _as_dict(cabin.get("cabinClass")), _as_int(cabin.get("availabilityCount"))
            )
        if cabin_categories:
            categories = cabin_categories.build()
            return categories, sum(c.available_seats for c in categories)

        return (), NO_AVAILABLE_SEATS

    def _parse_price(
        self, train: dict[str, Any], availability: dict[str, Any], leg: dict[str, Any]
    ) -> tuple[float, str]:
        """Lowest fare across all fare classes, else the train's minimum price."""
        fares: list[tuple[float, str]] = []

        for fare in map(_as_dict, self._fare_info(train, leg)):
            for cabin in map(_as_dict, _as_list(fare.get("cabinClasses"))):
                currency = str(cabin.get("minPriceCurrency") or "")
                fares.append((_as_float(cabin.get("minPrice")), currency))
                for booking in map(_as_dict, _as_list(cabin.get("bookingClassAvailabilities"))):
                    fares.append((_as_float(booking.get("price")), str(booking.get("currency") or currency)))

        for car in self._train_cars(train, availability):
            for car_availability in map(_as_dict, _as_list(car.get("availabilities"))):
                for pricing in map(_as_dict, _as_list(car_availability.get("pricingList"))):
                    base_price = _as_dict(pricing.get("basePrice"))
                    fares.append(
                        (_as_float(base_price.get("priceAmount")), str(base_price.get("priceCurrency") or ""))
                    )

        positive = [fare for fare in fares if fare[0] > 0]
        if positive:
            amount, currency = min(positive, key=lambda fare: fare[0])
            return amount, currency or DEFAULT_CURRENCY

        min_price = _as_dict(train.get("minPrice"))
        return (
            _as_float(min_price.get("priceAmount"), NO_PRICE),
            str(min_price.get("priceCurrency") or DEFAULT_CURRENCY),
        )
