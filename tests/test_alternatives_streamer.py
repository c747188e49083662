"""Tests for the incremental alternatives streamer."""

import asyncio

import pytest

from tcdd_routes.application.cancellation import CancellationToken
from tcdd_routes.application.services.alternatives_streamer import AlternativesStreamer
from tcdd_routes.application.services.same_train_finder import SameTrainConnectionFinder
from tcdd_routes.application.services.station_graph import StationGraphBuilder
from tcdd_routes.domain.models import (
    AlternativeEvent,
    AvailabilityResult,
    JourneyFound,
    SearchDone,
    StationProgress,
)
from tests.fakes import SERVICE_DATE, FakeScheduleGateway, adjacency, make_offer

ORIGIN, HUB, DESTINATION = 1, 2, 9


def gateway_with_reseats() -> FakeScheduleGateway:
    """Reseat options via the hub for the 07:00 and the 09:00 train."""
    return FakeScheduleGateway(
        availability={
            (ORIGIN, DESTINATION): [
                make_offer("T1", "07:00", "10:00", stations=(ORIGIN, HUB, DESTINATION)),
                make_offer("T2", "09:00", "12:00", stations=(ORIGIN, HUB, DESTINATION)),
            ],
            (ORIGIN, HUB): [make_offer("T1", "07:00", "08:00"), make_offer("T2", "09:00", "10:00")],
            (HUB, DESTINATION): [make_offer("T1", "08:05", "10:00"), make_offer("T2", "10:05", "12:00")],
        },
        adjacency=adjacency((ORIGIN, HUB), (HUB, DESTINATION), names={HUB: "ESKİŞEHİR"}),
    )


def streamer_for(gateway: FakeScheduleGateway) -> AlternativesStreamer:
    finder = SameTrainConnectionFinder(gateway, StationGraphBuilder(gateway))
    return AlternativesStreamer(finder, poll_interval_seconds=0.001)


async def collect(stream) -> list[AlternativeEvent]:  # type: ignore[no-untyped-def]
    return [event async for event in stream]


@pytest.mark.asyncio
async def test_only_alternatives_for_target_slot_are_yielded() -> None:
    """Given reseats at 07:00 and 09:00, when streaming for 07:00:30, then only the 07:00 one is yielded."""
    events = await collect(
        streamer_for(gateway_with_reseats()).stream(ORIGIN, DESTINATION, SERVICE_DATE, "07:00:30")
    )

    found = [e for e in events if isinstance(e, JourneyFound)]
    assert len(found) == 1
    assert found[0].journey.segments[0].offer.train_number == "T1"
    assert StationProgress(station_name="ESKİŞEHİR") in events
    assert events[-1] == SearchDone()
    assert sum(isinstance(e, SearchDone) for e in events) == 1


@pytest.mark.asyncio
async def test_next_day_marker_is_ignored() -> None:
    """Given a target with a +1 marker, when streaming, then it matches on HH:MM."""
    events = await collect(
        streamer_for(gateway_with_reseats()).stream(ORIGIN, DESTINATION, SERVICE_DATE, "9:00 +1")
    )

    found = [e for e in events if isinstance(e, JourneyFound)]
    assert [e.journey.segments[0].offer.train_number for e in found] == ["T2"]


@pytest.mark.asyncio
async def test_failed_search_still_ends_with_done() -> None:
    """Given a failing direct query, when streaming, then one SearchDone carries the error."""
    gateway = FakeScheduleGateway(
        availability={(ORIGIN, DESTINATION): AvailabilityResult.failed("HTTP 503: Unavailable")}
    )

    events = await collect(streamer_for(gateway).stream(ORIGIN, DESTINATION, SERVICE_DATE, "07:00"))

    assert events == [SearchDone(cancelled=False, error="HTTP 503: Unavailable")]


@pytest.mark.asyncio
async def test_cancelled_before_start_yields_only_done() -> None:
    """Given an already cancelled token, when streaming, then only a cancelled SearchDone is yielded."""
    token = CancellationToken()
    token.cancel()

    events = await collect(
        streamer_for(gateway_with_reseats()).stream(ORIGIN, DESTINATION, SERVICE_DATE, "07:00", token)
    )
    await asyncio.sleep(0.01)

    assert events == [SearchDone(cancelled=True)]


@pytest.mark.asyncio
async def test_cancel_mid_stream_stops_further_events() -> None:
    """Given cancellation after the first event, when streaming, then the next event is the terminal one."""
    token = CancellationToken()
    events = []

    async for event in streamer_for(gateway_with_reseats()).stream(
        ORIGIN, DESTINATION, SERVICE_DATE, "07:00", token
    ):
        events.append(event)
        token.cancel()
    await asyncio.sleep(0.01)

    assert events == [StationProgress(station_name="ESKİŞEHİR"), SearchDone(cancelled=True)]


class SlowScheduleGateway(FakeScheduleGateway):
    """Fake gateway whose availability queries take a few milliseconds."""

    async def search_train_availability(self, from_station_id, to_station_id, service_date):  # type: ignore[no-untyped-def]
        await asyncio.sleep(0.005)
        return await super().search_train_availability(from_station_id, to_station_id, service_date)


@pytest.mark.asyncio
async def test_closing_stream_early_stops_background_search() -> None:
    """Given six intermediate stations, when the consumer closes after one event, then no further stations are queried."""
    stops = (ORIGIN, 2, 3, 4, 5, 6, 7, DESTINATION)
    gateway = SlowScheduleGateway(
        availability={(ORIGIN, DESTINATION): [make_offer("T1", "07:00", "12:00", stations=stops)]},
        adjacency=adjacency(*zip(stops, stops[1:])),
    )
    token = CancellationToken()
    stream = streamer_for(gateway).stream(ORIGIN, DESTINATION, SERVICE_DATE, "07:00", token)

    first = await stream.__anext__()
    await stream.aclose()
    await asyncio.sleep(0.1)

    assert first == StationProgress(station_name="S2")
    # The direct query plus at most the two legs already in flight for the first station
    assert len(gateway.calls) <= 3
    assert not token.is_cancelled


def test_child_token_follows_parent_but_not_the_reverse() -> None:
    """Given a parent and a child token, when each is cancelled, then only the child sees both."""
    parent = CancellationToken()
    child = parent.child()

    child.cancel()
    assert child.is_cancelled
    assert not parent.is_cancelled

    other = parent.child()
    parent.cancel()
    assert other.is_cancelled
