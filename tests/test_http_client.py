"""Tests for the TCDD HTTP client."""

import asyncio
from datetime import date
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from tcdd_routes.adapters.tcdd_api.http_client import TcddHttpClient, build_availability_request
from tcdd_routes.domain.exceptions import AuthenticationError, ScheduleGatewayError


def mock_session(status: int = 200, body: Any = None, text: str = "") -> MagicMock:
    """Session whose get/post both answer with the given response."""
    response = MagicMock()
    response.status = status
    response.reason = "Reason"
    response.json = AsyncMock(return_value=body)
    response.text = AsyncMock(return_value=text)

    session = MagicMock()
    session.get.return_value.__aenter__.return_value = response
    session.post.return_value.__aenter__.return_value = response
    return session


def test_build_availability_request_uses_upstream_date_format() -> None:
    """Given a date, when building the request body, then it matches the upstream contract."""
    body = build_availability_request(98, "ANKARA GAR", 48, "İSTANBUL(PENDİK)", date(2026, 11, 2))

    assert body["searchRoutes"] == [
        {
            "departureStationId": 98,
            "departureStationName": "ANKARA GAR",
            "arrivalStationId": 48,
            "arrivalStationName": "İSTANBUL(PENDİK)",
            "departureDate": "02-11-2026 00:00:00",
        }
    ]
    assert body["passengerTypeCounts"] == [{"id": 0, "count": 1}]
    assert body["searchReservation"] is False
    assert body["searchType"] == "DOMESTIC"


@pytest.mark.asyncio
async def test_search_availability_posts_with_credentials() -> None:
    """Given a token, when querying availability, then the request carries auth headers."""
    session = mock_session(body={"trainLegs": []})
    client = TcddHttpClient(session=session, auth_token="token-123", unit_id="3895")

    data = await client.search_availability(98, "ANKARA GAR", 48, "PENDİK", date(2026, 11, 2))

    assert data == {"trainLegs": []}
    _, kwargs = session.post.call_args
    assert kwargs["headers"]["Authorization"] == "token-123"
    assert kwargs["headers"]["unit-id"] == "3895"
    assert kwargs["params"] == {"environment": "dev", "userId": "1"}
    assert kwargs["json"]["searchRoutes"][0]["departureStationId"] == 98


@pytest.mark.asyncio
async def test_unauthorized_raises_authentication_error() -> None:
    """Given a 401 response, when querying, then AuthenticationError is raised."""
    client = TcddHttpClient(session=mock_session(status=401), auth_token="expired")

    with pytest.raises(AuthenticationError, match="Authentication failed"):
        await client.fetch_stations()


@pytest.mark.asyncio
async def test_missing_token_raises_authentication_error() -> None:
    """Given no credential, when querying, then AuthenticationError is raised before any request."""
    session = mock_session(body=[])
    client = TcddHttpClient(session=session)

    with pytest.raises(AuthenticationError):
        await client.fetch_stations()
    session.get.assert_not_called()


@pytest.mark.asyncio
async def test_server_error_raises_gateway_error() -> None:
    """Given a 500 response, when querying, then ScheduleGatewayError is raised."""
    client = TcddHttpClient(session=mock_session(status=500, text="boom"), auth_token="t")

    with pytest.raises(ScheduleGatewayError, match="HTTP 500"):
        await client.fetch_station_pairs()


@pytest.mark.asyncio
async def test_network_errors_are_wrapped() -> None:
    """Given a connection error or timeout, when querying, then ScheduleGatewayError is raised."""
    session = MagicMock()
    session.get.side_effect = aiohttp.ClientConnectionError("refused")
    client = TcddHttpClient(session=session, auth_token="t")

    with pytest.raises(ScheduleGatewayError, match="refused"):
        await client.fetch_stations()

    session.get.side_effect = asyncio.TimeoutError()
    with pytest.raises(ScheduleGatewayError, match="Timeout"):
        await client.fetch_stations()


@pytest.mark.asyncio
async def test_unexpected_shape_raises_gateway_error() -> None:
    """Given a dict where a list is expected, when fetching stations, then it is rejected."""
    client = TcddHttpClient(session=mock_session(body={"not": "a list"}), auth_token="t")

    with pytest.raises(ScheduleGatewayError, match="Unexpected stations response"):
        await client.fetch_stations()


@pytest.mark.asyncio
async def test_without_session_raises_gateway_error() -> None:
    """Given no session, when querying, then ScheduleGatewayError is raised."""
    client = TcddHttpClient(auth_token="t")

    with pytest.raises(ScheduleGatewayError, match="session"):
        await client.fetch_stations()


def test_set_auth_token_replaces_credential() -> None:
    """Given a new token, when setting it, then it is used for the next request."""
    client = TcddHttpClient(auth_token="old")

    client.set_auth_token("  new  ")

    assert client._build_headers()["Authorization"] == "new"
