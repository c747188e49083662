"""HTTP client for the TCDD booking service.

Three endpoints are used: the station list and station-pairs feeds on the
CDN host, and the train availability query on the transaction API host.
Failures are raised as ScheduleGatewayError / AuthenticationError; turning
them into result objects is the gateway's job.
"""

import asyncio
import logging
import time
from datetime import date
from typing import TYPE_CHECKING, Any

import aiohttp

from tcdd_routes.adapters.api_request_logger import log_api_request, log_api_response
from tcdd_routes.adapters.request_throttle import RequestThrottle
from tcdd_routes.adapters.tcdd_api.constants import (
    ADULT_PASSENGER_TYPE_ID,
    AUTH_ERROR_STATUS,
    DEFAULT_HEADERS,
    DEFAULT_QUERY_PARAMS,
    PASSENGER_COUNT,
    REQUEST_DATE_FORMAT,
    SEARCH_TYPE_DOMESTIC,
    STATION_PAIRS_PATH,
    STATIONS_PATH,
    TCDD_BASE_URL,
    TCDD_CDN_URL,
    TCDD_UNIT_ID,
    TRAIN_AVAILABILITY_PATH,
)
from tcdd_routes.domain.exceptions import AuthenticationError, ScheduleGatewayError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession


def build_availability_request(
    from_station_id: int,
    from_station_name: str,
    to_station_id: int,
    to_station_name: str,
    service_date: date,
) -> dict[str, Any]:
    """Build the availability query body for one adult passenger."""
    return {
        "searchRoutes": [
            {
                "departureStationId": from_station_id,
                "departureStationName": from_station_name,
                "arrivalStationId": to_station_id,
                "arrivalStationName": to_station_name,
                "departureDate": service_date.strftime(REQUEST_DATE_FORMAT),
            }
        ],
        "passengerTypeCounts": [{"id": ADULT_PASSENGER_TYPE_ID, "count": PASSENGER_COUNT}],
        "searchReservation": False,
        "searchType": SEARCH_TYPE_DOMESTIC,
    }


class TcddHttpClient:
    """HTTP client for the TCDD station feeds and availability query."""

    def __init__(
        self,
        session: "ClientSession | None" = None,
        auth_token: str | None = None,
        unit_id: str = TCDD_UNIT_ID,
        base_url: str = TCDD_BASE_URL,
        cdn_url: str = TCDD_CDN_URL,
        timeout_seconds: float = 20.0,
        throttle: RequestThrottle | None = None,
    ) -> None:
        """Initialize with optional aiohttp session.

        Args:
            session: aiohttp ClientSession used for all requests.
            auth_token: Value of the Authorization header.
            unit_id: Value of the unit-id routing header.
            base_url: Transaction API base URL.
            cdn_url: Station feed base URL.
            timeout_seconds: Total timeout per request.
            throttle: Shared request throttle; a default one is created if omitted.
        """
        self._session = session
        self._auth_token = auth_token
        self._unit_id = unit_id
        self._base_url = base_url.rstrip("/")
        self._cdn_url = cdn_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._throttle = throttle or RequestThrottle("tcdd_api")

    def set_auth_token(self, token: str) -> None:
        """Replace the credential, e.g. after the user re-authenticated."""
        self._auth_token = token.strip()

    def _build_headers(self, with_body: bool = False) -> dict[str, str]:
        if not self._auth_token:
            raise AuthenticationError("no credential configured")
        headers = dict(DEFAULT_HEADERS)
        headers["Authorization"] = self._auth_token
        headers["unit-id"] = self._unit_id
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def _handle_response(self, response: "ClientResponse", url: str) -> Any:
        """Check the status and decode the JSON body."""
        if response.status == AUTH_ERROR_STATUS:
            raise AuthenticationError(f"HTTP {response.status} from {url}")

        if response.status != 200:
            error_text = await response.text()
            error_body = error_text[:200] if error_text else "(empty response body)"
            logger.warning(f"TCDD API returned status {response.status} for {url}: {error_body}")
            raise ScheduleGatewayError(f"HTTP {response.status}: {response.reason or error_body}")

        return await response.json(content_type=None)

    async def _request(self, method: str, url: str, payload: dict[str, Any] | None = None) -> Any:
        if not self._session:
            raise ScheduleGatewayError("TCDD API requires an aiohttp session")

        headers = self._build_headers(with_body=payload is not None)
        log_api_request(method, url, headers=headers, payload=payload)

        started = time.monotonic()
        try:
            async with self._throttle:
                if method == "POST":
                    request = self._session.post(
                        url,
                        params=DEFAULT_QUERY_PARAMS,
                        json=payload,
                        headers=headers,
                        timeout=self._timeout,
                    )
                else:
                    request = self._session.get(
                        url, params=DEFAULT_QUERY_PARAMS, headers=headers, timeout=self._timeout
                    )
                async with request as response:
                    data = await self._handle_response(response, url)
                    log_api_response(method, url, response.status, time.monotonic() - started)
                    return data
        except ScheduleGatewayError:
            raise
        except asyncio.TimeoutError as e:
            raise ScheduleGatewayError(f"Timeout after {self._timeout.total}s for {url}") from e
        except (aiohttp.ClientError, ValueError) as e:
            raise ScheduleGatewayError(f"Request to {url} failed: {e}") from e

    async def fetch_stations(self) -> list[dict[str, Any]]:
        """Fetch the raw station list feed."""
        data = await self._request("GET", f"{self._cdn_url}{STATIONS_PATH}")
        if not isinstance(data, list):
            raise ScheduleGatewayError("Unexpected stations response format")
        return data

    async def fetch_station_pairs(self) -> list[dict[str, Any]]:
        """Fetch the raw station-pairs (adjacency) feed."""
        data = await self._request("GET", f"{self._cdn_url}{STATION_PAIRS_PATH}")
        if not isinstance(data, list):
            raise ScheduleGatewayError("Unexpected station pairs response format")
        return data

    async def search_availability(
        self,
        from_station_id: int,
        from_station_name: str,
        to_station_id: int,
        to_station_name: str,
        service_date: date,
    ) -> dict[str, Any]:
        """Run the availability query and return the raw response body."""
        payload = build_availability_request(
            from_station_id, from_station_name, to_station_id, to_station_name, service_date
        )
        data = await self._request("POST", f"{self._base_url}{TRAIN_AVAILABILITY_PATH}", payload)
        if not isinstance(data, dict):
            raise ScheduleGatewayError("Unexpected availability response format")
        return data
