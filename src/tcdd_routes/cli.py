"""Command line interface for TCDD route discovery."""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

import aiohttp

from tcdd_routes.adapters.config import AppConfig, RoutingPolicyLoader
from tcdd_routes.adapters.request_throttle import RequestThrottle
from tcdd_routes.adapters.tcdd_api import (
    OfferFilterPolicy,
    TcddHttpClient,
    TcddScheduleGateway,
    TrainAvailabilityParser,
)
from tcdd_routes.application.services import JourneyPlanner
from tcdd_routes.application.services.journey_presenter import format_duration, format_price
from tcdd_routes.application.services.route_assembly import extract_time_slot
from tcdd_routes.domain.exceptions import AUTH_ERROR_MESSAGE, AuthenticationError
from tcdd_routes.domain.models import (
    Journey,
    JourneyFound,
    SearchDone,
    SearchMode,
    Station,
    StationProgress,
)

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_AUTH_FAILED = 2

REAUTH_HINT = (
    "Log in at https://ebilet.tcddtasimacilik.gov.tr, copy the Authorization header of any "
    "API request and set it as TCDD_AUTH_TOKEN."
)


def configure_logging(level: str) -> None:
    """Configure logging for the CLI process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_gateway(
    config: AppConfig, session: aiohttp.ClientSession, show_sold_out: bool | None = None
) -> TcddScheduleGateway:
    """Wire the HTTP client, parsers and caches from the configuration."""
    throttle = RequestThrottle(
        "tcdd_api",
        max_concurrent=config.max_concurrent_requests,
        min_delay_seconds=config.sleep_ms_between_calls / 1000,
    )
    http_client = TcddHttpClient(
        session=session,
        auth_token=config.tcdd_auth_token,
        unit_id=config.tcdd_unit_id,
        base_url=config.tcdd_api_base_url,
        cdn_url=config.tcdd_cdn_url,
        timeout_seconds=config.tcdd_api_timeout,
        throttle=throttle,
    )
    return TcddScheduleGateway(
        http_client,
        TrainAvailabilityParser(ZoneInfo(config.timezone)),
        OfferFilterPolicy(config.show_sold_out if show_sold_out is None else show_sold_out),
        station_cache_ttl=config.station_cache_ttl_seconds,
    )


async def resolve_station(gateway: TcddScheduleGateway, value: str) -> Station:
    """Resolve a station given by numeric id or by (part of) its name."""
    if value.strip().isdigit():
        station_id = int(value)
        name = await gateway.station_name(station_id)
        if name is None:
            raise ValueError(f"Unknown station id {station_id}")
        return Station(id=station_id, name=name)

    station = await gateway.find_station_by_name(value)
    if station is None:
        raise ValueError(f"No station matches '{value}'")
    return station


def parse_date(value: str | None, timezone: str) -> date:
    """Parse YYYY-MM-DD, defaulting to today in the configured timezone."""
    if not value:
        return datetime.now(ZoneInfo(timezone)).date()
    return date.fromisoformat(value)


def journey_to_dict(journey: Journey) -> dict[str, Any]:
    """JSON-ready representation of a journey."""
    return asdict(journey)


def print_journey(journey: Journey) -> None:
    """Print one journey as a short block of text."""
    first, last = journey.legs[0], journey.legs[-1]
    header = (
        f"{first.departure} -> {last.arrival}  {format_duration(journey.total_duration)}  "
        f"{format_price(journey.total_price, first.currency)}  [{journey.kind.value}]"
    )
    if journey.available_seats is not None:
        header += f"  {journey.available_seats} seats available"
    print(header)
    for leg in journey.legs:
        print(
            f"    {leg.departure} {leg.from_station_name} -> {leg.arrival} {leg.to_station_name}"
            f"  {leg.train_name} {leg.train_number}  {leg.available_seats} seats"
        )
    if journey.transfer_stations:
        print(f"    via {', '.join(journey.transfer_stations)}")


async def run_stations(gateway: TcddScheduleGateway, args: argparse.Namespace) -> None:
    stations = await gateway.find_stations_by_query(args.query)
    if args.json:
        print(json.dumps([asdict(s) for s in stations], indent=2, ensure_ascii=False))
        return
    if not stations:
        print(f"No stations found for '{args.query}'", file=sys.stderr)
        sys.exit(EXIT_ERROR)
    print(f"\nFound {len(stations)} station(s):\n")
    for station in stations:
        print(f"  {station.id:>6}  {station.name}")


async def run_search(
    gateway: TcddScheduleGateway, config: AppConfig, planner: JourneyPlanner, args: argparse.Namespace
) -> None:
    origin = await resolve_station(gateway, args.origin)
    destination = await resolve_station(gateway, args.destination)
    service_date = parse_date(args.date, config.timezone)
    mode = SearchMode(args.mode) if args.mode else None

    journeys = await planner.find_routes(
        origin.id, destination.id, service_date, args.max_connections, mode
    )
    if args.json:
        print(json.dumps([journey_to_dict(j) for j in journeys], indent=2, ensure_ascii=False, default=str))
        return

    print(f"\n{origin.name} -> {destination.name} on {service_date}: {len(journeys)} option(s)\n")
    for journey in journeys:
        print_journey(journey)


async def run_alternatives(
    gateway: TcddScheduleGateway, config: AppConfig, planner: JourneyPlanner, args: argparse.Namespace
) -> None:
    if extract_time_slot(args.time) is None:
        raise ValueError(f"Invalid departure time '{args.time}', expected HH:MM")
    origin = await resolve_station(gateway, args.origin)
    destination = await resolve_station(gateway, args.destination)
    service_date = parse_date(args.date, config.timezone)

    async for event in planner.find_same_train_alternatives(
        origin.id, destination.id, service_date, args.time
    ):
        if isinstance(event, StationProgress):
            if not args.json:
                print(f"... checking {event.station_name}", file=sys.stderr)
        elif isinstance(event, JourneyFound):
            if args.json:
                print(json.dumps(journey_to_dict(event.journey), ensure_ascii=False, default=str))
            else:
                print_journey(event.journey)
        elif isinstance(event, SearchDone) and event.error:
            if AUTH_ERROR_MESSAGE in event.error:
                raise AuthenticationError(event.error)
            raise RuntimeError(event.error)


async def run_info(gateway: TcddScheduleGateway, planner: JourneyPlanner, args: argparse.Namespace) -> None:
    origin = await resolve_station(gateway, args.origin)
    destination = await resolve_station(gateway, args.destination)
    info = await planner.connection_info(origin.id, destination.id)
    if args.json:
        print(info.model_dump_json(indent=2))
        return
    print(f"\n{origin.name} -> {destination.name}")
    print(f"  Direct service: {'yes' if info.has_direct else 'no'}")
    if info.possible_transfer_stations:
        names = [await gateway.station_name(s) or str(s) for s in info.possible_transfer_stations]
        print(f"  Possible transfer stations: {', '.join(names)}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="TCDD route discovery",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search for stations
  tcdd-routes stations "izmit"

  # Direct trains (and, with --mode full, connections) for a date
  tcdd-routes search 98 1325 --date 2026-11-02 --mode full

  # Same-train reseat alternatives for the 09:30 departure
  tcdd-routes alternatives "ANKARA GAR" "İSTANBUL(PENDİK)" 09:30 --date 2026-11-02

  # Connectivity between two stations
  tcdd-routes info 98 1135
        """,
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    stations_parser = subparsers.add_parser("stations", help="Search stations by name")
    stations_parser.add_argument("query", help="Part of the station name")
    stations_parser.add_argument("--json", action="store_true", help="Output as JSON")

    search_parser = subparsers.add_parser("search", help="Find routes between two stations")
    search_parser.add_argument("origin", help="Origin station id or name")
    search_parser.add_argument("destination", help="Destination station id or name")
    search_parser.add_argument("--date", help="Travel date (YYYY-MM-DD, default: today)")
    search_parser.add_argument("--max-connections", type=int, help="Maximum train changes")
    search_parser.add_argument(
        "--mode", choices=[mode.value for mode in SearchMode], help="Search scope"
    )
    search_parser.add_argument(
        "--show-sold-out", action="store_true", default=None, help="Include trains without free seats"
    )
    search_parser.add_argument("--json", action="store_true", help="Output as JSON")

    alternatives_parser = subparsers.add_parser(
        "alternatives", help="Same-train reseat alternatives for one departure"
    )
    alternatives_parser.add_argument("origin", help="Origin station id or name")
    alternatives_parser.add_argument("destination", help="Destination station id or name")
    alternatives_parser.add_argument("time", help="Departure time of the direct train (HH:MM)")
    alternatives_parser.add_argument("--date", help="Travel date (YYYY-MM-DD, default: today)")
    alternatives_parser.add_argument("--json", action="store_true", help="Output as JSON lines")

    info_parser = subparsers.add_parser("info", help="Connectivity between two stations")
    info_parser.add_argument("origin", help="Origin station id or name")
    info_parser.add_argument("destination", help="Destination station id or name")
    info_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


async def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(EXIT_ERROR)

    configure_logging(args.log_level)

    try:
        config = AppConfig()
        toml_data = config.load_toml()
        routing_policy = RoutingPolicyLoader.load(toml_data.get("routing"))

        async with aiohttp.ClientSession() as session:
            gateway = build_gateway(config, session, getattr(args, "show_sold_out", None))
            planner = JourneyPlanner(
                gateway,
                routing_policy,
                config.search_options(),
                config.stream_poll_interval_seconds,
            )

            if args.command == "stations":
                await run_stations(gateway, args)
            elif args.command == "search":
                await run_search(gateway, config, planner, args)
            elif args.command == "alternatives":
                await run_alternatives(gateway, config, planner, args)
            elif args.command == "info":
                await run_info(gateway, planner, args)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(EXIT_ERROR)
    except AuthenticationError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(REAUTH_HINT, file=sys.stderr)
        sys.exit(EXIT_AUTH_FAILED)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_ERROR)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
