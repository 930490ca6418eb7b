"""
Command-line interface for WeatherMe.

Runs the relay, or acts as the presentation client against a running relay.
"""

import argparse
import asyncio
import sys
from typing import Optional

from weatherme.config import HOME_LOCATION, LOG_LEVEL, RELAY_URL, SERVICE_VERSION
from weatherme.logging_config import configure_logging
from weatherme.main import main as run_relay
from weatherme.ui.app import WeatherApp
from weatherme.ui.location import FixedLocationProvider, GeopyLocationProvider, LocationProvider
from weatherme.ui.relay import RelayClient
from weatherme.ui.render import render
from weatherme.weather.errors import ConfigurationError


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="weatherme",
        description="Current weather and a short forecast for any city",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {SERVICE_VERSION}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--relay-url",
        default=RELAY_URL,
        help=f"Base URL of the relay (default: {RELAY_URL})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("serve", help="Run the relay service")

    city_parser = subparsers.add_parser("city", help="Weather for a city")
    city_parser.add_argument("name", nargs="+", help="City name")

    here_parser = subparsers.add_parser("here", help="Weather for this device's location")
    here_parser.add_argument(
        "--place",
        default=HOME_LOCATION,
        help="Place name used as the device location (default: $WEATHERME_HOME_LOCATION)",
    )
    here_parser.add_argument("--lat", type=float, default=None, help="Device latitude")
    here_parser.add_argument("--lon", type=float, default=None, help="Device longitude")

    return parser


def build_locator(args: argparse.Namespace) -> Optional[LocationProvider]:
    """Location provider for the 'here' command, or None when nothing is configured."""
    if args.lat is not None and args.lon is not None:
        return FixedLocationProvider(args.lat, args.lon)
    if args.place:
        return GeopyLocationProvider(args.place)
    return None


async def run_query(args: argparse.Namespace) -> int:
    locator = build_locator(args) if args.command == "here" else None
    async with RelayClient(args.relay_url) as relay:
        app = WeatherApp(relay, locator=locator)
        if args.command == "city":
            await app.submit_city_query(" ".join(args.name))
        else:
            await app.submit_location_query()

    print(render(app.state))
    return 1 if app.state.error else 0


def cmd_serve(_args: argparse.Namespace) -> int:
    """Handle the 'serve' command."""
    try:
        run_relay()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    """Handle the 'city' and 'here' commands."""
    return asyncio.run(run_query(args))


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "here" and (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")

    configure_logging("DEBUG" if args.debug else LOG_LEVEL)

    commands = {
        "serve": cmd_serve,
        "city": cmd_query,
        "here": cmd_query,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
