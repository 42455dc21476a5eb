#!/usr/bin/env python3
"""CLI tool for querying the Trafiklab realtime API.

Usage:
    # Search stop groups by name
    python -m trafiklab.cli search Stockholm

    # List all stop groups
    python -m trafiklab.cli stops

    # Current departures from a stop
    python -m trafiklab.cli departures 740020101

    # Arrivals at a stop around a given time
    python -m trafiklab.cli arrivals 740020101 --at 2025-03-31T16:30

The API key is read from --api-key or the SECRET_TRAFIKLAB_API_KEY environment
variable. Responses are printed as JSON using the API's field names.
"""

import argparse
import asyncio
import sys

import httpx

from trafiklab.core.config import settings
from trafiklab.core.exceptions import TrafiklabError
from trafiklab.core.logging import configure_logging
from trafiklab.core.telemetry import setup_telemetry, shutdown_telemetry
from trafiklab.schemas.trafiklab import TrafiklabModel
from trafiklab.services.base import BaseTrafiklabClient
from trafiklab.services.trafiklab_client import TrafiklabClient


def _print_response(response: TrafiklabModel) -> None:
    print(response.model_dump_json(by_alias=True, indent=2))


async def cmd_search(args: argparse.Namespace, client: BaseTrafiklabClient) -> int:
    """
    Search stop groups by name.

    Args:
        args: Parsed command-line arguments
        client: Client to dispatch through

    Returns:
        Exit code (0 for success)
    """
    _print_response(await client.search_stops(args.name, api_key=args.api_key))
    return 0


async def cmd_stops(args: argparse.Namespace, client: BaseTrafiklabClient) -> int:
    """List all stop groups."""
    _print_response(await client.get_all_stops(api_key=args.api_key))
    return 0


async def cmd_departures(args: argparse.Namespace, client: BaseTrafiklabClient) -> int:
    """Print the departure board for a stop, now or at ``--at``."""
    if args.at:
        response = await client.get_departures_at_time(args.stop_id, args.at, api_key=args.api_key)
    else:
        response = await client.get_departures(args.stop_id, api_key=args.api_key)
    _print_response(response)
    return 0


async def cmd_arrivals(args: argparse.Namespace, client: BaseTrafiklabClient) -> int:
    """Print the arrival board for a stop, now or at ``--at``."""
    if args.at:
        response = await client.get_arrivals_at_time(args.stop_id, args.at, api_key=args.api_key)
    else:
        response = await client.get_arrivals(args.stop_id, api_key=args.api_key)
    _print_response(response)
    return 0


COMMAND_HANDLERS = {
    "search": cmd_search,
    "stops": cmd_stops,
    "departures": cmd_departures,
    "arrivals": cmd_arrivals,
}


async def run_command(args: argparse.Namespace, client: BaseTrafiklabClient) -> int:
    """
    Dispatch parsed arguments to their command handler.

    Returns:
        Exit code (0 for success, 1 for any API or transport error)
    """
    handler = COMMAND_HANDLERS.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1
    try:
        return await handler(args, client)
    except (TrafiklabError, httpx.HTTPError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Query Trafiklab realtime departures, arrivals and stops",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m trafiklab.cli search Slussen
  python -m trafiklab.cli departures 740020101 --at 2025-03-31T16:30
        """,
    )
    parser.add_argument("--api-key", type=str, default=None, help="API key (default: SECRET_TRAFIKLAB_API_KEY)")
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help=f"API root (default: {settings.TRAFIKLAB_BASE_URL})",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: LOG_LEVEL setting)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    search_parser = subparsers.add_parser("search", help="Search stop groups by name")
    search_parser.add_argument("name", type=str, help="Name to search for (minimum 3 characters)")

    subparsers.add_parser("stops", help="List all stop groups")

    for command, noun in (("departures", "departure"), ("arrivals", "arrival")):
        board_parser = subparsers.add_parser(command, help=f"Show the {noun} board for a stop")
        board_parser.add_argument("stop_id", type=str, help="Stop ID (e.g., 740020101)")
        board_parser.add_argument("--at", type=str, default=None, help="ISO date-time (e.g., 2025-03-31T16:30)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI tool.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(log_level=args.log_level, stream=sys.stderr)
    setup_telemetry()

    async def run_with_client() -> int:
        async with TrafiklabClient(base_url=args.base_url, api_key=args.api_key) as client:
            return await run_command(args, client)

    try:
        return asyncio.run(run_with_client())
    finally:
        shutdown_telemetry()


if __name__ == "__main__":
    sys.exit(main())
