#!/usr/bin/env python3
"""
Car Tracker command line tool.

Records the current position at a fixed interval into a route, exports the
route as a GPX file, and lists, imports, removes or maps the saved routes.

Requirements:
    pip install gpxpy folium requests

"""

from typing import Callable, Optional
import webbrowser
import argparse
import logging
import shutil
import sys
import os

from . import __version__
from .config import TrackerConfig
from .errors import CarTrackerError, MalformedInput, RouteIndexError
from .gpx import read_route
from .location import (
    GpxReplaySampler,
    IpGeolocationSampler,
    LocationSampler,
    StaticLocationSampler,
)
from .session import TrackingSession
from .tracking import poll
from .visualization import create_route_map

# Configure logging
logger = logging.getLogger("cartracker")


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="cartracker",
        description="Record GPS routes and export them as GPX files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--dir",
        dest="export_dir",
        type=str,
        default=None,
        help="Directory for exported routes (default: ~/.cartracker/routes)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"cartracker {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    record = subparsers.add_parser("record", help="Record a route and export it")
    record.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between position samples (default: 0.5)",
    )
    record.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop recording after this many seconds (default: until Ctrl-C)",
    )
    record.add_argument(
        "--provider",
        type=str,
        default="ip",
        choices=["ip", "replay"],
        help="Location provider (default: ip)",
    )
    record.add_argument(
        "--replay",
        dest="replay_file",
        type=str,
        default=None,
        help="GPX file whose waypoints are replayed by the replay provider",
    )
    record.add_argument(
        "--geolocation-url",
        type=str,
        default=None,
        help="IP geolocation endpoint used by the ip provider",
    )
    record.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Geolocation request timeout in seconds (default: 10)",
    )

    subparsers.add_parser("list", help="List saved routes")

    import_parser = subparsers.add_parser("import", help="Import a GPX file")
    import_parser.add_argument("filename", type=str, help="GPX file to import")

    remove = subparsers.add_parser("remove", help="Remove a saved route")
    remove.add_argument(
        "number", type=int, help="Route number as shown by the list command"
    )

    map_parser = subparsers.add_parser("map", help="Show saved routes on a map")
    map_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output HTML map file (default: 'routes map.html' in the route directory)",
    )
    map_parser.add_argument(
        "--no-open",
        action="store_true",
        help="Don't automatically open the HTML file in browser",
    )
    return parser


def setup_logging(level_name: str) -> None:
    """Setup logging configuration."""
    level = getattr(logging, level_name)

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    # Create console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Suppress overly verbose third-party logging
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def create_sampler(config: TrackerConfig) -> LocationSampler:
    """
    Build the location sampler selected in the configuration.

    Raises:
        ValueError: If the replay provider is selected without a replay file
        MalformedInput: If the replay file is not valid GPX
    """
    if config.provider == "replay":
        if not config.replay_file:
            raise ValueError("The replay provider needs --replay FILE")
        return GpxReplaySampler(read_route(config.replay_file))
    return IpGeolocationSampler(config.geolocation_url, config.timeout)


def open_file_in_browser(filename: str) -> None:
    """
    Open the specified file in the default browser.

    Args:
        filename: Path to the file to open
    """
    abs_path = os.path.abspath(filename)
    try:
        webbrowser.open(f"file://{abs_path}")
        logger.debug(f"Opening {abs_path} in your default browser...")
    except Exception as e:
        logger.warning(f"Could not automatically open browser: {e}")
        logger.warning(f"Please manually open {abs_path}")


def record_route(config: TrackerConfig) -> str:
    """
    Record one route until the duration elapses, the replay runs out or the
    user presses Ctrl-C, then export it.

    Returns:
        Path of the exported GPX file
    """
    sampler = create_sampler(config)
    until: Optional[Callable[[], bool]] = None
    if isinstance(sampler, GpxReplaySampler):
        replay = sampler

        def replay_finished() -> bool:
            return replay.remaining == 0

        until = replay_finished

    session = TrackingSession.from_config(config, sampler, notify=print)
    session.open(load_saved=False)
    session.start_tracking()
    try:
        poll(session.recorder, config.interval, config.duration, until=until)
    except KeyboardInterrupt:
        logger.info("Recording interrupted")
    finally:
        session.stop_tracking()
    return session.export_current_route()


def list_routes(session: TrackingSession) -> None:
    """Print the saved routes with their labels."""
    if not len(session.store):
        print("No saved routes")
        return
    for label, route in zip(session.store.labels(), session.store):
        source = os.path.basename(route.source) if route.source else "-"
        print(f"{label}: {len(route)} points ({source})")


def import_route(session: TrackingSession, filename: str) -> Optional[str]:
    """
    Import a GPX file and copy it into the route directory.

    Returns:
        Path of the copy, or None if the file already lives there

    Raises:
        MalformedInput: If the file is not valid GPX
        FileExistsError: If a different file of that name is already saved
    """
    destination = os.path.join(session.export_dir, os.path.basename(filename))
    if os.path.abspath(destination) == os.path.abspath(filename):
        session.import_file(filename)
        return None
    if os.path.exists(destination):
        raise FileExistsError(f"{destination} already exists")

    session.import_file(filename)
    shutil.copyfile(filename, destination)
    logger.debug(f"Copied {filename} to {destination}")
    return destination


def main(argv=None):
    """
    Parses command-line arguments and runs the selected command.
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Setup logging
    setup_logging(args.log_level)
    config = TrackerConfig.from_args(args)
    logger.debug(f"Configuration: {config}")

    try:
        if args.command == "record":
            filename = record_route(config)
            print(f"Route saved to {filename}")
            return

        session = TrackingSession.from_config(
            config, StaticLocationSampler(None), notify=print
        )
        session.open()

        if args.command == "list":
            list_routes(session)
        elif args.command == "import":
            import_route(session, args.filename)
        elif args.command == "remove":
            session.remove_route(args.number - 1, delete_file=True)
        elif args.command == "map":
            output_filename = args.output or os.path.join(
                config.export_dir, "routes map.html"
            )
            create_route_map(session.routes, output_filename)
            print(f"Map saved to {output_filename}")
            if not args.no_open:
                open_file_in_browser(output_filename)
    except RouteIndexError as e:
        logger.error(f"No such route: {args.number} ({e})")
        sys.exit(1)
    except MalformedInput as e:
        logger.error(f"Invalid GPX file: {e}")
        sys.exit(1)
    except (CarTrackerError, ValueError, RuntimeError) as e:
        logger.error(str(e))
        sys.exit(1)
    except OSError as e:
        logger.error(f"File error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
