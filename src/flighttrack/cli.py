#!/usr/bin/env python3
"""
Track statistics tool.
This script loads the tracks of a GPX file and prints duration, length,
height gain/loss, climb/sink rates and speeds for each of them.

Requirements:
    pip install gpxpy

"""

from typing import Optional
import argparse
import logging
import sys
from gpxpy import gpx

from . import __version__
from .config import FlightTrackConfig
from .geometry import GeodesyPoint
from .gpx import load_gpx_tracks
from .metrics import log_metrics
from .position_window import PositionWindow
from .track import Track

# Configure logging
logger = logging.getLogger("flighttrack")


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Flight and hike track statistics tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "filename",
        type=str,
        nargs="?",
        help="GPX file to process, or - for stdin",
    )
    parser.add_argument(
        "--window",
        type=float,
        default=60.0,
        help="Live position window length in seconds (default: 60)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Output structured metrics after processing",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"flighttrack {__version__}",
    )
    return parser


def setup_logging(config: FlightTrackConfig) -> None:
    """Setup logging configuration."""
    if hasattr(sys.stdout, "reconfigure") and sys.stdout.encoding != "utf-8":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
            if hasattr(sys.stderr, "reconfigure") and sys.stderr.encoding != "utf-8":
                sys.stderr.reconfigure(encoding="utf-8")
            logger.debug("Reconfigured stdout and stderr to UTF-8 encoding.")
        except Exception as e:
            logger.debug(f"Could not reconfigure stdout/stderr to UTF-8: {e}")
    level = getattr(logging, config.log_level)

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
    logging.getLogger("gpxpy").setLevel(logging.WARNING)


def replay_position_window(track: Track, window_seconds: float) -> PositionWindow:
    """
    Feed the timestamped points of a track through a position window, the way
    live location updates would arrive.

    Args:
        track: Track to replay; points without time are skipped
        window_seconds: Window length in seconds

    Returns:
        The window after the last point was added
    """
    window = PositionWindow(window_seconds)
    for point in track:
        if point.time is not None:
            window.add_position(point.location, point.time)
    return window


def _format_height(value: float, has_altitude: bool) -> str:
    return f"{value:.0f} m" if has_altitude else "n/a"


def print_track_statistics(
    track: Track, window: Optional[PositionWindow] = None
) -> None:
    """
    Print the statistics block of one track.

    Args:
        track: Track to print
        window: Replayed position window, if any
    """
    stats = track.statistics
    center: GeodesyPoint = track.center_point()

    print(f"{track.name or '(unnamed track)'}")
    print(f"  points             : {len(track)}")
    print(f"  duration           : {stats.duration}")
    print(f"  length             : {stats.length_in_meters / 1000:.2f} km")
    print(f"  height gain / loss : {stats.height_gain_in_meters:.0f} m / {stats.height_loss_in_meters:.0f} m")
    print(
        f"  min / max height   : {_format_height(stats.min_height, stats.has_altitude)}"
        f" / {_format_height(stats.max_height, stats.has_altitude)}"
    )
    print(f"  max climb / sink   : {stats.max_climb_rate:.1f} m/s / {stats.max_sink_rate:.1f} m/s")
    print(f"  max / avg speed    : {stats.max_speed_kmh:.1f} km/h / {stats.average_speed_kmh:.1f} km/h")
    print(f"  center             : {center}")
    if window is not None:
        print(f"  window samples     : {len(window)} in last {window.interval.total_seconds():g} s")


def main():
    """
    Parses command-line arguments, loads the GPX file,
    and prints statistics for each of its tracks.
    """
    parser = create_argument_parser()
    args = parser.parse_args()

    if not args.filename:
        parser.print_help()
        sys.exit(1)

    if args.window < 0:
        parser.error(f"--window must not be negative, got {args.window}")

    config = FlightTrackConfig.from_args(args)

    # Setup logging
    setup_logging(config)

    # Load and parse the GPX file into tracks
    try:
        tracks = load_gpx_tracks(args.filename)
    except FileNotFoundError:
        logger.error(f"GPX file not found: {args.filename}")
        sys.exit(1)
    except PermissionError:
        logger.error(f"Cannot read GPX file (permission denied): {args.filename}")
        sys.exit(1)
    except gpx.GPXException as e:
        logger.error(f"Invalid GPX file: {e}")
        sys.exit(1)
    logger.info(f"Loaded {len(tracks)} tracks from {args.filename}")

    if not tracks:
        print("No tracks found")
        return

    for track in tracks:
        if not any(point.time is not None for point in track):
            track.calculate_xctracer_point_times()
        window = replay_position_window(track, config.window_seconds)
        print_track_statistics(track, window)
        log_metrics(track.name, len(track), track.statistics, config)


if __name__ == "__main__":
    main()
