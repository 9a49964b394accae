"""
GPX file parsing into Track objects.
"""

from typing import List, TextIO
import sys
import logging
import gpxpy

from .track import Track, TrackPoint

logger = logging.getLogger(__name__)

# GPX track types that mark a track as a flight
FLIGHT_TRACK_TYPES = {"flight", "paragliding", "hanggliding", "gliding"}


def _to_track_point(point) -> TrackPoint:
    """Convert a gpxpy track or route point into a TrackPoint."""
    course = getattr(point, "course", None)

    return TrackPoint(
        latitude=point.latitude,
        longitude=point.longitude,
        altitude=point.elevation,
        heading=int(course) if course is not None else None,
        time=point.time,
    )


def _is_flight_track(gpx_type) -> bool:
    return gpx_type is not None and gpx_type.strip().lower() in FLIGHT_TRACK_TYPES


def parse_gpx_tracks(file_input: TextIO) -> List[Track]:
    """
    Parse GPX data into one Track per GPX track.

    All segments of a GPX track are concatenated. When the file has no
    tracks, its routes are loaded instead.

    Args:
        file_input: File-like object containing GPX data

    Returns:
        List of Track objects, empty if the file has no tracks or routes

    Raises:
        gpxpy.gpx.GPXException: If GPX data is malformed
    """
    gpx_data = gpxpy.parse(file_input)

    tracks = []

    # Extract all track points from all segments of each track
    for gpx_track in gpx_data.tracks:
        points = [
            _to_track_point(point)
            for segment in gpx_track.segments
            for point in segment.points
        ]
        tracks.append(
            Track(
                points,
                name=gpx_track.name or "",
                description=gpx_track.description or "",
                is_flight_track=_is_flight_track(gpx_track.type),
            )
        )

    if not tracks:
        for gpx_route in gpx_data.routes:
            points = [_to_track_point(point) for point in gpx_route.points]
            tracks.append(
                Track(
                    points,
                    name=gpx_route.name or "",
                    description=gpx_route.description or "",
                    is_flight_track=_is_flight_track(getattr(gpx_route, "type", None)),
                )
            )

    if not tracks:
        logger.warning("No tracks or routes found in GPX data")
        return tracks

    logger.debug(
        f"Parsed {len(tracks)} tracks with {sum(len(t) for t in tracks)} "
        f"track points from GPX data"
    )

    return tracks


def load_gpx_tracks(filename: str) -> List[Track]:
    """
    Load and parse a GPX file into tracks.

    Args:
        filename: Path to GPX file, or "-" for stdin

    Returns:
        List of Track objects

    Raises:
        FileNotFoundError: If file doesn't exist
        PermissionError: If file can't be read
        gpxpy.gpx.GPXException: If GPX file is malformed
    """
    if filename == "-":
        logger.debug("Reading GPX data from stdin")
        return parse_gpx_tracks(sys.stdin)

    logger.debug(f"Reading GPX file: {filename}")
    with open(filename, "r", encoding="utf-8") as f:
        return parse_gpx_tracks(f)
