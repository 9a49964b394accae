"""
Track statistics: duration, length, height gain/loss, climb/sink and speed.

All functions here are pure and work on an ordered sequence of track points
(anything with latitude, longitude, altitude and time attributes). Points are
assumed to be in chronological order; nothing is sorted.
"""

from datetime import timedelta
from typing import NamedTuple, Optional, Sequence
import logging

from .geometry import GeodesyPoint, haversine_distance

logger = logging.getLogger(__name__)

# Step duration assumed when either point of a step has no timestamp
DEFAULT_ELAPSED_SECONDS = 1.0

# Climb rate and speed are 0 for steps shorter than this
MIN_ELAPSED_SECONDS = 1e-6

METERS_PER_SECOND_TO_KMH = 3.6


class TrackStatistics(NamedTuple):
    """Summary of a track, derived entirely from its points."""

    duration: timedelta = timedelta(0)
    length_in_meters: float = 0.0
    height_gain_in_meters: float = 0.0
    height_loss_in_meters: float = 0.0
    max_height: float = 0.0
    min_height: float = 0.0
    max_climb_rate: float = 0.0
    max_sink_rate: float = 0.0
    max_speed_kmh: float = 0.0
    average_speed_kmh: float = 0.0
    has_altitude: bool = False


def _elapsed_seconds(previous, current) -> float:
    """Seconds between two points, or the default when a timestamp is missing."""
    if previous.time is None or current.time is None:
        return DEFAULT_ELAPSED_SECONDS

    return (current.time - previous.time).total_seconds()


def _calculate_duration(points: Sequence) -> timedelta:
    """Time between the first and the last point that carry a timestamp."""
    first = next((p for p in points if p.time is not None), None)
    last = next((p for p in reversed(points) if p.time is not None), None)

    if first is None or last is None:
        return timedelta(0)

    return last.time - first.time


def calculate_statistics(points: Sequence) -> TrackStatistics:
    """
    Reduce a track's points into a statistics summary in a single pass.

    Args:
        points: Ordered sequence of track points

    Returns:
        TrackStatistics; all fields are zero for empty or single point tracks
    """
    points = list(points)

    length = 0.0
    height_gain = 0.0
    height_loss = 0.0
    max_height: Optional[float] = None
    min_height: Optional[float] = None
    max_climb_rate = 0.0
    max_sink_rate = 0.0
    max_speed = 0.0
    speed_sum = 0.0
    speed_count = 0

    previous = None
    for point in points:
        if point.altitude is not None:
            altitude = point.altitude
            max_height = altitude if max_height is None else max(max_height, altitude)
            min_height = altitude if min_height is None else min(min_height, altitude)

            if previous is not None and previous.altitude is not None:
                elapsed = _elapsed_seconds(previous, point)
                altitude_delta = altitude - previous.altitude
                climb_rate = (
                    0.0
                    if abs(elapsed) < MIN_ELAPSED_SECONDS
                    else altitude_delta / elapsed
                )

                if altitude_delta > 0.0:
                    height_gain += altitude_delta
                    max_climb_rate = max(max_climb_rate, climb_rate)
                elif altitude_delta < 0.0:
                    height_loss += -altitude_delta
                    max_sink_rate = min(max_sink_rate, climb_rate)

        if previous is not None:
            distance = haversine_distance(previous, point)
            length += distance

            elapsed = _elapsed_seconds(previous, point)
            if abs(elapsed) < MIN_ELAPSED_SECONDS:
                speed = 0.0
            else:
                speed = distance / elapsed * METERS_PER_SECOND_TO_KMH

            max_speed = max(max_speed, speed)
            speed_sum += speed
            speed_count += 1

        previous = point

    statistics = TrackStatistics(
        duration=_calculate_duration(points),
        length_in_meters=length,
        height_gain_in_meters=height_gain,
        height_loss_in_meters=height_loss,
        max_height=max_height if max_height is not None else 0.0,
        min_height=min_height if min_height is not None else 0.0,
        max_climb_rate=max_climb_rate,
        max_sink_rate=max_sink_rate,
        max_speed_kmh=max_speed,
        average_speed_kmh=speed_sum / speed_count if speed_count > 0 else 0.0,
        has_altitude=max_height is not None,
    )

    logger.debug(
        f"Calculated statistics for {len(points)} points: "
        f"{statistics.length_in_meters:.1f}m in {statistics.duration}"
    )

    return statistics


def calculate_center_point(points: Sequence) -> GeodesyPoint:
    """
    Calculate the center of all track points.

    Latitude and longitude are averaged over all points, altitude only over
    the points that have one.

    Args:
        points: Sequence of track points

    Returns:
        GeodesyPoint; (0, 0) for no points, altitude None when no point has one
    """
    latitude_sum = 0.0
    longitude_sum = 0.0
    altitude_sum = 0.0
    num_points = 0
    num_altitude_points = 0

    for point in points:
        latitude_sum += point.latitude
        longitude_sum += point.longitude
        num_points += 1
        if point.altitude is not None:
            altitude_sum += point.altitude
            num_altitude_points += 1

    if num_points == 0:
        return GeodesyPoint(0.0, 0.0)

    return GeodesyPoint(
        latitude=latitude_sum / num_points,
        longitude=longitude_sum / num_points,
        altitude=(
            altitude_sum / num_altitude_points if num_altitude_points > 0 else None
        ),
    )
