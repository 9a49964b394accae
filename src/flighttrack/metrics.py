"""
Module for logging track statistics as structured key=value lines.
"""

import logging

from .config import FlightTrackConfig
from .statistics import TrackStatistics

logger = logging.getLogger(__name__)


def log_metrics(
    track_name: str,
    num_points: int,
    statistics: TrackStatistics,
    config: FlightTrackConfig,
) -> None:
    """
    Log statistics of one track as machine readable debug lines.

    Args:
        track_name: Name of the track the statistics belong to
        num_points: Number of track points
        statistics: Statistics to log
        config: Settings; nothing is logged unless config.metrics is set
    """
    if not config.metrics:
        return

    logger.debug("=== FLIGHTTRACK_METRICS ===")
    logger.debug(f"track_name={track_name}")
    logger.debug(f"track_points={num_points}")
    logger.debug(f"duration_s={statistics.duration.total_seconds():.1f}")
    logger.debug(f"length_m={statistics.length_in_meters:.2f}")
    logger.debug(f"height_gain_m={statistics.height_gain_in_meters:.2f}")
    logger.debug(f"height_loss_m={statistics.height_loss_in_meters:.2f}")
    if statistics.has_altitude:
        logger.debug(f"max_height_m={statistics.max_height:.2f}")
        logger.debug(f"min_height_m={statistics.min_height:.2f}")
    logger.debug(f"max_climb_rate_ms={statistics.max_climb_rate:.2f}")
    logger.debug(f"max_sink_rate_ms={statistics.max_sink_rate:.2f}")
    logger.debug(f"max_speed_kmh={statistics.max_speed_kmh:.2f}")
    logger.debug(f"average_speed_kmh={statistics.average_speed_kmh:.2f}")
    logger.debug("=== END_FLIGHTTRACK_METRICS ===")
