#!/usr/bin/env python3
"""
Flighttrack - geodesy and statistics for recorded flight and hike tracks.

This package provides geodesic calculations on WGS84 points, statistics for
GPS tracks, and a time-bounded buffer for live position samples.
"""
import importlib.metadata

__version__ = importlib.metadata.version("flighttrack")

# Import main classes for public API
from .geometry import GeodesyPoint
from .position_window import PositionSample, PositionWindow
from .statistics import TrackStatistics, calculate_center_point, calculate_statistics
from .track import Track, TrackPoint

__all__ = [
    "GeodesyPoint",
    "PositionSample",
    "PositionWindow",
    "Track",
    "TrackPoint",
    "TrackStatistics",
    "calculate_center_point",
    "calculate_statistics",
]
