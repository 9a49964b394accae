"""
Track data model: ordered track points plus on-demand statistics.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Tuple
import logging
import uuid

from .geometry import GeodesyPoint
from .statistics import TrackStatistics, calculate_center_point, calculate_statistics

logger = logging.getLogger(__name__)

# Placeholders used by the compact JSON array form of a track point
INVALID_ALTITUDE_VALUE = -10000
INVALID_HEADING_VALUE = -1

# XC Tracer instruments log a point every 0.2 seconds
XCTRACER_POINT_INTERVAL = timedelta(seconds=0.2)


@dataclass(frozen=True)
class TrackPoint:
    """A single GPS fix of a track."""

    latitude: float
    longitude: float
    altitude: Optional[float] = None
    heading: Optional[int] = None
    time: Optional[datetime] = None

    @property
    def location(self) -> GeodesyPoint:
        """The fix as a GeodesyPoint."""
        return GeodesyPoint(self.latitude, self.longitude, self.altitude)

    def to_json_array(self) -> List[float]:
        """Compact array form: [lat, lon, altitude, heading, unix time in ms]."""
        return [
            self.latitude,
            self.longitude,
            self.altitude if self.altitude is not None else INVALID_ALTITUDE_VALUE,
            self.heading if self.heading is not None else INVALID_HEADING_VALUE,
            round(self.time.timestamp() * 1000) if self.time is not None else 0,
        ]

    @classmethod
    def from_json_array(cls, values: Sequence[float]) -> "TrackPoint":
        """Inverse of to_json_array(); unexpected lengths give an empty point at (0, 0)."""
        if len(values) != 5:
            return cls(0.0, 0.0)

        altitude = None
        if int(values[2]) != INVALID_ALTITUDE_VALUE:
            altitude = float(values[2])

        heading = None
        if int(values[3]) != INVALID_HEADING_VALUE:
            heading = int(values[3])

        time = None
        if int(values[4]) != 0:
            time = datetime.fromtimestamp(int(values[4]) / 1000.0, tz=timezone.utc)

        return cls(float(values[0]), float(values[1]), altitude, heading, time)


class Track:
    """
    Represents a recorded track with memoized statistics.

    Track points are immutable and the point list is only changed through the
    methods of this class, which drop the memoized statistics so they are
    recalculated on next access.
    """

    def __init__(
        self,
        points: Optional[Iterable[TrackPoint]] = None,
        *,
        track_id: Optional[str] = None,
        name: str = "",
        description: str = "",
        is_flight_track: bool = False,
        is_live_track: bool = False,
        color: str = "0000FF",
        ground_height_profile: Optional[List[float]] = None,
    ):
        """Initializes a Track object.

        Args:
            points: Track points in chronological order
            track_id: Unique ID; a random UUID is used when omitted
            name: Track name
            description: Track description
            is_flight_track: True for flights, False for hikes and other tracks
            is_live_track: True when the track is updated from a live source
            color: Track color as hex RGB, e.g. "0000FF"
            ground_height_profile: Terrain height below each track point
        """
        self.track_id = track_id if track_id is not None else str(uuid.uuid4())
        self.name = name
        self.description = description
        self.is_flight_track = is_flight_track
        self.is_live_track = is_live_track
        self.color = color
        self.ground_height_profile = list(ground_height_profile or [])

        self._points: List[TrackPoint] = list(points or [])
        self._statistics: Optional[TrackStatistics] = None

    @property
    def points(self) -> Tuple[TrackPoint, ...]:
        """Track points, read-only."""
        return tuple(self._points)

    @property
    def statistics(self) -> TrackStatistics:
        """Statistics of the current points, calculated on first access."""
        if self._statistics is None:
            self._statistics = calculate_statistics(self._points)
        return self._statistics

    def calculate_statistics(self) -> TrackStatistics:
        """Recalculate statistics from scratch and return them."""
        self._statistics = calculate_statistics(self._points)
        return self._statistics

    def center_point(self) -> GeodesyPoint:
        """Center of all track points."""
        return calculate_center_point(self._points)

    def _invalidate(self) -> None:
        self._statistics = None

    def add_point(self, point: TrackPoint) -> None:
        """Append a point at the end of the track."""
        self._points.append(point)
        self._invalidate()

    def add_points(self, points: Iterable[TrackPoint]) -> None:
        """Append points at the end of the track."""
        self._points.extend(points)
        self._invalidate()

    def generate_point_times(self, start: datetime, interval: timedelta) -> None:
        """
        Set the time of every point, starting at `start` with a fixed interval.

        Args:
            start: Time of the first point
            interval: Time between two consecutive points
        """
        self._points = [
            replace(point, time=start + index * interval)
            for index, point in enumerate(self._points)
        ]
        self._invalidate()

    def apply_altitude_offset(self, offset_meters: float) -> None:
        """Shift the altitude of all points that have one."""
        self._points = [
            (
                replace(point, altitude=point.altitude + offset_meters)
                if point.altitude is not None
                else point
            )
            for point in self._points
        ]
        self._invalidate()

    def adjust_to_ground_profile(self, ground_height_profile: Sequence[float]) -> int:
        """
        Lift points that lie below the terrain up to the terrain height.

        Points without altitude count as being at 0 m.

        Args:
            ground_height_profile: Terrain height for each track point

        Returns:
            Number of modified points

        Raises:
            ValueError: If the profile length differs from the number of points
        """
        if len(ground_height_profile) != len(self._points):
            raise ValueError(
                f"Ground height profile has {len(ground_height_profile)} values "
                f"but track has {len(self._points)} points"
            )

        modified = 0
        adjusted_points = []
        for point, ground_height in zip(self._points, ground_height_profile):
            altitude = point.altitude if point.altitude is not None else 0.0
            if altitude < ground_height:
                point = replace(point, altitude=ground_height)
                modified += 1
            adjusted_points.append(point)

        self._points = adjusted_points
        self._invalidate()

        logger.debug(
            f"Adjusted {modified} of {len(self._points)} points to ground profile"
        )
        return modified

    def remove_points_before(self, before: datetime) -> None:
        """Remove all points with a time before `before`."""
        self._points = [
            p for p in self._points if p.time is None or p.time >= before
        ]
        self._invalidate()

    def remove_points_after(self, after: datetime) -> None:
        """Remove all points with a time after `after`."""
        self._points = [p for p in self._points if p.time is None or p.time <= after]
        self._invalidate()

    def calculate_xctracer_point_times(self) -> None:
        """
        Generate point times for tracks recorded by an XC Tracer.

        The start time is taken from the track name, e.g.
        "2019-04-21T11:03:49Z 85QA3ET1", and points are 0.2 s apart. Tracks
        whose name doesn't start with a date are left alone.
        """
        start_text, separator, _ = self.name.partition(" ")
        if not separator or not start_text.strip():
            return

        try:
            start = datetime.fromisoformat(start_text.replace("Z", "+00:00"))
        except ValueError:
            logger.debug(f"Track name doesn't start with a date: {self.name}")
            return

        self.generate_point_times(start, XCTRACER_POINT_INTERVAL)

    def __len__(self) -> int:
        """Return number of track points."""
        return len(self._points)

    def __getitem__(self, index):
        """Allow indexing into track points."""
        return self._points[index]

    def __iter__(self):
        """Allow iteration over track points."""
        return iter(tuple(self._points))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Track):
            return NotImplemented

        return (
            self.track_id == other.track_id
            and self.name == other.name
            and self.description == other.description
            and len(self._points) == len(other._points)
            and len(self.ground_height_profile) == len(other.ground_height_profile)
        )

    def __hash__(self) -> int:
        return hash((self.track_id, self.name, self.description))

    def __str__(self) -> str:
        return f"Name={self.name}, TrackPoints.Count={len(self._points)}"
