"""
Geodesic calculations on WGS84 latitude/longitude/altitude points.

Formulas follow the Aviation Formulary by Ed Williams, using a spherical
Earth model with east-positive longitudes.
"""

from typing import List, NamedTuple, Optional, Sequence
import math

# WGS84 equatorial radius; looked up at call time so a different sphere can be used
EARTH_RADIUS_IN_METERS = 6378137.0

# Smallest coordinate magnitude that counts as "set"
VALID_COORDINATE_EPSILON = 5e-324

# Below this |cos(latitude)| a point is treated as sitting on a pole
POLE_EPSILON = 1e-6


class GeodesyPoint(NamedTuple):
    """Represents a geographic position with latitude, longitude and optional altitude."""

    latitude: float
    longitude: float
    altitude: Optional[float] = None

    @property
    def valid(self) -> bool:
        """True when latitude and longitude are both set, i.e. not (0, 0)."""
        return (
            abs(self.latitude) > VALID_COORDINATE_EPSILON
            and abs(self.longitude) > VALID_COORDINATE_EPSILON
        )

    def distance_to(self, other: "GeodesyPoint") -> float:
        """Great-circle distance to another point, in meters."""
        return haversine_distance(self, other)

    def course_to(self, other: "GeodesyPoint") -> float:
        """Initial course to another point, in degrees clockwise from north."""
        return calculate_bearing(self, other)

    def offset(
        self, north_meters: float, east_meters: float, height_meters: float = 0.0
    ) -> "GeodesyPoint":
        """
        Offset this point by a local north/east displacement.

        Args:
            north_meters: Distance to move north (negative moves south)
            east_meters: Distance to move east (negative moves west)
            height_meters: Altitude change in meters

        Returns:
            New GeodesyPoint
        """
        distance = math.hypot(north_meters, east_meters)
        bearing = math.degrees(math.atan2(east_meters, north_meters))

        return polar_offset(self, distance, bearing, height_meters)

    def polar_offset(
        self, distance_meters: float, bearing_degrees: float, height_meters: float = 0.0
    ) -> "GeodesyPoint":
        """
        Offset this point by a distance along a bearing.

        Args:
            distance_meters: Distance to move in meters
            bearing_degrees: Bearing in degrees, 0 is north, 90 east, 180 south, 270 west
            height_meters: Altitude change in meters

        Returns:
            New GeodesyPoint
        """
        return polar_offset(self, distance_meters, bearing_degrees, height_meters)

    def is_close_to(self, other: "GeodesyPoint") -> bool:
        """Compare with another point, tolerating small coordinate differences."""
        if (self.altitude is None) != (other.altitude is None):
            return False

        if self.altitude is not None and other.altitude is not None:
            if abs(self.altitude - other.altitude) >= 1e-2:
                return False

        return (
            abs(self.latitude - other.latitude) < 1e-6
            and abs(self.longitude - other.longitude) < 1e-6
        )

    def to_json_array(self) -> List[float]:
        """Compact array form: [lat, lon], [lat, lon, alt], or [] when invalid."""
        if not self.valid:
            return []

        if self.altitude is None:
            return [self.latitude, self.longitude]

        return [self.latitude, self.longitude, self.altitude]

    @classmethod
    def from_json_array(cls, values: Sequence[float]) -> "GeodesyPoint":
        """Inverse of to_json_array(); unexpected lengths give the invalid point."""
        if len(values) == 2:
            return cls(float(values[0]), float(values[1]))
        if len(values) == 3:
            return cls(float(values[0]), float(values[1]), float(values[2]))

        return cls(0.0, 0.0)

    def __str__(self) -> str:
        if not self.valid:
            return "invalid"

        altitude = "N/A" if self.altitude is None else f"{self.altitude:.2f}"
        return f"Lat={self.latitude:.6f}, Long={self.longitude:.6f}, Alt={altitude}"


def haversine_distance(pos1, pos2) -> float:
    """
    Calculate the haversine distance between two positions.

    Works with anything that has latitude and longitude attributes in
    decimal degrees. Altitude is ignored.

    Args:
        pos1: First position
        pos2: Second position

    Returns:
        Distance in meters
    """
    lat1 = math.radians(pos1.latitude)
    lat2 = math.radians(pos2.latitude)
    dlat = math.radians(pos1.latitude - pos2.latitude)
    dlon = math.radians(pos1.longitude - pos2.longitude)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    # rounding can push a just above 1 for antipodal points
    distance_radians = 2 * math.asin(min(1.0, math.sqrt(a)))

    return distance_radians * EARTH_RADIUS_IN_METERS


def calculate_bearing(pos1, pos2) -> float:
    """
    Calculate the initial bearing from pos1 to pos2.

    Longitude is undefined on the poles, so leaving the north pole always
    heads south (180) and leaving the south pole always heads north (0).

    Args:
        pos1: Start position
        pos2: Target position

    Returns:
        Bearing in degrees clockwise from true north, in [0, 360)
    """
    lat1 = math.radians(pos1.latitude)

    if abs(math.cos(lat1)) < POLE_EPSILON:
        return 180.0 if lat1 > 0 else 0.0

    lat2 = math.radians(pos2.latitude)
    dlon = math.radians(pos2.longitude - pos1.longitude)

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(
        dlon
    )
    course = math.degrees(math.atan2(y, x))

    if course < 0.0:
        course += 360.0

    # tiny negative courses round up to 360.0 above
    if course >= 360.0:
        course -= 360.0

    return course


def polar_offset(
    position, distance_meters: float, bearing_degrees: float, height_meters: float = 0.0
) -> GeodesyPoint:
    """
    Dead-reckoning: move from a position by a distance along a bearing.

    Args:
        position: Start position (latitude, longitude and optional altitude)
        distance_meters: Distance to travel in meters
        bearing_degrees: Bearing in degrees clockwise from north
        height_meters: Altitude change in meters

    Returns:
        GeodesyPoint with longitude normalized to [-180, 180). Altitude is the
        start altitude plus height_meters, or just height_meters when the start
        position has no altitude.
    """
    lat1 = math.radians(position.latitude)
    lon1 = math.radians(position.longitude)
    angular_distance = distance_meters / EARTH_RADIUS_IN_METERS
    course = math.radians(bearing_degrees)

    new_lat = math.asin(
        math.sin(lat1) * math.cos(angular_distance)
        + math.cos(lat1) * math.sin(angular_distance) * math.cos(course)
    )

    dlon = math.atan2(
        math.sin(course) * math.sin(angular_distance) * math.cos(lat1),
        math.cos(angular_distance) - math.sin(lat1) * math.sin(new_lat),
    )

    new_lon = (lon1 + dlon + math.pi) % (2 * math.pi) - math.pi

    altitude = getattr(position, "altitude", None)
    new_altitude = height_meters if altitude is None else altitude + height_meters

    return GeodesyPoint(
        latitude=math.degrees(new_lat),
        longitude=math.degrees(new_lon),
        altitude=new_altitude,
    )
