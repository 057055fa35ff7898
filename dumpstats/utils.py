"""
DumpStats Utility Functions
Spherical geometry on decimal-degree coordinates and small formatting helpers.
"""

from math import atan2, cos, copysign, floor, fmod, inf, isfinite, log, nan, pi, sin, sqrt, tan
from typing import NamedTuple

from .config import Constants


class Coordinate(NamedTuple):
    """Position in decimal degrees."""

    lat: float
    lon: float


def to_radians(degrees: float) -> float:
    """Convert decimal degrees to radians."""
    return degrees * (pi / 180.0)


def to_degrees(radians: float) -> float:
    """Convert radians to decimal degrees."""
    return radians * (180.0 / pi)


def to_km(nm: float) -> float:
    """Convert nautical miles to kilometers."""
    return nm / Constants.NM_PER_KM


def to_nm(km: float) -> float:
    """Convert kilometers to nautical miles."""
    return km * Constants.NM_PER_KM


def round_half_away(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Python's round() rounds halves to even, which would place 0.5 degree
    boundaries and heatmap cells differently from C-style rounding.

    Example:
        >>> round_half_away(2.5), round_half_away(-2.5)
        (3, -3)
    """
    return int(copysign(floor(abs(value) + 0.5), value))


def haversine_distance(first: Coordinate, second: Coordinate) -> float:
    """
    Calculate great circle distance between two points using Haversine formula.

    Args:
        first: First position
        second: Second position

    Returns:
        Distance in kilometers. Symmetric, exactly zero for identical
        points and NaN if any input is NaN.

    Example:
        >>> haversine_distance(Coordinate(50.0, 16.0), Coordinate(50.0, 16.0))
        0.0
    """
    delta_lat = to_radians(first.lat) - to_radians(second.lat)
    delta_lon = to_radians(first.lon) - to_radians(second.lon)

    a = sin(delta_lat / 2.0) ** 2 + cos(to_radians(first.lat)) * cos(
        to_radians(second.lat)
    ) * sin(delta_lon / 2.0) ** 2

    # Rounding can push a past 1 for antipodal points
    if a > 1.0:
        a = 1.0

    c = 2.0 * atan2(sqrt(a), sqrt(1.0 - a))

    return Constants.EARTH_RADIUS_KM * c


def _mercator_latitude(phi: float) -> float:
    """Isometric latitude ln(tan(phi/2 + pi/4)), -inf at the south pole."""
    t = tan(phi / 2.0 + pi / 4.0)
    if t > 0.0:
        return log(t)
    if t == 0.0:
        return -inf
    return nan


def rhumb_bearing(first: Coordinate, second: Coordinate) -> float:
    """
    Calculate the bearing from the first point to the second.

    Uses the rhumb line (constant heading) formulation, which is what the
    polar range plot is indexed by.

    Args:
        first: Start position (receiver)
        second: End position (aircraft)

    Returns:
        Bearing in degrees in [0, 360) where 0 = North, 90 = East.
        NaN if any input is NaN.
    """
    delta_lon = to_radians(second.lon) - to_radians(first.lon)
    delta_phi = _mercator_latitude(to_radians(second.lat)) - _mercator_latitude(
        to_radians(first.lat)
    )

    # Take the shorter way around the antimeridian
    if delta_lon > pi:
        delta_lon -= 2.0 * pi
    elif delta_lon < -pi:
        delta_lon += 2.0 * pi

    return fmod(to_degrees(atan2(delta_lon, delta_phi)) + 360.0, 360.0)


def validate_coordinates(lat: float, lon: float) -> bool:
    """
    Validate latitude and longitude coordinates.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees

    Returns:
        True if both are finite, lat in [-90, 90] and lon in (-180, 180]

    Example:
        >>> validate_coordinates(50.0, 16.0)
        True
        >>> validate_coordinates(100, 200)
        False
    """
    if not (isfinite(lat) and isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 < lon <= 180


def format_duration(seconds: int) -> str:
    """
    Format duration in human-readable format.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string

    Example:
        >>> format_duration(3665)
        '1h 1m 5s'
    """
    if seconds is None or seconds < 0:
        return "N/A"

    seconds = int(seconds)
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)
