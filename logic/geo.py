"""
Spherical coordinate arithmetic.

Great-circle distance and bearing offsets on a sphere with the WGS84
equatorial radius. No ellipsoid correction is applied; at the distances the
map engine works with (metres to a few kilometres) the error is negligible.

Date: 2026-10-18
"""

import math

from .models import GeoPoint

# WGS84 equatorial radius in metres
EARTH_RADIUS_M = 6378137.0

TWO_PI = 2.0 * math.pi


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points using the haversine formula.

    Args:
        a: First point.
        b: Second point.

    Returns:
        Distance in metres. Symmetric, never negative, 0 for identical points.
        NaN when any coordinate is NaN or infinite.
    """
    if not _finite(a.latitude, a.longitude, b.latitude, b.longitude):
        return math.nan

    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push h a hair outside [0, 1]
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def offset(origin: GeoPoint, distance_m: float, bearing_radians: float) -> GeoPoint:
    """Project a point along an initial bearing.

    Args:
        origin: Starting point.
        distance_m: Distance to travel in metres (>= 0).
        bearing_radians: Initial bearing, 0 = north, increasing clockwise.
            Taken modulo 2*pi.

    Returns:
        The destination point. Longitude is not wrapped.
    """
    if not _finite(origin.latitude, origin.longitude, distance_m, bearing_radians):
        return GeoPoint(latitude=math.nan, longitude=math.nan)

    bearing = bearing_radians % TWO_PI
    angular = distance_m / EARTH_RADIUS_M
    lat1 = math.radians(origin.latitude)
    lon1 = math.radians(origin.longitude)

    sin_lat2 = math.sin(lat1) * math.cos(angular) + math.cos(lat1) * math.sin(angular) * math.cos(bearing)
    lat2 = math.asin(min(1.0, max(-1.0, sin_lat2)))
    lon2 = lon1 + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )

    return GeoPoint(latitude=math.degrees(lat2), longitude=math.degrees(lon2))


def bearing_from_degrees(degrees: float) -> float:
    """Convert a compass bearing in degrees to radians."""
    return degrees * math.pi / 180.0
