import math
import re
from typing import List, Optional, Tuple

from ..models.route_models import Coordinate

EARTH_RADIUS_KM = 6371.0  # mean Earth radius

_COORDINATE_TEXT = re.compile(r'^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$')


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate haversine distance between two points in kilometers"""
    lat1_rad = math.radians(lat1)
    lon1_rad = math.radians(lon1)
    lat2_rad = math.radians(lat2)
    lon2_rad = math.radians(lon2)
    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad
    a = (math.sin(dlat/2)**2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon/2)**2)
    # rounding can push a slightly past 1 for antipodal points
    c = 2 * math.asin(math.sqrt(min(1.0, max(0.0, a))))
    return EARTH_RADIUS_KM * c


def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate haversine distance between two points in meters"""
    return haversine_distance(lat1, lon1, lat2, lon2) * 1000.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    return haversine_distance(a.lat, a.lng, b.lat, b.lng)


def distance_m(a: Coordinate, b: Coordinate) -> float:
    return haversine_distance_m(a.lat, a.lng, b.lat, b.lng)


def interpolate_at(a: Coordinate, b: Coordinate, fraction: float) -> Coordinate:
    """Point at ``fraction`` of the way from ``a`` to ``b``, linear in lat/lng"""
    return Coordinate(
        lat=a.lat + (b.lat - a.lat) * fraction,
        lng=a.lng + (b.lng - a.lng) * fraction,
    )


def interpolate_points(a: Coordinate, b: Coordinate, count: int) -> List[Coordinate]:
    """Return ``count`` points evenly spaced between ``a`` and ``b``, endpoints excluded.

    Interpolation is linear in lat/lng space rather than along the great
    circle. That is accurate enough for the short legs it is used on (the
    straight-line fallback) but it is an approximation, not a geodesic.
    """
    if count <= 0:
        return []
    return [interpolate_at(a, b, i / (count + 1)) for i in range(1, count + 1)]


def parse_coordinate_text(text: str) -> Optional[Tuple[float, float]]:
    """Return (lat, lng) when text is a literal "lat,lng" pair, else None"""
    match = _COORDINATE_TEXT.match(text or '')
    if not match:
        return None
    return float(match.group(1)), float(match.group(2))
