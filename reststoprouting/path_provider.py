"""
Walking path lookup with priority-ordered backend failover.

Each backend is a plain function ``(start, end, config) -> PathResult | None``.
Returning None means "not configured or no route"; raising means the call
failed. Either way the next backend is tried.
"""

import logging
import time
from typing import Callable, Dict, List, Optional

import openrouteservice
import polyline
import requests
from openrouteservice import exceptions as ors_exceptions

from .config import Config
from .exceptions import InvalidCoordinatesError, PathBackendError
from .logger import logger as engine_logger
from .models.route_models import Coordinate, PathResult

logger = logging.getLogger(__name__)

Backend = Callable[[Coordinate, Coordinate, Config], Optional[PathResult]]

BACKEND_ERRORS = (
    PathBackendError,
    InvalidCoordinatesError,
    requests.exceptions.RequestException,
    ors_exceptions.ApiError,
    ors_exceptions.HTTPError,
    ors_exceptions.Timeout,
    AttributeError,
    KeyError,
    IndexError,
    TypeError,
    ValueError,
)


def _from_lon_lat(pairs) -> List[Coordinate]:
    return [Coordinate(lat=float(lat), lng=float(lon)) for lon, lat in pairs]


def _json_object(value, what: str) -> dict:
    if not isinstance(value, dict):
        raise PathBackendError(f"{what} has an unexpected shape: {type(value).__name__}")
    return value


def osrm_walking_route(start: Coordinate, end: Coordinate, config: Config) -> Optional[PathResult]:
    """OSRM /route with the foot profile; geometry as GeoJSON [lon, lat] pairs."""
    if not config.osrm_url:
        return None
    coords = f"{start.lng},{start.lat};{end.lng},{end.lat}"
    url = f"{config.osrm_url.rstrip('/')}/route/v1/foot/{coords}"
    response = requests.get(url, params={
        'overview': 'full',
        'geometries': 'geojson',
    }, timeout=config.request_timeout)
    response.raise_for_status()
    data = _json_object(response.json(), "OSRM response")

    if data.get('code') != 'Ok':
        raise PathBackendError(f"OSRM error: {data.get('message', data.get('code', 'Unknown error'))}")
    routes = data.get('routes')
    if not routes:
        return None

    route = _json_object(routes[0], "OSRM route")
    return PathResult(
        coordinates=_from_lon_lat(route['geometry']['coordinates']),
        distance_m=float(route['distance']),
        duration_s=float(route['duration']),
        source='osrm',
    )


def ors_walking_route(start: Coordinate, end: Coordinate, config: Config) -> Optional[PathResult]:
    """OpenRouteService foot-walking directions. Skipped without an API key."""
    if not config.ors_api_key:
        return None
    client = openrouteservice.Client(
        key=config.ors_api_key,
        timeout=config.request_timeout,
        retry_over_query_limit=False,
    )
    geojson = client.directions(
        [(start.lng, start.lat), (end.lng, end.lat)],
        profile='foot-walking',
        format='geojson',
    )
    features = _json_object(geojson, "ORS response").get('features')
    if not features:
        return None

    feature = _json_object(features[0], "ORS feature")
    properties = _json_object(feature.get('properties') or {}, "ORS properties")
    summary = _json_object(properties.get('summary') or {}, "ORS summary")
    return PathResult(
        coordinates=_from_lon_lat(feature['geometry']['coordinates']),
        distance_m=float(summary.get('distance', 0.0)),
        duration_s=float(summary.get('duration', 0.0)),
        source='ors',
    )


def mapbox_walking_route(start: Coordinate, end: Coordinate, config: Config) -> Optional[PathResult]:
    """Mapbox walking directions with a polyline6 geometry. Skipped without a token."""
    if not config.mapbox_token:
        return None
    url = f"https://api.mapbox.com/directions/v5/mapbox/walking/{start.lng},{start.lat};{end.lng},{end.lat}"
    response = requests.get(url, params={
        'geometries': 'polyline6',
        'overview': 'full',
        'access_token': config.mapbox_token,
    }, timeout=config.request_timeout)
    response.raise_for_status()
    data = _json_object(response.json(), "Mapbox response")

    routes = data.get('routes')
    if not routes:
        return None
    route = _json_object(routes[0], "Mapbox route")
    geometry = route.get('geometry')
    if not geometry:
        return None

    # decode returns (lat, lon)
    points = polyline.decode(geometry, 6)
    return PathResult(
        coordinates=[Coordinate(lat=lat, lng=lon) for lat, lon in points],
        distance_m=float(route['distance']),
        duration_s=float(route['duration']),
        source='mapbox',
    )


BACKENDS: Dict[str, Backend] = {
    'osrm': osrm_walking_route,
    'ors': ors_walking_route,
    'mapbox': mapbox_walking_route,
}


class PathProvider:
    """Tries each configured backend in order; first usable path wins."""

    def __init__(self, config: Config, backends: Optional[List[Backend]] = None):
        self.config = config
        if backends is None:
            backends = []
            for name in config.path_backends:
                backend = BACKENDS.get(name)
                if backend is None:
                    logger.warning(f"Ignoring unknown path backend: {name}")
                    continue
                backends.append(backend)
        self.backends = backends

    def get_walking_path(self, start: Coordinate, end: Coordinate) -> Optional[PathResult]:
        """Return the first backend's walking path, or None if every backend fails."""
        for backend in self.backends:
            name = getattr(backend, '__name__', repr(backend))
            started = time.perf_counter()
            try:
                result = backend(start, end, self.config)
            except BACKEND_ERRORS as e:
                engine_logger.log_api_call(name, (time.perf_counter() - started) * 1000, False)
                logger.warning(f"Path backend {name} failed: {e}")
                continue

            if result is None or len(result.coordinates) < 2:
                logger.info(f"Path backend {name} returned no usable route")
                continue

            engine_logger.log_api_call(name, (time.perf_counter() - started) * 1000, True)
            return result

        logger.warning("All path backends failed; falling back to a straight line")
        return None
