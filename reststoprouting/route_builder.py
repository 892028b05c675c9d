"""
RouteBuilder: resolve endpoints, fetch a walking path, segment it into rest
stops and assemble the RouteOption handed to the presentation layer.
"""

import math
import time
import uuid
from typing import List, Optional

from .config import Config
from .exceptions import InvalidIntervalError, LocationNotFoundError
from .geocoding import LocationResolver
from .logger import logger
from .models.route_models import PathResult, ResolvedLocation, RouteOption, Stop
from .path_provider import PathProvider
from .segmenter import Segmenter
from .utils.format_utils import format_duration, format_km
from .utils.geo_utils import distance_km


class RouteBuilder:
    """
    Orchestrates one route request:
    1. Resolve origin, then destination (sequentially, geocoders are rate limited)
    2. Ask the path backends for a walking path
    3. Segment the real path, or fall back to a straight-line estimate
    4. Return exactly one RouteOption
    """

    def __init__(self, config: Config, resolver: Optional[LocationResolver] = None,
                 path_provider: Optional[PathProvider] = None,
                 segmenter: Optional[Segmenter] = None):
        self.config = config
        self.resolver = resolver if resolver is not None else LocationResolver(config)
        self.path_provider = path_provider if path_provider is not None else PathProvider(config)
        self.segmenter = segmenter if segmenter is not None else Segmenter(**config.get_segmenter_config())

    def build_route(self, origin_text: str, destination_text: str, interval_km: float) -> List[RouteOption]:
        """Build the route; raises LocationNotFoundError or InvalidIntervalError."""
        started = time.perf_counter()
        interval_km = self._check_interval(interval_km)

        mode = 'unresolved'
        success = False
        try:
            origin = self.resolver.resolve_input(origin_text, role='origin')
            destination = self.resolver.resolve_input(destination_text, role='destination')

            path = self.path_provider.get_walking_path(origin.coordinate, destination.coordinate)
            stops = self.segmenter.segment(origin, destination, path, interval_km,
                                           self.resolver.reverse_resolve_name)
            if path is not None:
                mode = f"path:{path.source or 'unknown'}"
                route = self._path_route(origin, destination, path, stops, interval_km)
            else:
                mode = 'straight_line'
                route = self._straight_line_route(origin, destination, stops)
            success = True
            return [route]
        except LocationNotFoundError as e:
            logger.warning(f"Route request failed: {e}")
            raise
        finally:
            logger.log_route_request(origin_text, destination_text, mode,
                                     (time.perf_counter() - started) * 1000, success)

    @staticmethod
    def _check_interval(interval_km) -> float:
        try:
            value = float(interval_km)
        except (TypeError, ValueError):
            raise InvalidIntervalError(f"Interval must be a number, got {interval_km!r}")
        if not math.isfinite(value) or value <= 0:
            raise InvalidIntervalError(f"Interval must be a positive number of kilometers, got {interval_km!r}")
        return value

    @staticmethod
    def _route_name(origin: ResolvedLocation, destination: ResolvedLocation) -> str:
        return f"{origin.short_name} → {destination.short_name}"

    def _path_route(self, origin: ResolvedLocation, destination: ResolvedLocation,
                    path: PathResult, stops: List[Stop], interval_km: float) -> RouteOption:
        rest_count = len(stops) - 2
        return RouteOption(
            id=f"route-{uuid.uuid4().hex[:8]}",
            name=self._route_name(origin, destination),
            description=(f"Walking route along real streets with {rest_count} rest "
                         f"stop{'s' if rest_count != 1 else ''} about every {format_km(interval_km)}."),
            total_distance=format_km(path.distance_m / 1000.0),
            estimated_duration=format_duration(path.duration_s),
            stops=stops,
            path=list(path.coordinates),
        )

    def _straight_line_route(self, origin: ResolvedLocation, destination: ResolvedLocation,
                             stops: List[Stop]) -> RouteOption:
        total_km = distance_km(origin.coordinate, destination.coordinate)
        return RouteOption(
            id=f"route-{uuid.uuid4().hex[:8]}",
            name=self._route_name(origin, destination),
            description=("Straight-line estimate: no walking path could be retrieved, "
                         "so the distance and rest points are approximate."),
            total_distance=format_km(total_km),
            estimated_duration=format_duration(total_km * self.config.minutes_per_km * 60),
            stops=stops,
        )
