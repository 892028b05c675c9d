"""
Segmenter: splits a walking route into rest stops at regular intervals.

Two modes, chosen once per call:

* along a real path (Mode A): walk the polyline, accumulate distance and drop
  a stop on the first point at or past each interval boundary (or, when one
  long segment spans several boundaries, on each boundary inside it);
* straight line (Mode B): when no path could be fetched, spread a bounded
  number of evenly spaced estimate points between origin and destination.
"""

import logging
import math
from typing import Callable, List, Optional

from .models.route_models import Coordinate, PathResult, ResolvedLocation, Stop, StopRole
from .utils.format_utils import format_km
from .utils.geo_utils import distance_km, distance_m, interpolate_at, interpolate_points

logger = logging.getLogger(__name__)

NameResolver = Callable[[Coordinate], str]


def fallback_stop_count(total_km: float, interval_km: float, max_stops: int = 8) -> int:
    """floor(total / interval), clamped to [0, max_stops]"""
    if interval_km <= 0:
        return 0
    return max(0, min(max_stops, int(math.floor(total_km / interval_km))))


def generic_stop_name(index: int) -> str:
    return f"Rest point {index}"


class Segmenter:
    """Builds the ordered stop list for one route."""

    def __init__(self, max_named_stops: int = 10, max_fallback_stops: int = 8,
                 end_buffer_meters: float = 500.0):
        self.max_named_stops = max_named_stops
        self.max_fallback_stops = max_fallback_stops
        self.end_buffer_meters = end_buffer_meters

    def segment(self, origin: ResolvedLocation, destination: ResolvedLocation,
                path: Optional[PathResult], interval_km: float,
                name_resolver: NameResolver) -> List[Stop]:
        """Return stops from start to end; always at least the two endpoints."""
        stops = [self._start_stop(origin)]
        if path is not None:
            stops.extend(self._segment_along_path(destination, path, interval_km, name_resolver))
        else:
            stops.extend(self._segment_straight_line(origin, destination, interval_km))
        return stops

    def _start_stop(self, origin: ResolvedLocation) -> Stop:
        return Stop(
            name=origin.short_name,
            description=f"Start: {origin.display_name}",
            distance_from_prev='0 km',
            coordinate=origin.coordinate,
            role=StopRole.START,
        )

    def _end_stop(self, destination: ResolvedLocation, distance_from_prev_km: float) -> Stop:
        return Stop(
            name=destination.short_name,
            description=f"Destination: {destination.display_name}",
            distance_from_prev=format_km(distance_from_prev_km),
            coordinate=destination.coordinate,
            role=StopRole.END,
        )

    def _rest_stop(self, point: Coordinate, at_m: float, attributed_m: float, placed: int,
                   name_resolver: NameResolver) -> Stop:
        if placed < self.max_named_stops:
            name = name_resolver(point)
        else:
            name = generic_stop_name(placed + 1)
        return Stop(
            name=name,
            description=f"Rest stop about {format_km(at_m / 1000.0)} into the walk",
            distance_from_prev=format_km((at_m - attributed_m) / 1000.0),
            coordinate=point,
            role=StopRole.REST,
        )

    def _segment_along_path(self, destination: ResolvedLocation, path: PathResult,
                            interval_km: float, name_resolver: NameResolver) -> List[Stop]:
        interval_m = interval_km * 1000.0
        # a stop this close to the end would duplicate the end stop
        last_target = path.distance_m - self.end_buffer_meters

        stops: List[Stop] = []
        distance_covered = 0.0
        attributed = 0.0
        next_target = interval_m

        points = path.coordinates
        for i in range(len(points) - 1):
            segment_length = distance_m(points[i], points[i + 1])
            reached = distance_covered + segment_length

            crossed = []
            while reached >= next_target and next_target <= last_target:
                crossed.append(next_target)
                next_target += interval_m

            if len(crossed) == 1:
                placements = [(points[i + 1], reached)]
            else:
                # a long segment spanning several boundaries gets one stop per boundary
                placements = [
                    (interpolate_at(points[i], points[i + 1], (target - distance_covered) / segment_length), target)
                    for target in crossed
                ]

            for point, at_m in placements:
                stops.append(self._rest_stop(point, at_m, attributed, len(stops), name_resolver))
                attributed = at_m

            distance_covered = reached

        logger.debug(f"Placed {len(stops)} rest stops along {path.distance_m:.0f} m of path")
        remaining_m = max(0.0, path.distance_m - attributed)
        stops.append(self._end_stop(destination, remaining_m / 1000.0))
        return stops

    def _segment_straight_line(self, origin: ResolvedLocation, destination: ResolvedLocation,
                               interval_km: float) -> List[Stop]:
        total_km = distance_km(origin.coordinate, destination.coordinate)
        num_stops = fallback_stop_count(total_km, interval_km, self.max_fallback_stops)

        stops: List[Stop] = []
        # points sit at i/(n+1), so their spacing shrinks below the interval once clamped
        spacing_km = total_km / (num_stops + 1)
        points = interpolate_points(origin.coordinate, destination.coordinate, num_stops)
        for index, point in enumerate(points, start=1):
            stops.append(Stop(
                name=generic_stop_name(index),
                description="Straight-line estimate, not a real waypoint. Look for a place to rest nearby.",
                distance_from_prev=format_km(spacing_km),
                coordinate=point,
                role=StopRole.REST,
            ))

        leftover_km = round(total_km - num_stops * interval_km, 1)
        stops.append(self._end_stop(destination, leftover_km))
        return stops
