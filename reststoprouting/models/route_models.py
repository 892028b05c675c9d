from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..exceptions import InvalidCoordinatesError


@dataclass(frozen=True)
class Coordinate:
    """WGS-84 point in degrees"""
    lat: float
    lng: float

    def __post_init__(self):
        if not (-90 <= self.lat <= 90 and -180 <= self.lng <= 180):
            raise InvalidCoordinatesError(f"{self.lat},{self.lng}", "coordinates out of range")

    def to_dict(self) -> Dict[str, float]:
        return {'lat': self.lat, 'lng': self.lng}


@dataclass(frozen=True)
class ResolvedLocation:
    """A geocoded endpoint"""
    coordinate: Coordinate
    short_name: str
    display_name: str


@dataclass
class PathResult:
    """Walking path returned by one of the routing backends"""
    coordinates: List[Coordinate]
    distance_m: float
    duration_s: float
    source: str = ''


class StopRole(str, Enum):
    START = 'start'
    REST = 'rest'
    END = 'end'


@dataclass
class Stop:
    """A stop along the route; distance_from_prev is already formatted for display"""
    name: str
    description: str
    distance_from_prev: str
    coordinate: Coordinate
    role: StopRole

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'distanceFromPrev': self.distance_from_prev,
            'coordinates': self.coordinate.to_dict(),
            'type': self.role.value,
        }


@dataclass
class RouteOption:
    """Complete route with its ordered stops"""
    id: str
    name: str
    description: str
    total_distance: str
    estimated_duration: str
    stops: List[Stop]
    path: Optional[List[Coordinate]] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        out = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'totalDistance': self.total_distance,
            'estimatedDuration': self.estimated_duration,
            'stops': [stop.to_dict() for stop in self.stops],
        }
        if self.path:
            out['path'] = [point.to_dict() for point in self.path]
        return out
