import pytest

from reststoprouting.config import Config
from reststoprouting.models.route_models import Coordinate, PathResult, ResolvedLocation
from reststoprouting.utils.geo_utils import distance_m


@pytest.fixture
def config(monkeypatch):
    for name in ('ORS_API_KEY', 'MAPBOX_TOKEN', 'PATH_BACKENDS', 'PREFERRED_REGION'):
        monkeypatch.delenv(name, raising=False)
    cfg = Config()
    cfg.nominatim_min_interval = 0
    return cfg


def make_location(lat, lng, name):
    return ResolvedLocation(coordinate=Coordinate(lat, lng), short_name=name, display_name=f"{name}, Taipei")


def meridian_path(num_points, step_deg=0.001, start_lat=25.0, lng=121.5):
    """Straight north-bound polyline; distance_m is the true summed length"""
    points = [Coordinate(start_lat + i * step_deg, lng) for i in range(num_points)]
    total = sum(distance_m(a, b) for a, b in zip(points, points[1:]))
    return PathResult(coordinates=points, distance_m=total, duration_s=total / 1.25, source='osrm')


@pytest.fixture
def taipei_station():
    return make_location(25.0478, 121.5170, 'Taipei Main Station')


@pytest.fixture
def taipei_101():
    return make_location(25.0340, 121.5645, 'Taipei 101')
