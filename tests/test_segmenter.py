import math
from unittest.mock import MagicMock

import pytest

from reststoprouting.models.route_models import Coordinate, PathResult, StopRole
from reststoprouting.segmenter import Segmenter, fallback_stop_count
from reststoprouting.utils.geo_utils import distance_km

from conftest import make_location, meridian_path


@pytest.fixture
def segmenter():
    return Segmenter(max_named_stops=10, max_fallback_stops=8, end_buffer_meters=500)


@pytest.fixture
def resolver():
    return MagicMock(return_value="Daan Forest Park")


def assert_role_invariants(stops):
    assert len(stops) >= 2
    assert stops[0].role == StopRole.START
    assert stops[-1].role == StopRole.END
    assert all(stop.role == StopRole.REST for stop in stops[1:-1])


def path_endpoints(path):
    first, last = path.coordinates[0], path.coordinates[-1]
    return make_location(first.lat, first.lng, "Origin"), make_location(last.lat, last.lng, "Destination")


# --- along a real path ---

@pytest.mark.parametrize("num_points,interval_km", [
    (50, 1.0),
    (50, 0.5),
    (10, 1.0),
    (5, 1.0),
    (200, 2.0),
    (120, 3.0),
])
def test_path_rest_stop_count(segmenter, resolver, num_points, interval_km):
    path = meridian_path(num_points)
    origin, destination = path_endpoints(path)

    stops = segmenter.segment(origin, destination, path, interval_km, resolver)

    length = path.distance_m
    expected = math.floor((length - 500) / (interval_km * 1000)) if length > 500 else 0
    assert len(stops) - 2 == expected
    assert_role_invariants(stops)


def test_path_stops_fire_on_first_point_past_each_boundary(segmenter, resolver):
    path = meridian_path(50)  # ~111 m per segment, ~5.45 km total
    origin, destination = path_endpoints(path)

    stops = segmenter.segment(origin, destination, path, 1.0, resolver)

    rest = stops[1:-1]
    # 9 segments of ~111.2 m is the first cumulative distance >= 1000 m
    assert [stop.coordinate for stop in rest] == [path.coordinates[i] for i in (9, 18, 27, 36)]
    assert all(stop.name == "Daan Forest Park" for stop in rest)
    assert rest[0].distance_from_prev == "1 km"


def test_path_end_stop_gets_remaining_distance(segmenter, resolver):
    path = meridian_path(50)
    origin, destination = path_endpoints(path)

    stops = segmenter.segment(origin, destination, path, 1.0, resolver)

    last_rest = path.coordinates[36]
    remaining_km = distance_km(last_rest, path.coordinates[-1])
    assert stops[-1].distance_from_prev == f"{round(remaining_km, 1):g} km"
    assert stops[0].distance_from_prev == "0 km"


def test_path_suppresses_stop_near_the_end(segmenter, resolver):
    # ~1.33 km: the 1 km boundary is within 500 m of the end
    path = meridian_path(13)
    origin, destination = path_endpoints(path)

    stops = segmenter.segment(origin, destination, path, 1.0, resolver)

    assert [stop.role for stop in stops] == [StopRole.START, StopRole.END]
    resolver.assert_not_called()
    assert stops[-1].distance_from_prev == "1.3 km"


def test_path_name_lookups_are_capped(segmenter, resolver):
    path = meridian_path(300)  # ~33 km
    origin, destination = path_endpoints(path)

    stops = segmenter.segment(origin, destination, path, 1.0, resolver)

    rest = stops[1:-1]
    assert len(rest) == 32
    assert resolver.call_count == 10
    assert all(stop.name == "Daan Forest Park" for stop in rest[:10])
    assert rest[10].name == "Rest point 11"
    assert rest[-1].name == "Rest point 32"


def test_two_point_zero_length_path(segmenter, resolver, taipei_station):
    point = taipei_station.coordinate
    path = PathResult(coordinates=[point, point], distance_m=0.0, duration_s=0.0, source='osrm')

    stops = segmenter.segment(taipei_station, taipei_station, path, 1.0, resolver)

    assert len(stops) == 2
    assert_role_invariants(stops)
    assert stops[-1].distance_from_prev == "0 km"


def test_reported_distance_shorter_than_walk_clamps_to_zero(segmenter, resolver):
    # sparse geometry: the only stop lands past the backend's reported length
    points = [Coordinate(25.0, 121.5), Coordinate(25.018, 121.5), Coordinate(25.0225, 121.5)]
    path = PathResult(coordinates=points, distance_m=1600.0, duration_s=1200.0, source='osrm')
    origin, destination = path_endpoints(path)

    stops = segmenter.segment(origin, destination, path, 1.0, resolver)

    assert len(stops) == 3
    assert stops[1].coordinate == points[1]
    assert stops[-1].distance_from_prev == "0 km"


def test_long_segment_gets_one_stop_per_boundary(segmenter, resolver):
    # one ~5 km leg followed by a few metres of detail
    points = [Coordinate(25.0, 121.5), Coordinate(25.045, 121.5), Coordinate(25.04501, 121.5),
              Coordinate(25.04502, 121.5), Coordinate(25.04503, 121.5)]
    length_m = sum(distance_km(a, b) for a, b in zip(points, points[1:])) * 1000
    path = PathResult(coordinates=points, distance_m=length_m, duration_s=3600.0, source='osrm')
    origin, destination = path_endpoints(path)

    stops = segmenter.segment(origin, destination, path, 1.0, resolver)

    rest = stops[1:-1]
    assert len(rest) == 4
    assert [stop.distance_from_prev for stop in rest] == ["1 km"] * 4
    lats = [stop.coordinate.lat for stop in rest]
    assert lats == sorted(set(lats))
    assert all(25.0 < lat < 25.045 for lat in lats)
    assert distance_km(points[0], rest[0].coordinate) == pytest.approx(1.0, rel=1e-3)
    assert stops[-1].distance_from_prev == "1 km"
    assert_role_invariants(stops)


def test_start_and_end_use_resolved_endpoints(segmenter, resolver, taipei_station, taipei_101):
    path = meridian_path(50)

    stops = segmenter.segment(taipei_station, taipei_101, path, 1.0, resolver)

    assert stops[0].name == "Taipei Main Station"
    assert stops[0].coordinate == taipei_station.coordinate
    assert stops[-1].name == "Taipei 101"
    assert stops[-1].coordinate == taipei_101.coordinate


# --- straight-line fallback ---

@pytest.mark.parametrize("total_km,interval_km,expected", [
    (3.6, 1.0, 3),
    (100.0, 0.1, 8),
    (5.0, 1.0, 5),
    (0.4, 1.0, 0),
    (0.0, 1.0, 0),
])
def test_fallback_stop_count(total_km, interval_km, expected):
    assert fallback_stop_count(total_km, interval_km, 8) == expected


def test_straight_line_three_point_six_km(segmenter, resolver):
    origin = make_location(25.0, 121.5, "A")
    destination = make_location(25.0 + 3.6 / 111.19492664, 121.5, "B")

    stops = segmenter.segment(origin, destination, None, 1.0, resolver)

    assert len(stops) == 5
    assert_role_invariants(stops)
    assert [stop.name for stop in stops[1:-1]] == ["Rest point 1", "Rest point 2", "Rest point 3"]
    assert all("Straight-line estimate" in stop.description for stop in stops[1:-1])
    # three points at quarters of 3.6 km
    assert all(stop.distance_from_prev == "0.9 km" for stop in stops[1:-1])
    assert stops[-1].distance_from_prev == "0.6 km"
    resolver.assert_not_called()


def test_straight_line_clamps_long_legs(segmenter, resolver):
    origin = make_location(24.0, 121.0, "A")
    destination = make_location(24.9, 121.0, "B")  # ~100 km

    stops = segmenter.segment(origin, destination, None, 0.1, resolver)

    assert len(stops) - 2 == 8
    assert_role_invariants(stops)
    # eight points split ~100 km into nine gaps, not 0.1 km apart
    spacing_km = distance_km(origin.coordinate, destination.coordinate) / 9
    assert all(stop.distance_from_prev == f"{round(spacing_km, 1):g} km" for stop in stops[1:-1])
    assert stops[1].distance_from_prev != "0.1 km"
    assert distance_km(origin.coordinate, stops[1].coordinate) == pytest.approx(spacing_km, rel=1e-3)


def test_straight_line_interior_points_are_ordered(segmenter, resolver):
    origin = make_location(25.0, 121.5, "A")
    destination = make_location(25.0454, 121.5, "B")  # ~5.05 km

    stops = segmenter.segment(origin, destination, None, 1.0, resolver)

    lats = [stop.coordinate.lat for stop in stops]
    assert len(stops) == 7
    assert lats == sorted(lats)
    assert stops[-1].distance_from_prev == "0 km"


def test_straight_line_same_point(segmenter, resolver, taipei_station):
    stops = segmenter.segment(taipei_station, taipei_station, None, 1.0, resolver)

    assert [stop.role for stop in stops] == [StopRole.START, StopRole.END]
    assert stops[-1].distance_from_prev == "0 km"
