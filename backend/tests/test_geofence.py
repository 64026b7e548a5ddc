"""Geofence membership tests."""
import pytest

from config.base import DEFAULT_GEOFENCE_POLYGON
from qrattend.services.geofence_service import (
    CircleRegion, GeofenceChecker, GeofenceConfig, calculate_distance, is_point_in_polygon
)

SQUARE = [[0.0, 0.0], [0.0, 1.0], [1.0, 1.0], [1.0, 0.0]]

def checker(polygons=(), circles=()):
    return GeofenceChecker(GeofenceConfig.from_settings(polygons, circles))

def test_point_inside_square():
    assert checker([SQUARE]).is_within_geofence(0.5, 0.5)

@pytest.mark.parametrize('lat,lon', [(1.5, 0.5), (-0.5, 0.5), (0.5, 1.5), (0.5, -0.5), (2, 2)])
def test_points_outside_square(lat, lon):
    assert not checker([SQUARE]).is_within_geofence(lat, lon)

def test_concave_polygon_notch_is_outside():
    # U shape: the notch between the arms is not part of the fence
    u_shape = [(0, 0), (0, 3), (3, 3), (3, 2), (1, 2), (1, 1), (3, 1), (3, 0)]
    assert is_point_in_polygon(0.5, 1.5, u_shape)
    assert is_point_in_polygon(2, 2.5, u_shape)
    assert not is_point_in_polygon(2, 1.5, u_shape)

def test_campus_polygon_contains_its_interior():
    fence = checker([DEFAULT_GEOFENCE_POLYGON])
    assert fence.is_geofencing_enabled()
    assert fence.is_within_geofence(14.5731, 121.1323)
    assert not fence.is_within_geofence(14.5800, 121.1400)

def test_haversine_distance_one_degree_of_latitude():
    assert calculate_distance(0, 0, 1, 0) == pytest.approx(111195, rel=1e-3)
    assert calculate_distance(14.5731, 121.1323, 14.5731, 121.1323) == 0

def test_circle_membership():
    fence = checker(circles=[{'latitude': 10.0, 'longitude': 20.0, 'radius_meters': 100}])
    assert fence.is_geofencing_enabled()
    assert fence.is_within_geofence(10.0005, 20.0)   # about 56 m north
    assert not fence.is_within_geofence(10.002, 20.0)  # about 222 m north

def test_circle_from_triple():
    config = GeofenceConfig.from_settings([], [[1.0, 2.0, 50]])
    assert config.circles == (CircleRegion(1.0, 2.0, 50.0),)

def test_inside_any_region_counts():
    fence = checker([SQUARE], [{'latitude': 50.0, 'longitude': 50.0, 'radius_meters': 10}])
    assert fence.is_within_geofence(0.5, 0.5)
    assert fence.is_within_geofence(50.0, 50.0)
    assert not fence.is_within_geofence(25.0, 25.0)

def test_repeated_vertices_are_collapsed():
    config = GeofenceConfig.from_settings([[[0, 0], [0, 0], [0, 1], [1, 1], [1, 1], [1, 0], [0, 0]]])
    assert config.polygons == (((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)),)

@pytest.mark.parametrize('polygon', [
    [],
    [[0, 0], [1, 1]],
    [[0, 0], [0, 0], [1, 1], [1, 1]],
    [[0, 0], [1, 1], [0, 0], [1, 1]],
    [[0, 0], [1, 1], [0, 0]],
])
def test_degenerate_polygon_disables_geofencing(polygon):
    fence = checker([polygon])
    assert not fence.is_geofencing_enabled()
    assert not fence.is_within_geofence(0.5, 0.5)

def test_no_regions_disables_geofencing():
    assert not checker().is_geofencing_enabled()
