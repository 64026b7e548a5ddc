"""Geofence membership checks."""
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

EARTH_RADIUS_METERS = 6371000

Vertex = Tuple[float, float]  # (latitude, longitude)

@dataclass(frozen=True)
class CircleRegion:
    """Allowed area around a centre point."""
    center_latitude: float
    center_longitude: float
    radius_meters: float

@dataclass(frozen=True)
class GeofenceConfig:
    """Allowed regions, built once at startup and injected into the checker."""
    polygons: Tuple[Tuple[Vertex, ...], ...] = field(default_factory=tuple)
    circles: Tuple[CircleRegion, ...] = field(default_factory=tuple)

    @classmethod
    def from_settings(cls, polygons: Iterable = (), circles: Iterable = ()) -> 'GeofenceConfig':
        """Build from plain settings.

        ``polygons`` is a list of vertex lists, each vertex ``[lat, lon]``.
        ``circles`` is a list of ``{"latitude", "longitude", "radius_meters"}``
        mappings or ``[lat, lon, radius]`` triples.
        """
        parsed_polygons = []
        for polygon in polygons or ():
            vertices = _drop_repeated_vertices(
                (float(lat), float(lon)) for lat, lon in polygon
            )
            if len(set(vertices)) >= 3:
                parsed_polygons.append(tuple(vertices))

        parsed_circles = []
        for circle in circles or ():
            if isinstance(circle, dict):
                region = CircleRegion(
                    float(circle['latitude']),
                    float(circle['longitude']),
                    float(circle['radius_meters'])
                )
            else:
                lat, lon, radius = circle
                region = CircleRegion(float(lat), float(lon), float(radius))
            parsed_circles.append(region)

        return cls(polygons=tuple(parsed_polygons), circles=tuple(parsed_circles))

def _drop_repeated_vertices(vertices: Iterable[Vertex]) -> List[Vertex]:
    """Remove consecutive duplicates and a closing vertex equal to the first."""
    unique: List[Vertex] = []
    for vertex in vertices:
        if not unique or vertex != unique[-1]:
            unique.append(vertex)
    if len(unique) > 1 and unique[0] == unique[-1]:
        unique.pop()
    return unique

def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate great-circle distance between two GPS points in meters."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat/2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) *
         math.sin(delta_lon/2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))

    return EARTH_RADIUS_METERS * c

def is_point_in_polygon(latitude: float, longitude: float, polygon: Sequence[Vertex]) -> bool:
    """Even-odd ray casting along the longitude axis.

    Points exactly on an edge or vertex may land either way.
    """
    n = len(polygon)
    inside = False

    j = n - 1
    for i in range(n):
        lat_i, lon_i = polygon[i]
        lat_j, lon_j = polygon[j]

        if ((lon_i > longitude) != (lon_j > longitude)) and \
           (latitude < (lat_j - lat_i) * (longitude - lon_i) / (lon_j - lon_i) + lat_i):
            inside = not inside

        j = i

    return inside

class GeofenceChecker:
    """Answers whether a coordinate lies inside any configured region."""

    def __init__(self, config: GeofenceConfig):
        self.config = config

    def is_geofencing_enabled(self) -> bool:
        """False when no polygon has three distinct vertices and no circle exists."""
        return bool(self.config.polygons) or bool(self.config.circles)

    def is_within_geofence(self, latitude: float, longitude: float) -> bool:
        for polygon in self.config.polygons:
            if is_point_in_polygon(latitude, longitude, polygon):
                return True

        for circle in self.config.circles:
            distance = calculate_distance(
                latitude, longitude,
                circle.center_latitude, circle.center_longitude
            )
            if distance <= circle.radius_meters:
                return True

        return False
