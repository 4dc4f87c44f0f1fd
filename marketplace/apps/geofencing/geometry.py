"""
Geofence evaluation over GeoJSON polygons.

Rings are lists of ``[lng, lat]`` pairs; ring 0 is the outer boundary and
any further rings are holes. Everything here is pure and side-effect free.
"""

import math
from typing import NamedTuple

from apps.core.exceptions import InvalidGeometry

EARTH_RADIUS_KM = 6371.0
MIN_RING_POINTS = 4


class GeoPoint(NamedTuple):
    latitude: float
    longitude: float


def _ring_contains(point, ring):
    # Even-odd rule: count crossings of a ray cast towards +longitude
    x, y = point.longitude, point.latitude
    inside = False
    count = len(ring)
    j = count - 1
    for i in range(count):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def point_in_polygon(point: GeoPoint, polygon: dict) -> bool:
    """True when ``point`` is inside the outer ring and outside every hole."""
    rings = polygon.get("coordinates") or []
    if not rings:
        return False

    outer, holes = rings[0], rings[1:]
    if not _ring_contains(point, outer):
        return False
    return not any(_ring_contains(point, hole) for hole in holes)


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance using the haversine formula."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    delta_lat = math.radians(b.latitude - a.latitude)
    delta_lng = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, h)))


def within_radius(point: GeoPoint, center: GeoPoint, radius_km) -> bool:
    return distance_km(point, center) <= float(radius_km)


def representative_point(polygon: dict) -> GeoPoint:
    """Mean of the outer ring's distinct vertices."""
    outer = polygon["coordinates"][0]
    vertices = outer[:-1] if len(outer) > 1 and outer[0] == outer[-1] else outer
    lng = sum(v[0] for v in vertices) / len(vertices)
    lat = sum(v[1] for v in vertices) / len(vertices)
    return GeoPoint(latitude=lat, longitude=lng)


def nearest_service_area(point: GeoPoint, areas):
    """
    Return ``(area, distance_km)`` for the closest ACTIVE area, or ``None``.

    Areas are measured to their stored center when present, otherwise to
    the representative point of their boundary.
    """
    best = None
    for area in areas:
        if area.status != "ACTIVE":
            continue
        if area.center_latitude is not None and area.center_longitude is not None:
            center = GeoPoint(float(area.center_latitude), float(area.center_longitude))
        else:
            center = representative_point(area.boundary)
        distance = distance_km(point, center)
        if best is None or distance < best[1]:
            best = (area, distance)

    if best is None:
        return None
    return best[0], round(best[1], 2)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_boundary(boundary):
    """Raise ``InvalidGeometry`` listing every problem with ``boundary``."""
    if not isinstance(boundary, dict) or boundary.get("type") != "Polygon":
        raise InvalidGeometry(["Invalid GeoJSON: must be a Polygon type"])

    rings = boundary.get("coordinates")
    if not isinstance(rings, list) or not rings:
        raise InvalidGeometry(["Coordinates must be a non-empty array"])

    errors = []
    for ring_index, ring in enumerate(rings):
        if not isinstance(ring, list) or len(ring) < MIN_RING_POINTS:
            count = len(ring) if isinstance(ring, list) else 0
            errors.append(
                f"Ring {ring_index} must have at least {MIN_RING_POINTS} points "
                f"(3 unique plus closure), got {count}"
            )
            continue

        ring_ok = True
        for coord_index, coord in enumerate(ring):
            if not isinstance(coord, (list, tuple)) or len(coord) != 2 or not all(
                _is_number(c) for c in coord
            ):
                errors.append(f"Ring {ring_index}, coordinate {coord_index} must be [lng, lat] pair")
                ring_ok = False
                continue
            lng, lat = coord
            if not -180 <= lng <= 180:
                errors.append(
                    f"Ring {ring_index}, coordinate {coord_index}: "
                    f"Longitude must be between -180 and 180, got {lng}"
                )
                ring_ok = False
            if not -90 <= lat <= 90:
                errors.append(
                    f"Ring {ring_index}, coordinate {coord_index}: "
                    f"Latitude must be between -90 and 90, got {lat}"
                )
                ring_ok = False

        if ring_ok and list(ring[0]) != list(ring[-1]):
            errors.append(f"Ring {ring_index} is not closed: first point != last point")

    if errors:
        raise InvalidGeometry(errors)
