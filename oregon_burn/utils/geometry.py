"""Geometry utilities for fire district geofencing.

This module provides point-in-polygon and point-to-boundary distance
primitives over rings of WGS84 coordinates. Containment uses even-odd ray
casting in longitude/latitude space; distances are great-circle metres.
"""

import math
from typing import Iterator, Sequence, Tuple

from oregon_burn.models.district import Coordinate, DistrictPolygon

EARTH_RADIUS_M = 6_371_000.0  # mean Earth radius


def _edges(ring: Sequence[Coordinate]) -> Iterator[Tuple[Coordinate, Coordinate]]:
    """Yield consecutive vertex pairs, wrapping the last vertex to the first."""
    count = len(ring)
    for i in range(count):
        yield ring[i], ring[(i + 1) % count]


def point_in_ring(point: Coordinate, ring: Sequence[Coordinate]) -> bool:
    """Check if a point lies inside a ring using the even-odd rule.

    A horizontal ray is cast from the point at its latitude; each edge
    crossing to the east of the point toggles containment. Points exactly on
    an edge follow the ray-casting degeneracies and are not special-cased.

    Args:
        point: Coordinate to test
        ring: Three or more coordinates describing a closed loop. The first
            vertex does not need to be repeated at the end.

    Returns:
        True if the point is inside the ring, False otherwise.

    Examples:
        >>> square = [
        ...     Coordinate(latitude=44.0, longitude=-79.0),
        ...     Coordinate(latitude=44.0, longitude=-78.0),
        ...     Coordinate(latitude=45.0, longitude=-78.0),
        ...     Coordinate(latitude=45.0, longitude=-79.0),
        ... ]
        >>> point_in_ring(Coordinate(latitude=44.5, longitude=-78.5), square)
        True
        >>> point_in_ring(Coordinate(latitude=43.0, longitude=-78.5), square)
        False
    """
    if len(ring) < 3:
        return False

    x = point.longitude
    y = point.latitude
    inside = False

    for p1, p2 in _edges(ring):
        x1, y1 = p1.longitude, p1.latitude
        x2, y2 = p2.longitude, p2.latitude

        if (y1 <= y < y2) or (y2 <= y < y1):
            # Edge spans the scanline, so y1 != y2 here
            crossing_x = (x2 - x1) * (y - y1) / (y2 - y1) + x1
            if x < crossing_x:
                inside = not inside

    return inside


def point_in_polygon(point: Coordinate, polygon: DistrictPolygon) -> bool:
    """Check if a point lies inside any ring of a district polygon.

    Rings are independent containment tests: an inner ring (hole) does not
    exclude points, it counts as another area the point can fall in.
    """
    return any(point_in_ring(point, ring) for ring in polygon.rings)


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2.0) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    )
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def distance_point_to_segment(
    point: Coordinate, a: Coordinate, b: Coordinate
) -> float:
    """Distance in meters from a point to the segment a-b.

    The point is projected onto the line through a and b in lon/lat space and
    the projection parameter is clamped to [0, 1], so the nearest point stays
    on the segment. The returned distance is great-circle.
    """
    dx = b.longitude - a.longitude
    dy = b.latitude - a.latitude
    seg_len_sq = dx * dx + dy * dy

    if seg_len_sq == 0:
        t = 0.0
    else:
        t = (
            (point.longitude - a.longitude) * dx + (point.latitude - a.latitude) * dy
        ) / seg_len_sq
        t = max(0.0, min(1.0, t))

    nearest_lat = a.latitude + t * dy
    nearest_lon = a.longitude + t * dx

    return haversine_m(point.latitude, point.longitude, nearest_lat, nearest_lon)


def distance_point_to_polygon(point: Coordinate, polygon: DistrictPolygon) -> float:
    """Minimum distance in meters from a point to any edge of any ring.

    Returns:
        Distance in meters, or ``math.inf`` if the polygon has no edges.
    """
    min_distance = math.inf

    for ring in polygon.rings:
        if len(ring) < 2:
            continue
        for a, b in _edges(ring):
            distance = distance_point_to_segment(point, a, b)
            if distance < min_distance:
                min_distance = distance

    return min_distance
