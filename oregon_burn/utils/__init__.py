"""Utility functions for Oregon burn status processing."""

from oregon_burn.utils.geometry import (
    distance_point_to_polygon,
    distance_point_to_segment,
    haversine_m,
    point_in_polygon,
    point_in_ring,
)

__all__ = [
    "point_in_ring",
    "point_in_polygon",
    "haversine_m",
    "distance_point_to_segment",
    "distance_point_to_polygon",
]
