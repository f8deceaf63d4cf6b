"""Geometry module for DisCarta.

This package provides the geographic value types (degrees) and the
screen-space primitives (map pixels) that projections convert between.

Key Components:
    - Geo: GeoPoint, GeoVector, GeoArea in WGS84 degrees
    - Primitives: Point, Size, Rect in map pixel coordinates
    - Precision: tolerance-aware comparisons shared by both

Example:
    from discarta.geometry import GeoArea, GeoPoint

    world = GeoArea.from_bounds(north=90, east=180, south=-90, west=-180)
    world.center == GeoPoint(latitude=0, longitude=0)  # True
"""

from discarta.geometry.geo import GeoArea, GeoPoint, GeoVector
from discarta.geometry.precision import DEGREE_PRECISION, VISUAL_PRECISION
from discarta.geometry.primitives import Point, Rect, Size

__all__ = [
    "DEGREE_PRECISION",
    "VISUAL_PRECISION",
    "GeoArea",
    "GeoPoint",
    "GeoVector",
    "Point",
    "Rect",
    "Size",
]
