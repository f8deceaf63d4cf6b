"""Viewport control and element placement.

Key Components:
    - MapViewport: Scroll offsets, anchored zoom and tile passes
    - MapLayer / GeoTag: Geo-tagged elements and their placement
    - HotSpot: Anchor point of markers placed at a location
"""

from discarta.viewport.hotspot import HotSpot, HotSpotUnit
from discarta.viewport.layer import GeoTag, MapElement, MapLayer
from discarta.viewport.map import Arrangement, MapViewport

__all__ = [
    "Arrangement",
    "GeoTag",
    "HotSpot",
    "HotSpotUnit",
    "MapElement",
    "MapLayer",
    "MapViewport",
]
