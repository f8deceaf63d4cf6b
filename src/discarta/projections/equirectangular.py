"""Equirectangular (plate carree) projection.

The projection would map 1:1 if the map were 360x180 pixels, so latitude
and longitude are simply scaled to the full map size at the current zoom.
The world is twice as wide as it is tall, hence the 512x256 tile.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from discarta.geometry import GeoArea, GeoPoint, Point, Size
from discarta.projections.base import Projection

if TYPE_CHECKING:
    from discarta.view.extent import Extent

_WKT = """PROJCS["WGS 84 / World Equidistant Cylindrical",
    GEOGCS["WGS 84",
        DATUM["WGS_1984",
            SPHEROID["WGS 84", 6378137, 298.257223563,
                AUTHORITY["EPSG", "7030"]],
            AUTHORITY["EPSG", "6326"]],
        PRIMEM["Greenwich", 0,
            AUTHORITY["EPSG", "8901"]],
        UNIT["degree", 0.01745329251994328,
            AUTHORITY["EPSG", "9122"]],
        AUTHORITY["EPSG", "4326"],
        AXIS["Latitude", NORTH],
        AXIS["Longitude", EAST]],
    UNIT["metre", 1,
        AUTHORITY["EPSG", "9001"]]]"""


class EquirectangularProjection(Projection):
    """Linear lat/lon to pixel projection with north up.

    Example:
        >>> projection = EquirectangularProjection()
        >>> projection.full_map_size_for(0).to_tuple()
        (512.0, 256.0)
    """

    key = "equirectangular"
    name = "WGS 84 / World Equidistant Cylindrical"
    wkt = _WKT
    world = GeoArea.from_bounds(north=90, east=180, south=-90, west=-180)
    tile_size = Size(width=512, height=256)

    def _scales(self, zoom_level: int) -> tuple[float, float]:
        """Pixels per degree (horizontal, vertical) at ``zoom_level``."""
        map_size = self.full_map_size_for(zoom_level)
        return (
            map_size.width / self.world.size.delta_longitude,
            map_size.height / self.world.size.delta_latitude,
        )

    def to_point(self, point: GeoPoint, extent: Extent) -> Point:
        horizontal_scale, vertical_scale = self._scales(extent.zoom_level)
        # Shift longitude so it is always positive, flip latitude so north is up
        return Point(
            x=(point.longitude + 180) * horizontal_scale,
            y=(90 - point.latitude) * vertical_scale,
        )

    def to_geo_point(self, point: Point, extent: Extent) -> GeoPoint:
        horizontal_scale, vertical_scale = self._scales(extent.zoom_level)
        return GeoPoint(
            latitude=90 - point.y / vertical_scale,
            longitude=point.x / horizontal_scale - 180,
        )
