"""Pseudo-Mercator (Web Mercator, EPSG:3857) projection.

Uses the spherical Mercator formulas scaled so the whole world is one
256x256 tile at zoom 0:

    k = (tile_width / 2) / pi * 2^zoom
    x = k * (lon + pi)
    y = k * (pi - ln(tan(pi/4 + lat/2)))

The projection is only defined up to +/-85.0511 degrees latitude, where
the map becomes square. Latitudes beyond it are extrapolated; the poles
themselves have no finite y.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from discarta.geometry import GeoArea, GeoPoint, Point, Size
from discarta.geometry.precision import to_degrees, to_radians
from discarta.projections.base import Projection

if TYPE_CHECKING:
    from discarta.view.extent import Extent

MERCATOR_LATITUDE_BOUND = 85.051129

_WKT = """PROJCS["WGS 84 / Pseudo - Mercator",
    GEOGCS["WGS 84",
        DATUM["WGS_1984",
            SPHEROID["WGS 84", 6378137, 298.257223563,
                AUTHORITY["EPSG", "7030"]],
            AUTHORITY["EPSG", "6326"]],
        PRIMEM["Greenwich", 0,
            AUTHORITY["EPSG", "8901"]],
        UNIT["degree", 0.0174532925199433,
            AUTHORITY["EPSG", "9122"]],
        AUTHORITY["EPSG", "4326"]],
    PROJECTION["Mercator_1SP"],
    PARAMETER["central_meridian", 0],
    PARAMETER["scale_factor", 1],
    PARAMETER["false_easting", 0],
    PARAMETER["false_northing", 0],
    UNIT["metre", 1,
        AUTHORITY["EPSG", "9001"]],
    AXIS["X", EAST],
    AXIS["Y", NORTH],
    EXTENSION["PROJ4", "+proj=merc +a=6378137 +b=6378137 +lat_ts=0.0 +lon_0=0.0 +x_0=0.0 +y_0=0 +k=1.0 +units=m +nadgrids=@null +wktext  +no_defs"],
    AUTHORITY["EPSG", "3857"]]"""


def _log_tan(latitude: float) -> float:
    """ln(tan(pi/4 + phi/2)) for ``latitude`` in degrees, never raising.

    Where the logarithm is undefined the IEEE 754 result is returned: -inf
    at the south pole (y = +inf) and NaN for latitudes beyond either pole.
    """
    if latitude == -90:
        return -math.inf
    tangent = math.tan(math.pi / 4 + to_radians(latitude) / 2)
    if tangent > 0:
        return math.log(tangent)
    if tangent == 0:
        return -math.inf
    return math.nan


class PseudoMercatorProjection(Projection):
    """Web Mercator projection as used by slippy map tile servers."""

    key = "pseudo-mercator"
    name = "WGS 84 / Pseudo - Mercator"
    wkt = _WKT
    world = GeoArea.from_bounds(
        north=MERCATOR_LATITUDE_BOUND,
        east=180,
        south=-MERCATOR_LATITUDE_BOUND,
        west=-180,
    )
    tile_size = Size(width=256, height=256)

    def _zoom_factor(self, zoom_level: int) -> float:
        return (self.tile_size.width / 2) / math.pi * 2.0**zoom_level

    def to_point(self, point: GeoPoint, extent: Extent) -> Point:
        k = self._zoom_factor(extent.zoom_level)
        return Point(
            x=k * (to_radians(point.longitude) + math.pi),
            y=k * (math.pi - _log_tan(point.latitude)),
        )

    def to_geo_point(self, point: Point, extent: Extent) -> GeoPoint:
        k = self._zoom_factor(extent.zoom_level)
        return GeoPoint(
            latitude=to_degrees(
                2 * (math.atan(math.exp(math.pi - point.y / k)) - math.pi / 4)
            ),
            longitude=to_degrees(point.x / k - math.pi),
        )
