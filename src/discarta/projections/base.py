"""Projection interface shared by all map projections.

A projection converts geographic coordinates into *absolute* map pixel
space at a zoom level: (0, 0) is the top-left corner of the whole world
map, not of the screen. Subtracting the scroll offset to get on-screen
coordinates is the viewport's job.

Projections are stateless. Every method is a pure function of its inputs
and the zoom level of the extent passed in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from discarta.geometry import GeoArea, GeoPoint, Point, Rect, Size

if TYPE_CHECKING:
    from discarta.view.extent import Extent


class Projection(ABC):
    """A map projection used to put geographic points onto a flat screen.

    Subclasses supply the point transforms; rect and area conversions are
    derived from them by transforming the north-west and south-east
    corners, so every projected area is axis aligned. Areas crossing the
    antimeridian are not handled.

    Attributes:
        key: Short identifier used in registries and tile paths.
        name: Human readable projection name.
        wkt: Well Known Text definition understood by GDAL and friends.
        world: The geographic area the projection can display.
        tile_size: Pixel size of one tile.
    """

    key: ClassVar[str]
    name: ClassVar[str]
    wkt: ClassVar[str]
    world: ClassVar[GeoArea]
    tile_size: ClassVar[Size]

    def full_map_size_for(self, zoom_level: int) -> Size:
        """Calculate the pixel size of the whole world at ``zoom_level``.

        Each zoom level doubles both dimensions. Negative zoom levels are
        not guarded.

        Args:
            zoom_level: Zoom level, 0 being the coarsest.

        Returns:
            The full map size in display units.
        """
        factor = 2.0**zoom_level
        return Size(
            width=self.tile_size.width * factor,
            height=self.tile_size.height * factor,
        )

    @abstractmethod
    def to_point(self, point: GeoPoint, extent: Extent) -> Point:
        """Convert a GeoPoint to an absolute map pixel Point.

        Points outside ``world`` are extrapolated, never clamped.
        """

    @abstractmethod
    def to_geo_point(self, point: Point, extent: Extent) -> GeoPoint:
        """Convert an absolute map pixel Point back to a GeoPoint."""

    def to_rect(self, area: GeoArea, extent: Extent) -> Rect:
        """Convert a GeoArea to its placement Rect.

        Args:
            area: The geographic area to convert.
            extent: The current view; only its zoom level is used.

        Returns:
            The rect spanning the projected corners, or ``Rect.EMPTY`` for
            an empty area.
        """
        if area.is_empty:
            return Rect.EMPTY
        return Rect.from_points(
            self.to_point(area.north_west, extent),
            self.to_point(area.south_east, extent),
        )

    def extent_rect(self, extent: Extent) -> Rect:
        """Return the rect covering the extent's own visible area."""
        return self.to_rect(extent.area, extent)

    def to_geo_area(self, rect: Rect, extent: Extent) -> GeoArea:
        """Convert a placement Rect to the GeoArea it covers."""
        return GeoArea.from_points(
            self.to_geo_point(rect.top_left, extent),
            self.to_geo_point(rect.bottom_right, extent),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
