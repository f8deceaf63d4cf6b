"""Graticule tile rendering with Pillow.

Draws the outline of the projection's world plus parallels and meridians
onto transparent tiles. Lines are computed in absolute map pixels and
shifted by the tile origin, so adjacent tiles line up seamlessly; Pillow
clips whatever falls outside the tile image.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

from discarta.config import settings
from discarta.geometry import GeoPoint, Point, Rect

if TYPE_CHECKING:
    from discarta.projections import Projection
    from discarta.view import Extent

TRANSPARENT = (0, 0, 0, 0)


def degree_spacing(zoom_level: int) -> float:
    """Degrees between graticule lines at ``zoom_level``.

    Coarse zoom levels get sparse lines so the map is not drowned in them.
    """
    if zoom_level <= 1:
        return 50
    if zoom_level <= 3:
        return 30
    if zoom_level <= 6:
        return 20
    return 10


def blank_tile(rect: Rect) -> Image.Image:
    """Create a fully transparent RGBA image the size of ``rect``."""
    return Image.new("RGBA", (round(rect.width), round(rect.height)), TRANSPARENT)


@dataclass(frozen=True)
class GraticuleStyle:
    """Visual styling of graticule tiles.

    Attributes:
        line_color: RGBA color of outline, parallels and meridians.
        line_width: Width of every line in pixels.
    """

    line_color: tuple[int, int, int, int] = field(
        default_factory=lambda: settings.TILE_LINE_COLOR
    )
    line_width: int = 1


class GraticuleRenderer:
    """Renders the world outline and lat/lon lines for one tile at a time."""

    def __init__(self, style: GraticuleStyle | None = None) -> None:
        self.style = style or GraticuleStyle()

    def render(self, projection: Projection, tile_rect: Rect, extent: Extent) -> Image.Image:
        """Render the tile covering ``tile_rect`` at the extent's zoom level.

        Args:
            projection: Projection used to place the lines.
            tile_rect: Tile placement rect in absolute map pixels.
            extent: View state; only the zoom level is used.

        Returns:
            Transparent RGBA image of the tile's size with the lines drawn.
        """
        image = blank_tile(tile_rect)
        draw = ImageDraw.Draw(image)
        origin_x, origin_y = tile_rect.x, tile_rect.y

        def to_tile(point: Point) -> tuple[float, float]:
            return (point.x - origin_x, point.y - origin_y)

        world = projection.world
        outline = projection.to_rect(world, extent)
        draw.rectangle(
            [
                to_tile(outline.top_left),
                to_tile(outline.bottom_right.offset(-1, -1)),
            ],
            outline=self.style.line_color,
            width=self.style.line_width,
        )

        spacing = degree_spacing(extent.zoom_level)

        for latitude in _mirrored_steps(world.north, spacing):
            start = projection.to_point(
                GeoPoint(latitude=latitude, longitude=world.west), extent
            )
            end = projection.to_point(
                GeoPoint(latitude=latitude, longitude=world.east), extent
            )
            draw.line(
                [to_tile(start), to_tile(end)],
                fill=self.style.line_color,
                width=self.style.line_width,
            )

        for longitude in _mirrored_steps(world.east, spacing):
            start = projection.to_point(
                GeoPoint(latitude=world.north, longitude=longitude), extent
            )
            end = projection.to_point(
                GeoPoint(latitude=world.south, longitude=longitude), extent
            )
            draw.line(
                [to_tile(start), to_tile(end)],
                fill=self.style.line_color,
                width=self.style.line_width,
            )

        return image


def _mirrored_steps(limit: float, spacing: float) -> list[float]:
    """Values 0, +/-spacing, +/-2*spacing, ... up to ``limit`` inclusive."""
    steps = [0.0]
    value = spacing
    while value <= limit:
        steps.extend((value, -value))
        value += spacing
    return steps
