"""Types shared by the tile grid, tile managers and the viewport."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from PIL import Image

from discarta.geometry import GeoArea, Rect

if TYPE_CHECKING:
    from discarta.projections import Projection
    from discarta.view import Extent


@dataclass(frozen=True, slots=True)
class TileCoord:
    """Position of a tile in the grid of one zoom level.

    Attributes:
        zoom_level: Zoom level the grid belongs to.
        x: Column index, 0 at the western edge.
        y: Row index, 0 at the northern edge.
    """

    zoom_level: int
    x: int
    y: int

    @property
    def row(self) -> int:
        return self.y

    @property
    def column(self) -> int:
        return self.x

    def __str__(self) -> str:
        return f"{self.zoom_level}/{self.y}-{self.x}"


@dataclass(frozen=True, slots=True)
class TileCell:
    """A grid cell: its coordinate plus its rect in absolute map pixels."""

    coord: TileCoord
    rect: Rect


@dataclass(frozen=True)
class RenderedTile:
    """A finished tile, ready to be placed on the map.

    Tiles are produced once per request and never cached. The record is
    frozen but ``image`` is a plain Pillow image shared with every consumer
    of the tile: composite it or draw on ``image.copy()``, never on the
    image itself.

    Attributes:
        coord: Grid coordinate of the tile.
        rect: Placement rect in absolute map pixels.
        area: Geographic area the tile covers.
        image: RGBA image of exactly the projection's tile size.
        generation: Batch the tile was requested in.
        placeholder: True when the image stands in for a failed tile.
    """

    coord: TileCoord
    rect: Rect
    area: GeoArea
    image: Image.Image
    generation: int = 0
    placeholder: bool = False


class TileManagerProtocol(Protocol):
    """Produces the tiles needed to cover an extent."""

    def get_tiles_for_area(
        self,
        projection: Projection,
        extent: Extent,
        generation: int = 0,
    ) -> list[asyncio.Task[RenderedTile]]:
        """Schedule one task per visible tile. Must be called from a running loop."""
        ...
