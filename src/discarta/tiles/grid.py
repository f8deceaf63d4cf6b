"""Pure tile grid enumeration.

The full map at a zoom level is cut into cells of the projection's tile
size, starting at the top-left corner. Cells are enumerated column by
column, top to bottom within each column.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from discarta.geometry import Rect
from discarta.tiles.types import TileCell, TileCoord

if TYPE_CHECKING:
    from discarta.projections import Projection
    from discarta.view import Extent


def grid_dimensions(projection: Projection, zoom_level: int) -> tuple[int, int]:
    """Return the number of (columns, rows) in the grid at ``zoom_level``."""
    map_size = projection.full_map_size_for(zoom_level)
    tile_size = projection.tile_size
    return (
        math.ceil(map_size.width / tile_size.width),
        math.ceil(map_size.height / tile_size.height),
    )


def plan_tile_grid(projection: Projection, zoom_level: int) -> list[TileCell]:
    """Enumerate every cell of the full map grid at ``zoom_level``.

    Cells tile the full map exactly: no gaps and no overlaps.

    Args:
        projection: Projection supplying tile and full map sizes.
        zoom_level: Zoom level of the grid.

    Returns:
        All cells, column-major.
    """
    columns, rows = grid_dimensions(projection, zoom_level)
    return [
        _cell(projection, zoom_level, column, row)
        for column in range(columns)
        for row in range(rows)
    ]


def tiles_intersecting(projection: Projection, extent: Extent) -> list[TileCell]:
    """Return the cells whose rect intersects the extent's visible rect.

    Cells that merely touch the visible rect along an edge are excluded
    (open intervals, unlike a closed-interval test that would also pull in
    the next row or column of a tile-aligned view).
    An extent with an empty area needs no tiles.
    """
    view_rect = projection.extent_rect(extent)
    if view_rect.is_empty:
        return []

    zoom_level = extent.zoom_level
    columns, rows = grid_dimensions(projection, zoom_level)
    tile_width = projection.tile_size.width
    tile_height = projection.tile_size.height

    # Only walk the index window under the view; the full grid is 4^z cells
    first_column = max(0, math.floor(view_rect.x / tile_width))
    last_column = min(columns, math.ceil(view_rect.right / tile_width))
    first_row = max(0, math.floor(view_rect.y / tile_height))
    last_row = min(rows, math.ceil(view_rect.bottom / tile_height))

    cells = (
        _cell(projection, zoom_level, column, row)
        for column in range(first_column, last_column)
        for row in range(first_row, last_row)
    )
    return [cell for cell in cells if cell.rect.intersects_with(view_rect)]


def _cell(projection: Projection, zoom_level: int, column: int, row: int) -> TileCell:
    tile_width = projection.tile_size.width
    tile_height = projection.tile_size.height
    return TileCell(
        coord=TileCoord(zoom_level=zoom_level, x=column, y=row),
        rect=Rect(
            x=column * tile_width,
            y=row * tile_height,
            width=tile_width,
            height=tile_height,
        ),
    )
