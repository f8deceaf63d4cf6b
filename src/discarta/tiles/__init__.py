"""Tile grid and asynchronous tile production.

Key Components:
    - TileCoord / TileCell / RenderedTile: Tile value types
    - plan_tile_grid / tiles_intersecting: Pure grid enumeration
    - RenderingTileManager: Draws graticule tiles with Pillow
    - FileTileManager: Loads preprocessed tiles from disk
"""

from discarta.tiles.grid import grid_dimensions, plan_tile_grid, tiles_intersecting
from discarta.tiles.manager import (
    BaseTileManager,
    FileTileManager,
    RenderingTileManager,
    tile_path,
)
from discarta.tiles.renderer import GraticuleRenderer, GraticuleStyle, degree_spacing
from discarta.tiles.types import (
    RenderedTile,
    TileCell,
    TileCoord,
    TileManagerProtocol,
)

__all__ = [
    "BaseTileManager",
    "FileTileManager",
    "GraticuleRenderer",
    "GraticuleStyle",
    "RenderedTile",
    "RenderingTileManager",
    "TileCell",
    "TileCoord",
    "TileManagerProtocol",
    "degree_spacing",
    "grid_dimensions",
    "plan_tile_grid",
    "tile_path",
    "tiles_intersecting",
]
