"""Runner functions behind the DisCarta CLI commands.

The command functions in ``main`` only parse options and format output;
the work happens here so it can be tested without a terminal.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import Image

from discarta.geometry import GeoArea, GeoPoint, Size
from discarta.projections import Projection
from discarta.raster import ImageRasterProvider, ProgressReporter, RasterTiler
from discarta.raster.progress import ProgressObserver
from discarta.tiles import (
    FileTileManager,
    RenderingTileManager,
    TileCell,
    tiles_intersecting,
)
from discarta.tiles.types import TileManagerProtocol
from discarta.utils.logging import get_logger
from discarta.viewport import MapViewport

logger = get_logger(__name__)


@dataclass(frozen=True)
class PreprocessResult:
    """Outcome of tiling one raster over a range of zoom levels."""

    raster: Path
    projection: str
    zoom_levels: list[int]
    tiles_written: int
    output_root: Path


def build_viewport(
    projection: Projection,
    screen_size: Size,
    zoom_level: int | None = None,
    center: GeoPoint | None = None,
    tile_manager: TileManagerProtocol | None = None,
) -> MapViewport:
    """Lay out a viewport, then optionally zoom and recenter it.

    Call this outside a running event loop so no background tile passes
    are started.
    """
    viewport = MapViewport(projection, tile_manager)
    viewport.load(screen_size)
    if zoom_level is not None:
        viewport.zoom_to(zoom_level)
    if center is not None:
        viewport.center_on(center)
    return viewport


def describe_visible_tiles(viewport: MapViewport) -> list[dict[str, Any]]:
    """List the tiles a viewport needs, as plain dictionaries."""
    projection = viewport.projection
    extent = viewport.extent
    return [
        _describe_cell(cell, projection.to_geo_area(cell.rect, extent))
        for cell in tiles_intersecting(projection, extent)
    ]


def render_snapshot(
    viewport: MapViewport,
    output: Path,
) -> int:
    """Render the viewport's tiles and compose them into one PNG.

    Returns:
        Number of tiles composed into the snapshot.

    Raises:
        TileRenderError: If a tile fails and the failure policy is "raise".
    """
    asyncio.run(viewport.refresh_tiles())
    arrangement = viewport.arrange()

    width, height = viewport.viewport_size.to_tuple()
    canvas = Image.new("RGBA", (round(width), round(height)), (255, 255, 255, 255))
    for tile, rect in arrangement.tiles:
        canvas.paste(tile.image, (round(rect.x), round(rect.y)), tile.image)

    output.parent.mkdir(parents=True, exist_ok=True)
    canvas.save(output, format="PNG")
    logger.info("Snapshot written", path=str(output), tiles=len(arrangement.tiles))
    return len(arrangement.tiles)


def create_tile_manager(tile_root: Path | None) -> TileManagerProtocol:
    """Read preprocessed tiles from ``tile_root`` if given, else draw graticules."""
    if tile_root is not None:
        return FileTileManager(tile_root)
    return RenderingTileManager()


def preprocess_raster(  # noqa: PLR0913
    raster: Path,
    map_area: GeoArea,
    output_root: Path,
    projection: Projection | None = None,
    min_zoom: int = 0,
    max_zoom: int | None = None,
    on_progress: ProgressObserver | None = None,
) -> PreprocessResult:
    """Tile ``raster`` for every zoom level in ``[min_zoom, max_zoom]``.

    Args:
        raster: Source image, already in the target projection.
        map_area: Geographic area the image covers.
        output_root: Directory the tile tree is written under.
        projection: Target projection. Inferred from the raster otherwise.
        min_zoom: First zoom level to generate.
        max_zoom: Last zoom level to generate. Defaults to the raster's
            native maximum.
        on_progress: Called with every progress update.

    Returns:
        Summary of the work done.
    """
    provider = ImageRasterProvider(
        map_area, projection.wkt if projection is not None else None
    )
    info = asyncio.run(provider.load(raster))
    projection = projection or info.projection()

    last_zoom = info.max_zoom_level(projection) if max_zoom is None else max_zoom
    zoom_levels = list(range(min_zoom, max(min_zoom, last_zoom) + 1))

    reporter = ProgressReporter()
    if on_progress is not None:
        reporter.subscribe(on_progress)

    tiler = RasterTiler(output_root)
    written = 0
    for zoom_level in zoom_levels:
        written += len(tiler.project_and_tile(info, zoom_level, reporter, projection))
    reporter.finish()

    return PreprocessResult(
        raster=raster,
        projection=projection.key,
        zoom_levels=zoom_levels,
        tiles_written=written,
        output_root=output_root,
    )


def _describe_cell(cell: TileCell, area: GeoArea) -> dict[str, Any]:
    return {
        "zoom": cell.coord.zoom_level,
        "x": cell.coord.x,
        "y": cell.coord.y,
        "rect": list(cell.rect.to_tuple()),
        "area": {
            "north": area.north,
            "east": area.east,
            "south": area.south,
            "west": area.west,
        },
    }
