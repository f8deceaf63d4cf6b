"""Cut a source raster into the tile pyramid read by FileTileManager.

The source is assumed to already be in the target projection: its pixels
are mapped linearly onto the projected rect of its map area. Nothing is
warped or reprojected; tiles are produced by cropping and resampling with
Pillow. Every cell of the full grid is written, and cells the raster does
not reach are left transparent.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from discarta.errors import RasterError
from discarta.geometry import Rect
from discarta.projections import Projection
from discarta.raster.info import RasterInfo
from discarta.raster.progress import ProgressReporter
from discarta.tiles import plan_tile_grid, tile_path
from discarta.tiles.renderer import blank_tile
from discarta.utils.logging import correlation_scope, get_logger
from discarta.view import Extent

logger = get_logger(__name__)


class RasterTiler:
    """Writes ``{projection}/{zoom}/{row}-{col}.png`` tiles under ``output_root``."""

    def __init__(
        self,
        output_root: Path | str,
        resample: Image.Resampling = Image.Resampling.LANCZOS,
    ) -> None:
        self.output_root = Path(output_root)
        self.resample = resample

    def project_and_tile(
        self,
        info: RasterInfo,
        zoom_level: int,
        progress: ProgressReporter | None = None,
        projection: Projection | None = None,
    ) -> list[Path]:
        """Write the full tile grid of ``info`` at ``zoom_level``.

        Args:
            info: Metadata of the source raster.
            zoom_level: Zoom level to generate.
            progress: Optional reporter advanced once per tile.
            projection: Target projection. Inferred from the raster's WKT
                when omitted.

        Returns:
            Paths of the written tiles, in grid order.

        Raises:
            RasterError: If the source cannot be read or a tile cannot be
                written.
        """
        projection = projection or info.projection()
        extent = Extent(area=info.map_area, zoom_level=zoom_level)
        source_rect = projection.to_rect(info.map_area, extent)
        cells = plan_tile_grid(projection, zoom_level)

        if progress is not None:
            progress.start(len(cells), f"Tiling {info.file_name} at zoom {zoom_level}")

        logger.info(
            "Tiling raster",
            path=str(info.path),
            projection=projection.key,
            zoom=zoom_level,
            tiles=len(cells),
        )

        written: list[Path] = []
        with (
            correlation_scope(zoom_level=zoom_level),
            self._open_source(info) as source,
        ):
            for cell in cells:
                tile = blank_tile(cell.rect)
                overlap = cell.rect.intersection(source_rect)
                if overlap is not None:
                    self._paste_overlap(source, source_rect, overlap, cell.rect, tile)

                path = tile_path(self.output_root, projection, cell)
                try:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    tile.save(path, format="PNG")
                except OSError as e:
                    raise RasterError(f"Cannot write tile {cell.coord}: {e}", path) from e

                logger.debug("Tile written", col=cell.coord.x, row=cell.coord.y)
                written.append(path)
                if progress is not None:
                    progress.advance()

        return written

    def _open_source(self, info: RasterInfo) -> Image.Image:
        try:
            with Image.open(info.path) as image:
                return image.convert("RGBA")
        except (OSError, UnidentifiedImageError) as e:
            raise RasterError(f"Cannot read raster: {e}", info.path) from e

    def _paste_overlap(
        self,
        source: Image.Image,
        source_rect: Rect,
        overlap: Rect,
        tile_rect: Rect,
        tile: Image.Image,
    ) -> None:
        """Resample the part of ``source`` under ``overlap`` into ``tile``."""
        scale_x = source.width / source_rect.width
        scale_y = source.height / source_rect.height
        box = (
            (overlap.x - source_rect.x) * scale_x,
            (overlap.y - source_rect.y) * scale_y,
            (overlap.right - source_rect.x) * scale_x,
            (overlap.bottom - source_rect.y) * scale_y,
        )
        size = (max(1, round(overlap.width)), max(1, round(overlap.height)))
        patch = source.resize(size, self.resample, box=box)
        tile.paste(patch, (round(overlap.x - tile_rect.x), round(overlap.y - tile_rect.y)))
