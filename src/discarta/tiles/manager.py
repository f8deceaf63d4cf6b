"""Asynchronous tile production.

A tile manager turns an extent into a batch of asyncio tasks, one per
visible tile. Each task renders or loads its tile on the default thread
pool via ``asyncio.to_thread``; the whole batch is submitted at once with
no concurrency limit, no retry and no cache.

Failures surface as ``TileRenderError`` when the task is awaited. With
``TILE_FAILURE_POLICY=placeholder`` a failed tile is replaced by a
transparent placeholder and a warning is logged instead.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from PIL import Image, UnidentifiedImageError

from discarta.config import settings
from discarta.errors import TileRenderError
from discarta.tiles.grid import tiles_intersecting
from discarta.tiles.renderer import GraticuleRenderer, GraticuleStyle, blank_tile
from discarta.tiles.types import RenderedTile, TileCell
from discarta.utils.logging import get_logger

if TYPE_CHECKING:
    from discarta.projections import Projection
    from discarta.view import Extent

logger = get_logger(__name__)

FailurePolicy = Literal["raise", "placeholder"]


def tile_path(root: Path | str, projection: Projection, cell: TileCell) -> Path:
    """Location of a preprocessed tile: ``{root}/{projection}/{zoom}/{row}-{col}.png``."""
    coord = cell.coord
    return (
        Path(root)
        / projection.key
        / str(coord.zoom_level)
        / f"{coord.row}-{coord.column}.png"
    )


class BaseTileManager(ABC):
    """Schedules tile production and applies the failure policy.

    Subclasses only implement ``_produce_image``, which runs on a worker
    thread and returns the tile image or raises.
    """

    def __init__(self, failure_policy: FailurePolicy | None = None) -> None:
        self.failure_policy: FailurePolicy = (
            failure_policy or settings.TILE_FAILURE_POLICY
        )

    def get_tiles_for_area(
        self,
        projection: Projection,
        extent: Extent,
        generation: int = 0,
    ) -> list[asyncio.Task[RenderedTile]]:
        """Start producing every tile that intersects the extent's view rect.

        Must be called from a running event loop. The extent is snapshotted
        so later changes to it do not leak into tiles already in flight.

        Args:
            projection: Projection of the map.
            extent: Current view state.
            generation: Batch number stamped on every resulting tile.

        Returns:
            One task per visible tile, in grid order.
        """
        snapshot = extent.snapshot()
        cells = tiles_intersecting(projection, snapshot)

        logger.debug(
            "Scheduling tile batch",
            tiles=len(cells),
            zoom=snapshot.zoom_level,
            generation=generation,
        )

        return [
            asyncio.create_task(
                asyncio.to_thread(
                    self._produce_tile, projection, cell, snapshot, generation
                ),
                name=f"tile-{generation}-{cell.coord}",
            )
            for cell in cells
        ]

    def _produce_tile(
        self,
        projection: Projection,
        cell: TileCell,
        extent: Extent,
        generation: int,
    ) -> RenderedTile:
        placeholder = False
        try:
            image = self._produce_image(projection, cell, extent)
        except Exception as e:
            if self.failure_policy != "placeholder":
                if isinstance(e, TileRenderError):
                    raise
                raise TileRenderError(str(e), coord=cell.coord) from e
            logger.warning(
                "Tile failed, using placeholder", tile=str(cell.coord), error=str(e)
            )
            image = blank_tile(cell.rect)
            placeholder = True

        return RenderedTile(
            coord=cell.coord,
            rect=cell.rect,
            area=projection.to_geo_area(cell.rect, extent),
            image=image,
            generation=generation,
            placeholder=placeholder,
        )

    @abstractmethod
    def _produce_image(
        self, projection: Projection, cell: TileCell, extent: Extent
    ) -> Image.Image:
        """Render or load the image for one cell. Runs on a worker thread."""


class RenderingTileManager(BaseTileManager):
    """Draws graticule tiles on the fly."""

    def __init__(
        self,
        style: GraticuleStyle | None = None,
        failure_policy: FailurePolicy | None = None,
    ) -> None:
        super().__init__(failure_policy)
        self._renderer = GraticuleRenderer(style)

    def _produce_image(
        self, projection: Projection, cell: TileCell, extent: Extent
    ) -> Image.Image:
        return self._renderer.render(projection, cell.rect, extent)


class FileTileManager(BaseTileManager):
    """Loads tiles written by the preprocessor from a directory tree.

    Example:
        >>> manager = FileTileManager("/data/tiles")
        >>> manager.root
        PosixPath('/data/tiles')
    """

    def __init__(
        self,
        root: Path | str | None = None,
        failure_policy: FailurePolicy | None = None,
    ) -> None:
        super().__init__(failure_policy)
        self.root = Path(root) if root is not None else Path(settings.require_tile_root())

    def _produce_image(
        self, projection: Projection, cell: TileCell, extent: Extent
    ) -> Image.Image:
        path = tile_path(self.root, projection, cell)
        if not path.is_file():
            raise TileRenderError("Tile file not found", coord=cell.coord, path=path)

        try:
            with Image.open(path) as source:
                image = source.convert("RGBA")
        except (OSError, UnidentifiedImageError) as e:
            raise TileRenderError(
                f"Cannot read tile: {e}", coord=cell.coord, path=path
            ) from e

        expected = (round(cell.rect.width), round(cell.rect.height))
        if image.size != expected:
            image = image.resize(expected, Image.Resampling.LANCZOS)
        return image
