"""Raster metadata for the tile preprocessor.

RasterInfo describes a source image and where it lies on the globe. It is
produced by a RasterMetadataProvider; the bundled provider reads plain
images with Pillow and takes the geographic bounds from the caller, since
Pillow knows nothing about georeferencing.
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, Self

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, Field

from discarta.errors import RasterError
from discarta.geometry import GeoArea, GeoPoint, Size
from discarta.projections import EquirectangularProjection, Projection, projection_for_wkt
from discarta.utils.logging import get_logger

logger = get_logger(__name__)

_GEO_TRANSFORM_LENGTH = 6


class RasterInfo(BaseModel, frozen=True):
    """Metadata of a source raster.

    Attributes:
        path: Location of the raster file.
        image_size: Pixel dimensions of the raster.
        band_count: Number of color bands.
        projection_wkt: WKT of the raster's coordinate system.
        map_area: Geographic area the raster covers.
    """

    path: Path
    image_size: Size
    band_count: int = Field(..., ge=0, description="Number of color bands")
    projection_wkt: str = Field(default="", description="Coordinate system WKT")
    map_area: GeoArea

    @classmethod
    def from_geo_transform(
        cls,
        path: Path | str,
        image_size: Size,
        band_count: int,
        geo_transform: Sequence[float],
        projection_wkt: str = "",
    ) -> Self:
        """Build RasterInfo from a GDAL style affine geo transform.

        Only the origin (``[0]`` longitude, ``[3]`` latitude) and pixel size
        (``[1]`` degrees per column, ``[5]`` degrees per row, usually
        negative) terms are used; rotation terms are ignored.

        Raises:
            ValueError: If the transform does not have six elements.
        """
        if len(geo_transform) != _GEO_TRANSFORM_LENGTH:
            raise ValueError(
                f"geo_transform must have {_GEO_TRANSFORM_LENGTH} elements, "
                f"got {len(geo_transform)}"
            )

        top_left = GeoPoint(latitude=geo_transform[3], longitude=geo_transform[0])
        bottom_right = GeoPoint(
            latitude=top_left.latitude + geo_transform[5] * image_size.height,
            longitude=top_left.longitude + geo_transform[1] * image_size.width,
        )
        return cls(
            path=Path(path),
            image_size=image_size,
            band_count=band_count,
            projection_wkt=projection_wkt,
            map_area=GeoArea.from_points(top_left, bottom_right),
        )

    @property
    def file_name(self) -> str:
        return self.path.name

    @property
    def directory(self) -> Path:
        return self.path.parent

    def projection(self) -> Projection:
        """Projection the raster should be displayed in, inferred from its WKT."""
        return projection_for_wkt(self.projection_wkt)

    def tiles_across(self, projection: Projection | None = None) -> float:
        """How many tiles wide the raster is at its native resolution."""
        projection = projection or self.projection()
        return self.image_size.width / projection.tile_size.width

    def tiles_down(self, projection: Projection | None = None) -> float:
        """How many tiles tall the raster is at its native resolution."""
        projection = projection or self.projection()
        return self.image_size.height / projection.tile_size.height

    def max_zoom_level(self, projection: Projection | None = None) -> int:
        """Deepest zoom level worth generating tiles for.

        The zoom level where one tile column maps to roughly one tile of
        source pixels: ``round(log2(tiles_across))``, never below 0.
        """
        tiles_across = self.tiles_across(projection)
        if tiles_across <= 1:
            return 0
        return round(math.log2(tiles_across))


class RasterMetadataProvider(Protocol):
    """Reads RasterInfo for a source file."""

    async def load(self, path: Path | str) -> RasterInfo:
        """Read the metadata of the raster at ``path``.

        Raises:
            RasterError: If the raster cannot be read.
        """
        ...


class ImageRasterProvider:
    """Pillow-backed metadata provider for plain, non-georeferenced images.

    Example:
        >>> provider = ImageRasterProvider(
        ...     GeoArea.from_bounds(north=90, east=180, south=-90, west=-180)
        ... )
        >>> info = await provider.load("world.png")
    """

    def __init__(self, map_area: GeoArea, projection_wkt: str | None = None) -> None:
        """Initialize the provider.

        Args:
            map_area: Geographic area every loaded image covers.
            projection_wkt: Coordinate system of the images. Defaults to the
                equirectangular WKT.
        """
        self.map_area = map_area
        self.projection_wkt = (
            EquirectangularProjection.wkt if projection_wkt is None else projection_wkt
        )

    async def load(self, path: Path | str) -> RasterInfo:
        return await asyncio.to_thread(self._read, Path(path))

    def _read(self, path: Path) -> RasterInfo:
        if not path.is_file():
            raise RasterError("Raster not found", path)

        try:
            with Image.open(path) as image:
                width, height = image.size
                band_count = len(image.getbands())
        except (OSError, UnidentifiedImageError) as e:
            raise RasterError(f"Cannot read raster: {e}", path) from e

        logger.debug("Read raster metadata", path=str(path), size=(width, height))
        return RasterInfo(
            path=path,
            image_size=Size(width=width, height=height),
            band_count=band_count,
            projection_wkt=self.projection_wkt,
            map_area=self.map_area,
        )


class RasterCatalog:
    """The set of rasters queued for preprocessing, without duplicates."""

    def __init__(self, provider: RasterMetadataProvider) -> None:
        self._provider = provider
        self.rasters: list[RasterInfo] = []

    async def load_metadata(self, path: Path | str) -> RasterInfo:
        """Load a raster's metadata and add it to the catalog if new."""
        info = await self._provider.load(path)
        if info not in self.rasters:
            self.rasters.append(info)
        return info
