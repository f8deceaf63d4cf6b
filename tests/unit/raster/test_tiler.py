"""Unit tests for the raster tiler."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from discarta.errors import RasterError
from discarta.geometry import GeoArea, Size
from discarta.projections import EquirectangularProjection, PseudoMercatorProjection
from discarta.raster import ProgressReporter, RasterInfo, RasterTiler

RED = (255, 0, 0, 255)


def is_red(pixel: tuple[int, ...]) -> bool:
    red, green, blue, alpha = pixel
    return red >= 250 and green <= 5 and blue <= 5 and alpha >= 250


def write_raster(tmp_path: Path, area: GeoArea, size: tuple[int, int] = (512, 256)) -> RasterInfo:
    path = tmp_path / "source.png"
    Image.new("RGB", size, RED[:3]).save(path)
    return RasterInfo(
        path=path,
        image_size=Size(width=size[0], height=size[1]),
        band_count=3,
        projection_wkt=EquirectangularProjection.wkt,
        map_area=area,
    )


class TestRasterTiler:
    """Tests for tile pyramid generation."""

    def test_writes_full_grid(self, tmp_path: Path) -> None:
        """Test every cell of the zoom level is written under the layout."""
        info = write_raster(tmp_path, EquirectangularProjection.world)
        output = tmp_path / "tiles"

        written = RasterTiler(output).project_and_tile(info, zoom_level=1)

        assert written == [
            output / "equirectangular" / "1" / "0-0.png",
            output / "equirectangular" / "1" / "1-0.png",
            output / "equirectangular" / "1" / "0-1.png",
            output / "equirectangular" / "1" / "1-1.png",
        ]
        for path in written:
            with Image.open(path) as tile:
                assert tile.size == (512, 256)
                assert tile.mode == "RGBA"

    def test_world_raster_fills_tile(self, tmp_path: Path) -> None:
        """Test a raster covering the world leaves no transparent pixels."""
        info = write_raster(tmp_path, EquirectangularProjection.world)
        [path] = RasterTiler(tmp_path / "tiles").project_and_tile(info, zoom_level=0)

        with Image.open(path) as tile:
            assert is_red(tile.getpixel((256, 128)))
            assert is_red(tile.getpixel((10, 10)))

    def test_partial_raster_leaves_rest_transparent(self, tmp_path: Path) -> None:
        """Test cells outside the raster stay transparent."""
        info = write_raster(
            tmp_path,
            GeoArea.from_bounds(north=90, east=180, south=-90, west=0),
            size=(256, 256),
        )
        [path] = RasterTiler(tmp_path / "tiles").project_and_tile(info, zoom_level=0)

        with Image.open(path) as tile:
            assert tile.getpixel((100, 128))[3] == 0
            assert is_red(tile.getpixel((400, 128)))

    def test_explicit_projection_overrides_wkt(self, tmp_path: Path) -> None:
        """Test tiles land under the requested projection's key."""
        info = write_raster(tmp_path, PseudoMercatorProjection.world, size=(256, 256))
        written = RasterTiler(tmp_path / "tiles").project_and_tile(
            info, zoom_level=0, projection=PseudoMercatorProjection()
        )
        assert written == [tmp_path / "tiles" / "pseudo-mercator" / "0" / "0-0.png"]

    def test_reports_progress_per_tile(self, tmp_path: Path) -> None:
        """Test the reporter grows by the grid size and advances per tile."""
        info = write_raster(tmp_path, EquirectangularProjection.world)
        reporter = ProgressReporter()

        RasterTiler(tmp_path / "tiles").project_and_tile(info, 2, progress=reporter)

        assert reporter.status.total == 16
        assert reporter.status.current == 16
        assert "zoom 2" in reporter.status.message

    def test_missing_source(self, tmp_path: Path) -> None:
        """Test an unreadable source raises RasterError."""
        info = RasterInfo(
            path=tmp_path / "gone.png",
            image_size=Size(width=1, height=1),
            band_count=3,
            map_area=EquirectangularProjection.world,
        )
        with pytest.raises(RasterError, match="Cannot read raster"):
            RasterTiler(tmp_path / "tiles").project_and_tile(info, zoom_level=0)
