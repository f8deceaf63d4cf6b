"""Tests for discarta.errors module."""

from pathlib import Path

from discarta.errors import DisCartaError, RasterError, TileRenderError
from discarta.tiles import TileCoord


class TestTileRenderError:
    def test_message_includes_coordinates_and_path(self) -> None:
        error = TileRenderError(
            "Tile file not found",
            coord=TileCoord(zoom_level=2, x=1, y=3),
            path=Path("/tiles/equirectangular/2/3-1.png"),
        )
        text = str(error)
        assert text.startswith("Tile file not found (")
        assert "zoom=2" in text
        assert "x=1" in text
        assert "y=3" in text
        assert "3-1.png" in text
        assert error.zoom_level == 2

    def test_plain_message(self) -> None:
        error = TileRenderError("boom")
        assert str(error) == "boom"
        assert error.zoom_level is None
        assert isinstance(error, DisCartaError)


class TestRasterError:
    def test_with_path(self) -> None:
        error = RasterError("Raster not found", "/data/world.tif")
        assert error.path == Path("/data/world.tif")
        assert "/data/world.tif" in str(error)

    def test_without_path(self) -> None:
        error = RasterError("bad")
        assert error.path is None
        assert str(error) == "bad"
