"""Unit tests for tile grid enumeration."""

from __future__ import annotations

import itertools

import pytest
from hypothesis import given
from hypothesis import strategies as st

from discarta.geometry import GeoArea, Rect
from discarta.projections import (
    EquirectangularProjection,
    Projection,
    PseudoMercatorProjection,
)
from discarta.tiles import TileCoord, grid_dimensions, plan_tile_grid, tiles_intersecting
from discarta.view import Extent

PROJECTIONS = [EquirectangularProjection(), PseudoMercatorProjection()]


class FixedViewProjection(EquirectangularProjection):
    """Equirectangular projection whose view rect is given exactly."""

    def __init__(self, view: Rect) -> None:
        self.view = view

    def extent_rect(self, extent: Extent) -> Rect:
        return self.view


class TestPlanTileGrid:
    """Tests for full grid planning."""

    def test_single_tile_at_zoom_zero(self, equirectangular: EquirectangularProjection) -> None:
        """Test zoom 0 is a single tile covering the map."""
        cells = plan_tile_grid(equirectangular, 0)
        assert len(cells) == 1
        assert cells[0].coord == TileCoord(zoom_level=0, x=0, y=0)
        assert cells[0].rect == Rect(x=0, y=0, width=512, height=256)

    def test_grid_dimensions_double(self, mercator: PseudoMercatorProjection) -> None:
        """Test the grid doubles in each direction per zoom level."""
        assert grid_dimensions(mercator, 0) == (1, 1)
        assert grid_dimensions(mercator, 3) == (8, 8)

    def test_column_major_order(self, equirectangular: EquirectangularProjection) -> None:
        """Test cells run down each column before moving right."""
        coords = [(cell.coord.x, cell.coord.y) for cell in plan_tile_grid(equirectangular, 1)]
        assert coords == [(0, 0), (0, 1), (1, 0), (1, 1)]

    @pytest.mark.parametrize("projection", PROJECTIONS)
    @given(zoom=st.integers(min_value=0, max_value=3))
    def test_grid_tiles_full_map_without_gaps_or_overlaps(
        self, projection: Projection, zoom: int
    ) -> None:
        """Test the cells exactly tile the full map."""
        cells = plan_tile_grid(projection, zoom)
        full_map = projection.full_map_size_for(zoom)

        assert sum(cell.rect.area for cell in cells) == pytest.approx(full_map.area)
        assert len({cell.coord for cell in cells}) == len(cells)
        for first, second in itertools.combinations(cells, 2):
            assert not first.rect.intersects_with(second.rect)
        for cell in cells:
            assert cell.rect.x >= 0
            assert cell.rect.y >= 0
            assert cell.rect.right <= full_map.width
            assert cell.rect.bottom <= full_map.height


class TestTilesIntersecting:
    """Tests for visible tile selection."""

    def test_small_area_needs_one_tile(
        self, equirectangular: EquirectangularProjection
    ) -> None:
        """Test an area inside a single cell selects only that cell."""
        extent = Extent(
            area=GeoArea.from_bounds(north=40, east=-10, south=10, west=-80),
            zoom_level=2,
        )
        cells = tiles_intersecting(equirectangular, extent)
        assert [cell.coord for cell in cells] == [TileCoord(zoom_level=2, x=1, y=1)]

    def test_world_needs_every_tile(self, mercator: PseudoMercatorProjection) -> None:
        """Test the whole world selects the whole grid."""
        extent = Extent(area=mercator.world, zoom_level=2)
        assert len(tiles_intersecting(mercator, extent)) == 16

    def test_empty_area_needs_no_tiles(
        self, equirectangular: EquirectangularProjection
    ) -> None:
        """Test an extent without an area selects nothing."""
        assert tiles_intersecting(equirectangular, Extent(zoom_level=3)) == []

    def test_tile_aligned_view_excludes_touching_neighbours(self) -> None:
        """Test cells that only share an edge with the view are not selected."""
        projection = FixedViewProjection(Rect(x=0, y=0, width=512, height=256))
        cells = tiles_intersecting(projection, Extent(zoom_level=1))
        assert [cell.coord for cell in cells] == [TileCoord(zoom_level=1, x=0, y=0)]

    def test_view_crossing_an_edge_selects_both_sides(self) -> None:
        """Test half a pixel past the edge pulls in the neighbouring column."""
        projection = FixedViewProjection(Rect(x=0, y=0, width=512.5, height=256))
        cells = tiles_intersecting(projection, Extent(zoom_level=1))
        assert [cell.coord for cell in cells] == [
            TileCoord(zoom_level=1, x=0, y=0),
            TileCoord(zoom_level=1, x=1, y=0),
        ]

    def test_deep_zoom_selects_only_the_window(
        self, mercator: PseudoMercatorProjection
    ) -> None:
        """Test a small area at the deepest zoom yields a handful of cells."""
        extent = Extent(
            area=GeoArea.from_bounds(north=51.501, east=-0.129, south=51.5, west=-0.13),
            zoom_level=19,
        )
        cells = tiles_intersecting(mercator, extent)

        assert 0 < len(cells) <= 20
        view_rect = mercator.extent_rect(extent)
        assert all(cell.rect.intersects_with(view_rect) for cell in cells)

    @given(
        zoom=st.integers(min_value=0, max_value=5),
        north=st.floats(min_value=-89, max_value=89),
        south=st.floats(min_value=-89, max_value=89),
        east=st.floats(min_value=-179, max_value=179),
        west=st.floats(min_value=-179, max_value=179),
    )
    def test_selection_is_exactly_the_intersecting_cells(
        self, zoom: int, north: float, south: float, east: float, west: float
    ) -> None:
        """Test every selected cell intersects the view and none is missed."""
        projection = EquirectangularProjection()
        extent = Extent(
            area=GeoArea.from_bounds(north=north, east=east, south=south, west=west),
            zoom_level=zoom,
        )
        view_rect = projection.extent_rect(extent)

        selected = {cell.coord for cell in tiles_intersecting(projection, extent)}
        expected = {
            cell.coord
            for cell in plan_tile_grid(projection, zoom)
            if cell.rect.intersects_with(view_rect)
        }
        assert selected == expected
