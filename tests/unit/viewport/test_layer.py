"""Unit tests for geo-tagged element placement."""

from __future__ import annotations

import math
from dataclasses import dataclass

import pytest

from discarta.geometry import GeoArea, GeoPoint, Rect, Size
from discarta.projections import EquirectangularProjection, PseudoMercatorProjection
from discarta.view import Extent
from discarta.viewport import GeoTag, HotSpot, MapLayer


@dataclass(eq=False)
class Marker:
    """Minimal map element with a measured size."""

    desired_size: Size


@pytest.fixture
def extent() -> Extent:
    return Extent(zoom_level=0)


@pytest.fixture
def marker() -> Marker:
    return Marker(desired_size=Size(width=20, height=10))


class TestMapLayerTags:
    """Tests for the geo tag side table."""

    def test_new_element_has_default_tag(self, marker: Marker) -> None:
        """Test an added element starts untagged with centered hot spots."""
        layer = MapLayer()
        layer.add(marker)
        assert marker in layer
        assert layer.get_tag(marker) == GeoTag()
        assert layer.get_tag(marker).hot_spot_x == HotSpot.CENTER

    def test_adding_twice_does_not_duplicate(self, marker: Marker) -> None:
        """Test re-adding updates the tag in place."""
        layer = MapLayer()
        layer.add(marker)
        layer.add(marker, location=GeoPoint(latitude=1, longitude=2))
        assert len(layer) == 1
        assert layer.get_location(marker) == GeoPoint(latitude=1, longitude=2)

    def test_setters_update_only_their_field(self, marker: Marker) -> None:
        """Test each setter leaves the other fields alone."""
        layer = MapLayer()
        area = GeoArea.from_bounds(north=1, east=1, south=0, west=0)
        layer.add(marker, location=GeoPoint(latitude=5, longitude=5))
        layer.set_area(marker, area)
        assert layer.get_area(marker) == area
        assert layer.get_location(marker) == GeoPoint(latitude=5, longitude=5)

    def test_remove(self, marker: Marker) -> None:
        """Test removing an element drops its tag."""
        layer = MapLayer()
        layer.add(marker)
        layer.remove(marker)
        assert marker not in layer
        assert list(layer) == []
        with pytest.raises(KeyError):
            layer.get_tag(marker)

    def test_equal_elements_keep_separate_tags(self) -> None:
        """Test tags are keyed by identity, not equality."""
        first = Marker(desired_size=Size(width=1, height=1))
        second = Marker(desired_size=Size(width=1, height=1))
        layer = MapLayer()
        layer.add(first, location=GeoPoint(latitude=1, longitude=1))
        layer.add(second, location=GeoPoint(latitude=2, longitude=2))
        assert layer.get_location(first) != layer.get_location(second)


class TestMapLayerPlacement:
    """Tests for placing elements in map pixels."""

    def test_point_centered_by_default(
        self,
        marker: Marker,
        extent: Extent,
        equirectangular: EquirectangularProjection,
    ) -> None:
        """Test a point element is centered over its location."""
        layer = MapLayer()
        layer.add(marker, location=GeoPoint(latitude=0, longitude=0))

        rect = layer.place(marker, equirectangular, extent)
        assert rect.to_tuple() == pytest.approx((246, 123, 20, 10))

    def test_point_with_bottom_center_hot_spot(
        self,
        marker: Marker,
        extent: Extent,
        equirectangular: EquirectangularProjection,
    ) -> None:
        """Test a pin-style hot spot puts the bottom edge on the location."""
        layer = MapLayer()
        layer.add(
            marker,
            location=GeoPoint(latitude=0, longitude=0),
            hot_spot_x=HotSpot.parse("50%"),
            hot_spot_y=HotSpot.parse("100%"),
        )

        rect = layer.place(marker, equirectangular, extent)
        assert rect.to_tuple() == pytest.approx((246, 118, 20, 10))

    def test_point_with_pixel_hot_spot(
        self,
        marker: Marker,
        extent: Extent,
        equirectangular: EquirectangularProjection,
    ) -> None:
        """Test an absolute hot spot is subtracted as is."""
        layer = MapLayer()
        layer.add(
            marker,
            location=GeoPoint(latitude=0, longitude=0),
            hot_spot_x=HotSpot(value=5),
        )

        rect = layer.place(marker, equirectangular, extent)
        assert rect.x == pytest.approx(251)

    def test_area_is_stretched_over_its_rect(
        self,
        marker: Marker,
        extent: Extent,
        equirectangular: EquirectangularProjection,
    ) -> None:
        """Test an area element covers the projected area."""
        layer = MapLayer()
        layer.add(marker, area=GeoArea.from_bounds(north=45, east=90, south=-45, west=-90))

        rect = layer.place(marker, equirectangular, extent)
        assert rect.to_tuple() == pytest.approx((128, 64, 256, 128))

    def test_area_takes_precedence_over_location(
        self,
        marker: Marker,
        extent: Extent,
        equirectangular: EquirectangularProjection,
    ) -> None:
        """Test an element with both tags is placed by its area."""
        layer = MapLayer()
        layer.add(
            marker,
            area=GeoArea.from_bounds(north=45, east=90, south=-45, west=-90),
            location=GeoPoint(latitude=80, longitude=170),
        )

        rect = layer.place(marker, equirectangular, extent)
        assert rect.width == pytest.approx(256)

    def test_area_is_clipped_to_world(
        self,
        marker: Marker,
        extent: Extent,
        equirectangular: EquirectangularProjection,
    ) -> None:
        """Test the part of an area outside the world is cut off."""
        layer = MapLayer()
        layer.add(marker, area=GeoArea.from_bounds(north=100, east=200, south=0, west=0))

        rect = layer.place(marker, equirectangular, extent)
        assert rect.to_tuple() == pytest.approx((256, 0, 256, 128))

    def test_area_outside_world_is_hidden(
        self,
        marker: Marker,
        extent: Extent,
        equirectangular: EquirectangularProjection,
    ) -> None:
        """Test an area entirely beyond the world is hidden."""
        layer = MapLayer()
        layer.add(
            marker, area=GeoArea.from_bounds(north=-95, east=10, south=-100, west=0)
        )
        assert layer.place(marker, equirectangular, extent) is Rect.EMPTY

    def test_untagged_element_is_hidden(
        self,
        marker: Marker,
        extent: Extent,
        equirectangular: EquirectangularProjection,
    ) -> None:
        """Test an element with neither area nor location is hidden."""
        layer = MapLayer()
        layer.add(marker)
        assert layer.place(marker, equirectangular, extent) is Rect.EMPTY

    def test_polar_marker_does_not_break_mercator_layout(
        self,
        marker: Marker,
        extent: Extent,
        mercator: PseudoMercatorProjection,
    ) -> None:
        """Test a marker at the south pole is placed off the bottom of the map."""
        other = Marker(desired_size=Size(width=10, height=10))
        layer = MapLayer()
        layer.add(marker, location=GeoPoint(latitude=-90, longitude=0))
        layer.add(other, location=GeoPoint(latitude=0, longitude=0))

        placements = dict(
            (id(element), rect) for element, rect in layer.arrange(mercator, extent)
        )
        polar = placements[id(marker)]
        assert polar.x == pytest.approx(118)
        assert polar.y == math.inf
        assert placements[id(other)].to_tuple() == pytest.approx((123, 123, 10, 10))

    def test_arrange_subtracts_scroll_offsets(
        self,
        marker: Marker,
        extent: Extent,
        equirectangular: EquirectangularProjection,
    ) -> None:
        """Test screen rects are map rects minus the offsets."""
        hidden = Marker(desired_size=Size(width=5, height=5))
        layer = MapLayer()
        layer.add(marker, location=GeoPoint(latitude=0, longitude=0))
        layer.add(hidden)

        placements = dict(
            (id(element), rect)
            for element, rect in layer.arrange(equirectangular, extent, 100, 50)
        )
        assert placements[id(marker)].to_tuple() == pytest.approx((146, 73, 20, 10))
        assert placements[id(hidden)] is Rect.EMPTY
