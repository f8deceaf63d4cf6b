"""Geo-tagged elements and their placement on the map.

Elements do not carry geographic data themselves. A MapLayer keeps a side
table of GeoTags keyed by element identity, and arranges each element
from its tag:

1. An element tagged with an area is stretched over that area, clipped to
   the projection's world. If nothing of the area is inside the world the
   element is hidden.
2. Otherwise an element tagged with a location is placed so that its hot
   spot sits on the projected location.
3. Anything else is hidden (arranged to ``Rect.EMPTY``).
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, Field

from discarta.geometry import GeoArea, GeoPoint, Rect, Size
from discarta.viewport.hotspot import HotSpot

if TYPE_CHECKING:
    from discarta.projections import Projection
    from discarta.view import Extent


class MapElement(Protocol):
    """Anything that can be placed on a map layer."""

    @property
    def desired_size(self) -> Size:
        """Measured size of the element in display units."""
        ...


class GeoTag(BaseModel, frozen=True):
    """Geographic placement data attached to one element.

    Attributes:
        area: Area to stretch the element over. Takes precedence.
        location: Point to anchor the element at.
        hot_spot_x: Horizontal anchor within the element.
        hot_spot_y: Vertical anchor within the element.
    """

    area: GeoArea = Field(default=GeoArea.EMPTY, description="Area to cover")
    location: GeoPoint = Field(default=GeoPoint.EMPTY, description="Anchor location")
    hot_spot_x: HotSpot = Field(default=HotSpot.CENTER, description="Horizontal anchor")
    hot_spot_y: HotSpot = Field(default=HotSpot.CENTER, description="Vertical anchor")


class MapLayer:
    """An ordered collection of elements plus their geo tags.

    Example:
        >>> layer = MapLayer()
        >>> layer.add(marker, location=GeoPoint(latitude=51.5, longitude=-0.1))
        >>> layer.place(marker, projection, extent)  # rect in map pixels
    """

    def __init__(self) -> None:
        self._children: list[MapElement] = []
        self._tags: dict[int, GeoTag] = {}

    def __iter__(self) -> Iterator[MapElement]:
        return iter(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __contains__(self, element: object) -> bool:
        return id(element) in self._tags

    def add(
        self,
        element: MapElement,
        *,
        area: GeoArea | None = None,
        location: GeoPoint | None = None,
        hot_spot_x: HotSpot | None = None,
        hot_spot_y: HotSpot | None = None,
    ) -> None:
        """Add an element, optionally tagging it in the same call."""
        if element not in self:
            self._children.append(element)
            self._tags[id(element)] = GeoTag()
        self._update(
            element,
            area=area,
            location=location,
            hot_spot_x=hot_spot_x,
            hot_spot_y=hot_spot_y,
        )

    def remove(self, element: MapElement) -> None:
        """Remove an element and its tag.

        Raises:
            KeyError: If the element is not on this layer.
        """
        del self._tags[id(element)]
        self._children = [child for child in self._children if child is not element]

    def get_tag(self, element: MapElement) -> GeoTag:
        """Return the element's tag.

        Raises:
            KeyError: If the element is not on this layer.
        """
        return self._tags[id(element)]

    def get_area(self, element: MapElement) -> GeoArea:
        return self.get_tag(element).area

    def set_area(self, element: MapElement, area: GeoArea) -> None:
        self._update(element, area=area)

    def get_location(self, element: MapElement) -> GeoPoint:
        return self.get_tag(element).location

    def set_location(self, element: MapElement, location: GeoPoint) -> None:
        self._update(element, location=location)

    def set_hot_spot(
        self,
        element: MapElement,
        hot_spot_x: HotSpot | None = None,
        hot_spot_y: HotSpot | None = None,
    ) -> None:
        self._update(element, hot_spot_x=hot_spot_x, hot_spot_y=hot_spot_y)

    def place(self, element: MapElement, projection: Projection, extent: Extent) -> Rect:
        """Compute the element's rect in absolute map pixels.

        Args:
            element: An element on this layer.
            projection: Projection of the map.
            extent: Current view state.

        Returns:
            The placement rect, or ``Rect.EMPTY`` if the element is hidden.
        """
        tag = self.get_tag(element)

        if not tag.area.is_empty:
            visible = GeoArea.intersection(tag.area, projection.world)
            if visible.is_empty or visible.is_degenerate:
                return Rect.EMPTY
            return projection.to_rect(visible, extent)

        if not tag.location.is_empty:
            anchor = projection.to_point(tag.location, extent)
            size = element.desired_size
            return Rect(
                x=anchor.x - tag.hot_spot_x.apply(size.width),
                y=anchor.y - tag.hot_spot_y.apply(size.height),
                width=size.width,
                height=size.height,
            )

        return Rect.EMPTY

    def arrange(
        self,
        projection: Projection,
        extent: Extent,
        horizontal_offset: float = 0,
        vertical_offset: float = 0,
    ) -> list[tuple[MapElement, Rect]]:
        """Place every element in screen space.

        Screen coordinates are map pixels minus the scroll offsets. Hidden
        elements keep ``Rect.EMPTY``.
        """
        placements = []
        for element in self._children:
            rect = self.place(element, projection, extent)
            if rect is not Rect.EMPTY:
                rect = rect.offset(-horizontal_offset, -vertical_offset)
            placements.append((element, rect))
        return placements

    def _update(self, element: MapElement, **changes: object) -> None:
        updates = {key: value for key, value in changes.items() if value is not None}
        if updates:
            tag = self.get_tag(element)
            self._tags[id(element)] = tag.model_copy(update=updates)
