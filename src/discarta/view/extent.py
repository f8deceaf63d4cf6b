"""The mutable view state shared by the viewport, projection and tiles.

An Extent is what the map is currently showing: which geographic area,
at which zoom level, on a screen of which size. Setters report whether
anything changed and notify subscribed observers with the kind of change,
so the owning viewport can react without a global event bus.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Flag, auto

from discarta.config import settings
from discarta.geometry import GeoArea, Size
from discarta.geometry.precision import clip_to_range
from discarta.utils.logging import get_logger

logger = get_logger(__name__)

MIN_ZOOM_LEVEL = 0


class ExtentChange(Flag):
    """What changed on an Extent."""

    NONE = 0
    ZOOM = auto()
    AREA = auto()
    SCREEN = auto()


ExtentObserver = Callable[["Extent", ExtentChange], None]


class Extent:
    """Visible geographic area, zoom level and screen size.

    The extent starts out empty: no area, zoom 0 and a zero screen. The
    zoom level is always kept within ``[0, max_zoom_level]``.

    Example:
        >>> extent = Extent()
        >>> extent.set_zoom_level(25)
        True
        >>> extent.zoom_level
        19
    """

    __slots__ = ("_area", "_zoom_level", "_screen_size", "_observers", "max_zoom_level")

    def __init__(
        self,
        area: GeoArea | None = None,
        zoom_level: int = MIN_ZOOM_LEVEL,
        screen_size: Size | None = None,
        max_zoom_level: int | None = None,
    ) -> None:
        self.max_zoom_level = (
            settings.MAX_ZOOM_LEVEL if max_zoom_level is None else max_zoom_level
        )
        self._area = area if area is not None else GeoArea.EMPTY
        self._zoom_level = self._clamp_zoom(zoom_level)
        self._screen_size = screen_size or Size(width=0, height=0)
        self._observers: list[ExtentObserver] = []

    @property
    def area(self) -> GeoArea:
        return self._area

    @property
    def zoom_level(self) -> int:
        return self._zoom_level

    @property
    def screen_size(self) -> Size:
        return self._screen_size

    def subscribe(self, observer: ExtentObserver) -> None:
        """Register ``observer`` to be called after every change."""
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: ExtentObserver) -> None:
        """Remove a previously registered observer. Unknown observers are ignored."""
        if observer in self._observers:
            self._observers.remove(observer)

    def set_zoom_level(self, zoom_level: int) -> bool:
        """Set the zoom level, clamped to the supported range.

        Returns:
            True if the stored zoom level changed.
        """
        zoom_level = self._clamp_zoom(zoom_level)
        if zoom_level == self._zoom_level:
            return False
        self._zoom_level = zoom_level
        self._notify(ExtentChange.ZOOM)
        return True

    def set_area(self, area: GeoArea) -> bool:
        """Replace the visible geographic area.

        Returns:
            True if the area differs (beyond degree precision) from the old one.
        """
        if area == self._area:
            return False
        self._area = area
        self._notify(ExtentChange.AREA)
        return True

    def set_screen_size(self, screen_size: Size) -> bool:
        """Record the size of the screen the map is shown on.

        Returns:
            True if the size changed.
        """
        if screen_size == self._screen_size:
            return False
        self._screen_size = screen_size
        self._notify(ExtentChange.SCREEN)
        return True

    def snapshot(self) -> Extent:
        """Return a detached copy without observers.

        Tile workers run on other threads while the live extent keeps
        changing; they project against a snapshot taken when the batch
        was scheduled.
        """
        return Extent(
            area=self._area,
            zoom_level=self._zoom_level,
            screen_size=self._screen_size,
            max_zoom_level=self.max_zoom_level,
        )

    def _clamp_zoom(self, zoom_level: int) -> int:
        return int(clip_to_range(zoom_level, MIN_ZOOM_LEVEL, self.max_zoom_level))

    def _notify(self, change: ExtentChange) -> None:
        logger.debug(
            "Extent changed",
            change=change.name,
            zoom=self._zoom_level,
            area=str(self._area),
        )
        for observer in list(self._observers):
            observer(self, change)

    def __repr__(self) -> str:
        return (
            f"Extent(area={self._area}, zoom_level={self._zoom_level}, "
            f"screen_size={self._screen_size.to_tuple()})"
        )
