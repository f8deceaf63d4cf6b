"""The map viewport: scrolling, zooming and tile coordination.

MapViewport keeps three things consistent:

* the scroll offsets of the viewport over the full map (map pixels),
* the Extent (zoom level, visible geographic area, screen size),
* the set of tiles rendered for the current extent.

Every accepted offset or zoom change back-computes the visible GeoArea
into the Extent and starts a fresh tile pass. Tile passes run on the
event loop; each one is tagged with a generation number and results
arriving for an older generation are dropped.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from discarta.config import settings
from discarta.geometry import GeoPoint, Point, Rect, Size
from discarta.geometry.precision import VISUAL_PRECISION, clip_to_range, is_same_as
from discarta.projections import Projection, get_projection
from discarta.tiles import RenderedTile, RenderingTileManager, TileManagerProtocol
from discarta.utils.logging import correlation_scope, get_logger
from discarta.view import Extent, ExtentChange
from discarta.viewport.layer import MapElement, MapLayer

logger = get_logger(__name__)


@dataclass
class Arrangement:
    """Screen placement of everything on the map after a layout pass.

    Attributes:
        tiles: Rendered tiles with their screen rects, in arrival order.
        elements: Layer elements with their screen rects; hidden elements
            have ``Rect.EMPTY``.
    """

    tiles: list[tuple[RenderedTile, Rect]] = field(default_factory=list)
    elements: list[tuple[MapElement, Rect]] = field(default_factory=list)


class MapViewport:
    """Scroll/zoom controller for a slippy map.

    The viewport is inert until ``load`` gives it a screen size. Tile passes
    started by synchronous operations run as background tasks on the
    running event loop; ``drain`` waits for them. Without a running loop
    the state is still updated but no tiles are produced until
    ``refresh_tiles`` is awaited.

    Example:
        >>> viewport = MapViewport(get_projection("equirectangular"))
        >>> viewport.load(Size(width=1024, height=512))
        >>> viewport.extent.zoom_level
        1
        >>> await viewport.drain()
        >>> len(viewport.tiles)
        4
    """

    def __init__(
        self,
        projection: Projection | None = None,
        tile_manager: TileManagerProtocol | None = None,
        *,
        line_size: float | None = None,
        discard_stale_tiles: bool | None = None,
        map_id: str | None = None,
    ) -> None:
        self.projection = projection or get_projection(settings.DEFAULT_PROJECTION)
        self.tile_manager: TileManagerProtocol = tile_manager or RenderingTileManager()
        self.line_size = settings.LINE_SIZE if line_size is None else line_size
        self.discard_stale_tiles = (
            settings.DISCARD_STALE_TILES
            if discard_stale_tiles is None
            else discard_stale_tiles
        )
        self.map_id = map_id or uuid.uuid4().hex[:8]

        self.extent = Extent()
        self.extent.subscribe(self._on_extent_changed)
        self.layers: list[MapLayer] = []

        self._loaded = False
        self._map_size = Size(width=0, height=0)
        self._viewport_size = Size(width=0, height=0)
        self._horizontal_offset = 0.0
        self._vertical_offset = 0.0
        self._generation = 0
        self._tiles: list[RenderedTile] = []
        self._passes: set[asyncio.Task[None]] = set()
        self._pass_error: BaseException | None = None
        self._updating_extent = False
        self.layout_version = 0

    # ----- read-only state -----

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def horizontal_offset(self) -> float:
        return self._horizontal_offset

    @property
    def vertical_offset(self) -> float:
        return self._vertical_offset

    @property
    def extent_size(self) -> Size:
        """Size of the full map at the current zoom level."""
        return self._map_size

    @property
    def viewport_size(self) -> Size:
        return self._viewport_size

    @property
    def generation(self) -> int:
        """Number of the most recent tile batch."""
        return self._generation

    @property
    def is_busy(self) -> bool:
        """True while background tile passes are still running."""
        return bool(self._passes)

    @property
    def tiles(self) -> list[RenderedTile]:
        """Tiles received for the current batch so far."""
        return list(self._tiles)

    @property
    def can_scroll_horizontally(self) -> bool:
        return self._map_size.width > self._viewport_size.width

    @property
    def can_scroll_vertically(self) -> bool:
        return self._map_size.height > self._viewport_size.height

    # ----- layout -----

    def load(self, screen_size: Size) -> None:
        """Perform the initial layout for a screen of ``screen_size``.

        Chooses the smallest zoom level at which the full map covers the
        screen, shows the projection's whole world and centers the view.
        """
        self._viewport_size = screen_size

        zoom_level = 0
        while (
            not self.projection.full_map_size_for(zoom_level).covers(screen_size)
            and zoom_level < self.extent.max_zoom_level
        ):
            zoom_level += 1

        with self._own_extent_update():
            self.extent.set_screen_size(screen_size)
            self.extent.set_zoom_level(zoom_level)
            self.extent.set_area(self.projection.world)
        self._map_size = self.projection.full_map_size_for(self.extent.zoom_level)
        self._loaded = True

        logger.info(
            "Map loaded",
            map_id=self.map_id,
            projection=self.projection.key,
            zoom=self.extent.zoom_level,
            screen=screen_size.to_tuple(),
        )

        self._horizontal_offset, self._vertical_offset = self._clamp_offsets(
            (self._map_size.width - screen_size.width) / 2,
            (self._map_size.height - screen_size.height) / 2,
        )
        self._view_changed()

    def resize(self, screen_size: Size) -> bool:
        """Change the viewport size, keeping offsets within bounds.

        Returns:
            True if the size changed.
        """
        with self._own_extent_update():
            if not self.extent.set_screen_size(screen_size):
                return False
        self._viewport_size = screen_size
        self._horizontal_offset, self._vertical_offset = self._clamp_offsets(
            self._horizontal_offset, self._vertical_offset
        )
        if self._loaded:
            self._view_changed()
        return True

    def visible_rect(self) -> Rect:
        """The part of the full map under the viewport, in map pixels."""
        view = Rect(
            x=self._horizontal_offset,
            y=self._vertical_offset,
            width=self._viewport_size.width,
            height=self._viewport_size.height,
        )
        return view.intersection(Rect.from_size(self._map_size)) or Rect.EMPTY

    def screen_point_to_geo(self, point: Point) -> GeoPoint:
        """Convert a point on screen into the geographic point under it."""
        return self.projection.to_geo_point(
            point.offset(self._horizontal_offset, self._vertical_offset), self.extent
        )

    def add_layer(self, layer: MapLayer) -> None:
        if layer not in self.layers:
            self.layers.append(layer)
            self.invalidate_layout()

    def remove_layer(self, layer: MapLayer) -> None:
        self.layers.remove(layer)
        self.invalidate_layout()

    def arrange(self) -> Arrangement:
        """Place tiles and layer elements in screen coordinates."""
        arrangement = Arrangement()
        if not self._loaded:
            return arrangement

        dx, dy = -self._horizontal_offset, -self._vertical_offset
        for tile in self._tiles:
            rect = self.projection.to_rect(tile.area, self.extent)
            arrangement.tiles.append((tile, rect.offset(dx, dy)))

        for layer in self.layers:
            arrangement.elements.extend(
                layer.arrange(
                    self.projection,
                    self.extent,
                    self._horizontal_offset,
                    self._vertical_offset,
                )
            )
        return arrangement

    def invalidate_layout(self) -> None:
        self.layout_version += 1

    # ----- scrolling -----

    def set_horizontal_offset(self, offset: float) -> bool:
        """Scroll horizontally to ``offset`` map pixels, clamped to the map.

        Returns:
            True if the view moved by at least one pixel.
        """
        horizontal, _ = self._clamp_offsets(offset, self._vertical_offset)
        return self._move_to(horizontal, self._vertical_offset)

    def set_vertical_offset(self, offset: float) -> bool:
        """Scroll vertically to ``offset`` map pixels, clamped to the map.

        Returns:
            True if the view moved by at least one pixel.
        """
        _, vertical = self._clamp_offsets(self._horizontal_offset, offset)
        return self._move_to(self._horizontal_offset, vertical)

    def line_up(self) -> bool:
        return self.set_vertical_offset(self._vertical_offset - self.line_size)

    def line_down(self) -> bool:
        return self.set_vertical_offset(self._vertical_offset + self.line_size)

    def line_left(self) -> bool:
        return self.set_horizontal_offset(self._horizontal_offset - self.line_size)

    def line_right(self) -> bool:
        return self.set_horizontal_offset(self._horizontal_offset + self.line_size)

    def page_up(self) -> bool:
        return self.set_vertical_offset(
            self._vertical_offset - self._viewport_size.height
        )

    def page_down(self) -> bool:
        return self.set_vertical_offset(
            self._vertical_offset + self._viewport_size.height
        )

    def page_left(self) -> bool:
        return self.set_horizontal_offset(
            self._horizontal_offset - self._viewport_size.width
        )

    def page_right(self) -> bool:
        return self.set_horizontal_offset(
            self._horizontal_offset + self._viewport_size.width
        )

    def center_on(self, point: GeoPoint) -> bool:
        """Scroll so that ``point`` is as close to the viewport center as the map allows."""
        target = self.projection.to_point(point, self.extent)
        horizontal, vertical = self._clamp_offsets(
            target.x - self._viewport_size.width / 2,
            target.y - self._viewport_size.height / 2,
        )
        return self._move_to(horizontal, vertical)

    # ----- zooming -----

    def mouse_wheel_up(self) -> bool:
        return self.zoom_to(self.extent.zoom_level + 1)

    def mouse_wheel_down(self) -> bool:
        return self.zoom_to(self.extent.zoom_level - 1)

    def mouse_wheel_left(self) -> bool:
        return self.mouse_wheel_down()

    def mouse_wheel_right(self) -> bool:
        return self.mouse_wheel_up()

    def zoom_to(self, zoom_level: int) -> bool:
        """Zoom to ``zoom_level`` keeping the viewport center anchored.

        The center's position as a proportion of the old full map is
        reapplied to the new full map, so the same geographic point stays
        under the center of the viewport.

        Returns:
            True if the zoom level changed.
        """
        old_size = self._map_size
        with self._own_extent_update():
            if not self.extent.set_zoom_level(zoom_level):
                return False
        self._anchor_center(old_size)

        logger.debug(
            "Zoomed",
            map_id=self.map_id,
            zoom=self.extent.zoom_level,
            offsets=(self._horizontal_offset, self._vertical_offset),
        )
        if self._loaded:
            self._view_changed()
        return True

    # ----- tiles -----

    async def refresh_tiles(self) -> None:
        """Run a tile pass for the current extent and wait until it drains.

        Raises:
            TileRenderError: If a tile fails and the failure policy is "raise".
        """
        await self._run_tile_pass(self._next_generation())

    async def drain(self) -> None:
        """Wait for every background tile pass, re-raising the first failure.

        A pass that failed before ``drain`` was called is remembered, so its
        error is raised here even if the pass finished long ago.
        """
        while self._passes:
            await asyncio.wait(list(self._passes))
        error, self._pass_error = self._pass_error, None
        if error is not None:
            raise error

    def _next_generation(self) -> int:
        self._generation += 1
        self._tiles = []
        self.invalidate_layout()
        return self._generation

    def _start_tile_pass(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, tile pass deferred", map_id=self.map_id)
            return

        task = asyncio.create_task(
            self._run_tile_pass(self._next_generation()),
            name=f"tile-pass-{self.map_id}-{self._generation}",
        )
        self._passes.add(task)
        task.add_done_callback(self._on_pass_done)

    def _on_pass_done(self, task: asyncio.Task[None]) -> None:
        self._passes.discard(task)
        if task.cancelled() or task.exception() is None:
            return
        logger.error("Tile pass failed", map_id=self.map_id, error=str(task.exception()))
        if self._pass_error is None:
            self._pass_error = task.exception()

    async def _run_tile_pass(self, generation: int) -> None:
        with correlation_scope(
            map_id=self.map_id,
            generation=generation,
            zoom_level=self.extent.zoom_level,
        ):
            await self._drain_batch(generation)

    async def _drain_batch(self, generation: int) -> None:
        pending: set[asyncio.Task[RenderedTile]] = set(
            self.tile_manager.get_tiles_for_area(self.projection, self.extent, generation)
        )
        logger.debug("Tile pass started", tiles=len(pending))

        received = 0
        while pending:
            done, pending = await asyncio.wait(
                pending, return_when=asyncio.FIRST_COMPLETED
            )

            if self.discard_stale_tiles and generation != self._generation:
                logger.debug(
                    "Discarding stale tile batch",
                    current_generation=self._generation,
                    dropped=len(done) + len(pending),
                )
                _abandon(done | pending)
                return

            for task in done:
                try:
                    tile = task.result()
                except Exception:
                    _abandon(done | pending)
                    raise
                self._tiles.append(tile)
                received += 1
            self.invalidate_layout()

        logger.debug("Tile pass finished", tiles=received)

    def _on_extent_changed(self, extent: Extent, change: ExtentChange) -> None:
        old_size = self._map_size
        if ExtentChange.ZOOM in change:
            self._map_size = self.projection.full_map_size_for(extent.zoom_level)
        self.invalidate_layout()
        if self._updating_extent or not self._loaded:
            return

        # The extent was changed directly rather than through this viewport
        with self._own_extent_update():
            if ExtentChange.SCREEN in change:
                self._viewport_size = extent.screen_size
            if ExtentChange.ZOOM in change:
                self._anchor_center(old_size)
            elif ExtentChange.AREA in change and not extent.area.is_empty:
                self._scroll_to_center(extent.area.center)
            else:
                self._horizontal_offset, self._vertical_offset = self._clamp_offsets(
                    self._horizontal_offset, self._vertical_offset
                )
            self._view_changed()

    # ----- helpers -----

    @contextmanager
    def _own_extent_update(self) -> Iterator[None]:
        """Mark extent changes made by the viewport itself."""
        previous = self._updating_extent
        self._updating_extent = True
        try:
            yield
        finally:
            self._updating_extent = previous

    def _anchor_center(self, old_size: Size) -> None:
        """Re-place the offsets so the old center proportion stays centered."""
        center_x = self._horizontal_offset + self._viewport_size.width / 2
        center_y = self._vertical_offset + self._viewport_size.height / 2
        proportion_x = center_x / old_size.width if old_size.width else 0.5
        proportion_y = center_y / old_size.height if old_size.height else 0.5
        self._horizontal_offset, self._vertical_offset = self._clamp_offsets(
            proportion_x * self._map_size.width - self._viewport_size.width / 2,
            proportion_y * self._map_size.height - self._viewport_size.height / 2,
        )

    def _scroll_to_center(self, point: GeoPoint) -> None:
        target = self.projection.to_point(point, self.extent)
        self._horizontal_offset, self._vertical_offset = self._clamp_offsets(
            target.x - self._viewport_size.width / 2,
            target.y - self._viewport_size.height / 2,
        )

    def _clamp_offsets(self, horizontal: float, vertical: float) -> tuple[float, float]:
        max_horizontal = max(0.0, self._map_size.width - self._viewport_size.width)
        max_vertical = max(0.0, self._map_size.height - self._viewport_size.height)
        return (
            clip_to_range(horizontal, 0.0, max_horizontal),
            clip_to_range(vertical, 0.0, max_vertical),
        )

    def _move_to(self, horizontal: float, vertical: float) -> bool:
        moved = not (
            is_same_as(horizontal, self._horizontal_offset, VISUAL_PRECISION)
            and is_same_as(vertical, self._vertical_offset, VISUAL_PRECISION)
        )
        self._horizontal_offset = horizontal
        self._vertical_offset = vertical
        if moved and self._loaded:
            self._view_changed()
        return moved

    def _view_changed(self) -> None:
        visible = self.visible_rect()
        if not visible.is_empty:
            with self._own_extent_update():
                self.extent.set_area(self.projection.to_geo_area(visible, self.extent))
        self.invalidate_layout()
        self._start_tile_pass()


def _abandon(tasks: set[asyncio.Task[RenderedTile]]) -> None:
    """Stop consuming ``tasks`` while still retrieving their outcomes."""
    for task in tasks:
        task.add_done_callback(_retrieve_outcome)


def _retrieve_outcome(task: asyncio.Task[RenderedTile]) -> None:
    """Mark the outcome of a discarded tile task as retrieved."""
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Discarded tile failed", error=str(task.exception()))
