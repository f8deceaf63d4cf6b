"""Exception hierarchy for DisCarta.

Errors carry the context that produced them (tile coordinate, raster path)
so a failure surfacing from deep inside the tile pipeline is still
actionable at the place it is awaited.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from discarta.tiles.types import TileCoord


class DisCartaError(Exception):
    """Base exception for all DisCarta errors."""


class TileRenderError(DisCartaError):
    """Raised when a single tile cannot be rendered or loaded.

    Under the "raise" failure policy the error propagates to whoever
    awaits the tile's task; tiles are never retried.
    """

    def __init__(
        self,
        message: str,
        *,
        coord: TileCoord | None = None,
        path: Path | str | None = None,
    ) -> None:
        """Initialize tile error with tile context.

        Args:
            message: Human-readable error description.
            coord: Grid coordinate of the failing tile.
            path: Tile file involved, if any.
        """
        self.message = message
        self.coord = coord
        self.path = Path(path) if path else None
        super().__init__(self._format_message())

    @property
    def zoom_level(self) -> int | None:
        """Zoom level of the failing tile, if known."""
        return self.coord.zoom_level if self.coord is not None else None

    def _format_message(self) -> str:
        parts = [self.message]
        if self.coord is not None:
            parts.append(
                f"zoom={self.coord.zoom_level}, x={self.coord.x}, y={self.coord.y}"
            )
        if self.path is not None:
            parts.append(f"path={self.path}")

        if len(parts) == 1:
            return parts[0]
        return f"{parts[0]} ({', '.join(parts[1:])})"


class RasterError(DisCartaError):
    """Raised when a source raster cannot be read or tiled."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.path = Path(path) if path else None
        self.message = message
        if self.path:
            super().__init__(f"{message} (path: {self.path})")
        else:
            super().__init__(message)
