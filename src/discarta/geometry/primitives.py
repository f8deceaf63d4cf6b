"""Screen-space geometry primitives for DisCarta.

This module provides immutable Pydantic models for representing points,
sizes, and rectangles in map pixel coordinates. All coordinates follow the
convention where (0, 0) is the top-left corner of the full map at the
current zoom level, x increases rightward and y increases downward.
"""

from __future__ import annotations

from typing import ClassVar, Self

from pydantic import BaseModel, Field


class Point(BaseModel, frozen=True):
    """A 2D point in map pixel coordinates.

    Coordinates may be negative or fractional: a point projected from
    outside the projection's world, or translated into screen space by a
    scroll offset, is still a valid Point.

    Attributes:
        x: Horizontal position (pixels from left edge).
        y: Vertical position (pixels from top edge).
    """

    x: float = Field(..., description="X coordinate (pixels from left)")
    y: float = Field(..., description="Y coordinate (pixels from top)")

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (x, y) tuple."""
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, coord: tuple[float, float]) -> Self:
        """Create Point from (x, y) tuple."""
        return cls(x=coord[0], y=coord[1])

    def offset(self, dx: float, dy: float) -> Point:
        """Return this point translated by (dx, dy)."""
        return Point(x=self.x + dx, y=self.y + dy)


class Size(BaseModel, frozen=True):
    """A 2D size representing width and height.

    Both dimensions must be non-negative. A zero size is legal: it is what
    a hidden element is arranged to, and what a viewport reports before
    its first layout.

    Attributes:
        width: Horizontal extent in pixels.
        height: Vertical extent in pixels.
    """

    width: float = Field(..., ge=0, description="Width in pixels")
    height: float = Field(..., ge=0, description="Height in pixels")

    @property
    def area(self) -> float:
        """Calculate the area in square pixels."""
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def covers(self, other: Size) -> bool:
        """Return True if this size is at least as large as ``other`` on both axes."""
        return self.width >= other.width and self.height >= other.height

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (width, height) tuple."""
        return (self.width, self.height)

    @classmethod
    def from_tuple(cls, size: tuple[float, float]) -> Self:
        """Create Size from (width, height) tuple."""
        return cls(width=size[0], height=size[1])


class Rect(BaseModel, frozen=True):
    """An axis-aligned rectangle in map pixel coordinates.

    Represents a bounding box defined by top-left corner (x, y) and
    dimensions (width, height).

    The rectangle is defined as:
    - Top-left: (x, y)
    - Bottom-right: (x + width, y + height)

    Attributes:
        x: Left edge X coordinate.
        y: Top edge Y coordinate.
        width: Horizontal extent in pixels (>= 0).
        height: Vertical extent in pixels (>= 0).
    """

    EMPTY: ClassVar[Rect]

    x: float = Field(..., description="Left edge X coordinate")
    y: float = Field(..., description="Top edge Y coordinate")
    width: float = Field(..., ge=0, description="Width in pixels")
    height: float = Field(..., ge=0, description="Height in pixels")

    @property
    def area(self) -> float:
        """Calculate the area in square pixels."""
        return self.width * self.height

    @property
    def right(self) -> float:
        """Return the X coordinate of the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Return the Y coordinate of the bottom edge."""
        return self.y + self.height

    @property
    def top_left(self) -> Point:
        return Point(x=self.x, y=self.y)

    @property
    def bottom_right(self) -> Point:
        return Point(x=self.right, y=self.bottom)

    @property
    def size(self) -> Size:
        """Return the dimensions as a Size."""
        return Size(width=self.width, height=self.height)

    @property
    def center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Convert to (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    @classmethod
    def from_tuple(cls, bbox: tuple[float, float, float, float]) -> Self:
        """Create Rect from (x, y, width, height) tuple."""
        return cls(x=bbox[0], y=bbox[1], width=bbox[2], height=bbox[3])

    @classmethod
    def from_points(cls, first: Point, second: Point) -> Self:
        """Create the Rect spanning two corner points.

        The corners may be given in any order; the result is normalised so
        width and height are never negative.

        Args:
            first: One corner.
            second: The opposite corner.

        Returns:
            Rect spanning both points.
        """
        left = min(first.x, second.x)
        top = min(first.y, second.y)
        return cls(
            x=left,
            y=top,
            width=max(first.x, second.x) - left,
            height=max(first.y, second.y) - top,
        )

    @classmethod
    def from_size(cls, size: Size, origin: Point | None = None) -> Self:
        """Create a Rect of ``size`` anchored at ``origin`` (default (0, 0))."""
        origin = origin or Point(x=0, y=0)
        return cls(x=origin.x, y=origin.y, width=size.width, height=size.height)

    def offset(self, dx: float, dy: float) -> Rect:
        """Return this rect translated by (dx, dy)."""
        return Rect(x=self.x + dx, y=self.y + dy, width=self.width, height=self.height)

    def contains_point(self, point: Point) -> bool:
        """Check if a point is inside this rect (left/top inclusive).

        Args:
            point: Point to check.

        Returns:
            True if point is within rect bounds.
        """
        return self.x <= point.x < self.right and self.y <= point.y < self.bottom

    def intersects_with(self, other: Rect) -> bool:
        """Check if this rect overlaps another.

        Rects that only share an edge do not intersect, so a tile sitting
        exactly next to the view is not considered visible.

        Args:
            other: Another Rect to check intersection with.

        Returns:
            True if the rects have any overlapping area.
        """
        if self.is_empty or other.is_empty:
            return False
        return not (
            other.x >= self.right
            or other.right <= self.x
            or other.y >= self.bottom
            or other.bottom <= self.y
        )

    def intersection(self, other: Rect) -> Rect | None:
        """Compute the intersection of two rects.

        Args:
            other: Another Rect to intersect with.

        Returns:
            Rect representing the overlap, or None if no intersection.
        """
        if not self.intersects_with(other):
            return None

        new_x = max(self.x, other.x)
        new_y = max(self.y, other.y)
        new_right = min(self.right, other.right)
        new_bottom = min(self.bottom, other.bottom)

        return Rect(
            x=new_x,
            y=new_y,
            width=new_right - new_x,
            height=new_bottom - new_y,
        )


Rect.EMPTY = Rect(x=0, y=0, width=0, height=0)
