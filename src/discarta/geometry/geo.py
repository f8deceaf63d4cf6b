"""Geographic primitives for DisCarta.

GeoPoint, GeoVector and GeoArea are immutable Pydantic models describing
positions, displacements and bounding rectangles in WGS84 degrees.

Equality is precision-bounded: two values are equal when every component
differs by less than ``DEGREE_PRECISION`` (1e-5 degrees, about a metre).
This tolerates the drift introduced by repeated projection round-trips.
Hashes are computed on values rounded to the same precision; values
straddling a rounding boundary can compare equal yet hash differently, so
do not rely on these models as exact dict keys.

Out-of-range latitudes and longitudes are accepted at construction and
reported by ``GeoPoint.is_valid``. The ``EMPTY`` sentinels use NaN and are
distinct from zero values.
"""

from __future__ import annotations

import math
from typing import Any, ClassVar, Self

from pydantic import BaseModel, Field

from discarta.geometry.precision import (
    DEGREE_PRECISION,
    MEAN_EARTH_RADIUS,
    is_in_range,
    is_same_as,
    to_degrees,
    to_radians,
)

_HASH_DIGITS = 5


def _rounded(value: float) -> float | str:
    return "nan" if math.isnan(value) else round(value, _HASH_DIGITS)


def _ieee_divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE 754 semantics instead of raising ZeroDivisionError."""
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


class GeoVector(BaseModel, frozen=True):
    """The change in latitude/longitude between two points.

    Attributes:
        delta_latitude: Change in latitude (degrees).
        delta_longitude: Change in longitude (degrees).
    """

    EMPTY: ClassVar[GeoVector]
    ZERO: ClassVar[GeoVector]

    delta_latitude: float = Field(..., description="Change in latitude (degrees)")
    delta_longitude: float = Field(..., description="Change in longitude (degrees)")

    @property
    def is_empty(self) -> bool:
        return math.isnan(self.delta_latitude) or math.isnan(self.delta_longitude)

    @property
    def magnitude(self) -> float:
        """Length of the vector in degrees (Pythagoras)."""
        return math.sqrt(
            self.delta_latitude * self.delta_latitude
            + self.delta_longitude * self.delta_longitude
        )

    @property
    def angle(self) -> float:
        """Angle of the vector in degrees.

        A purely north/south vector (``delta_longitude == 0``) yields +/-90,
        and the zero vector yields NaN.
        """
        return to_degrees(
            math.atan(_ieee_divide(self.delta_latitude, self.delta_longitude))
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, GeoVector):
            return NotImplemented
        if self.is_empty or other.is_empty:
            return self.is_empty and other.is_empty
        return is_same_as(
            self.delta_latitude, other.delta_latitude, DEGREE_PRECISION
        ) and is_same_as(self.delta_longitude, other.delta_longitude, DEGREE_PRECISION)

    def __hash__(self) -> int:
        if self.is_empty:
            return hash("GeoVector.EMPTY")
        return hash((_rounded(self.delta_latitude), _rounded(self.delta_longitude)))

    def __add__(self, other: GeoVector) -> GeoVector:
        if not isinstance(other, GeoVector):
            return NotImplemented
        return GeoVector(
            delta_latitude=self.delta_latitude + other.delta_latitude,
            delta_longitude=self.delta_longitude + other.delta_longitude,
        )

    def __mul__(self, factor: float) -> GeoVector:
        return GeoVector(
            delta_latitude=self.delta_latitude * factor,
            delta_longitude=self.delta_longitude * factor,
        )

    def __str__(self) -> str:
        return f"[dLat: {self.delta_latitude}, dLon: {self.delta_longitude}]"


class GeoPoint(BaseModel, frozen=True):
    """A point on the map in WGS84 degrees.

    Attributes:
        latitude: Degrees north of the equator (-90 to 90 when valid).
        longitude: Degrees east of Greenwich (-180 to 180 when valid).
    """

    EMPTY: ClassVar[GeoPoint]

    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")

    @classmethod
    def from_tuple(cls, coord: tuple[float, float]) -> Self:
        """Create GeoPoint from (latitude, longitude) tuple."""
        return cls(latitude=coord[0], longitude=coord[1])

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)

    @property
    def is_empty(self) -> bool:
        return math.isnan(self.latitude) or math.isnan(self.longitude)

    @property
    def is_valid(self) -> bool:
        """Whether the point lies within [-90, 90] x [-180, 180]."""
        return is_in_range(self.latitude, -90, 90, DEGREE_PRECISION) and is_in_range(
            self.longitude, -180, 180, DEGREE_PRECISION
        )

    def distance_to(self, other: GeoPoint) -> float:
        """Great-circle distance in metres using the haversine formula.

        Args:
            other: The destination point.

        Returns:
            Distance along the surface of a sphere with the mean Earth radius.
        """
        lat1 = to_radians(self.latitude)
        lat2 = to_radians(other.latitude)
        delta_lat = to_radians(other.latitude - self.latitude)
        delta_lon = to_radians(other.longitude - self.longitude)

        a = math.sin(delta_lat / 2) * math.sin(delta_lat / 2) + math.cos(
            lat1
        ) * math.cos(lat2) * math.sin(delta_lon / 2) * math.sin(delta_lon / 2)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return MEAN_EARTH_RADIUS * c

    def bearing_to(self, other: GeoPoint) -> float:
        """Initial bearing (forward azimuth) towards ``other`` in degrees.

        Returns:
            Bearing in the range (-180, 180], 0 meaning due north.
        """
        lat1 = to_radians(self.latitude)
        lat2 = to_radians(other.latitude)
        delta_lon = to_radians(other.longitude - self.longitude)

        y = math.sin(delta_lon) * math.cos(lat2)
        x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(
            lat2
        ) * math.cos(delta_lon)

        return to_degrees(math.atan2(y, x))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, GeoPoint):
            return NotImplemented
        if self.is_empty or other.is_empty:
            return self.is_empty and other.is_empty
        return is_same_as(self.latitude, other.latitude, DEGREE_PRECISION) and is_same_as(
            self.longitude, other.longitude, DEGREE_PRECISION
        )

    def __hash__(self) -> int:
        if self.is_empty:
            return hash("GeoPoint.EMPTY")
        return hash((_rounded(self.latitude), _rounded(self.longitude)))

    def __sub__(self, other: GeoPoint | GeoVector) -> Any:
        if isinstance(other, GeoPoint):
            return GeoVector(
                delta_latitude=self.latitude - other.latitude,
                delta_longitude=self.longitude - other.longitude,
            )
        if isinstance(other, GeoVector):
            return GeoPoint(
                latitude=self.latitude - other.delta_latitude,
                longitude=self.longitude - other.delta_longitude,
            )
        return NotImplemented

    def __add__(self, other: GeoVector) -> GeoPoint:
        if not isinstance(other, GeoVector):
            return NotImplemented
        return GeoPoint(
            latitude=self.latitude + other.delta_latitude,
            longitude=self.longitude + other.delta_longitude,
        )

    def __str__(self) -> str:
        return f"[Lat: {self.latitude}, Lon: {self.longitude}]"


class GeoArea(BaseModel, frozen=True):
    """A rectangular geographic area.

    The area is anchored at its north-west corner and extends south and
    east by ``size``. A well formed area has a non-negative size; the
    result of intersecting two disjoint areas keeps its negative size so
    callers can tell (see ``is_degenerate``).

    Attributes:
        north_west: The anchor (top-left) corner.
        size: Extent southwards (delta_latitude) and eastwards
            (delta_longitude) of the anchor.
    """

    EMPTY: ClassVar[GeoArea]

    north_west: GeoPoint
    size: GeoVector

    @classmethod
    def from_bounds(cls, north: float, east: float, south: float, west: float) -> Self:
        """Create a GeoArea from its bounding latitudes and longitudes.

        Arguments given in the wrong order are normalised into a bounding box.
        """
        return cls.from_points(
            GeoPoint(latitude=north, longitude=west),
            GeoPoint(latitude=south, longitude=east),
        )

    @classmethod
    def from_points(cls, *points: GeoPoint) -> Self:
        """Create the bounding GeoArea of a set of points.

        With no points the result is a zero-size area at (0, 0). If any of
        the points is empty the result is empty.
        """
        if not points:
            return cls(
                north_west=GeoPoint(latitude=0, longitude=0),
                size=GeoVector(delta_latitude=0, delta_longitude=0),
            )
        if any(point.is_empty for point in points):
            return cls(north_west=GeoPoint.EMPTY, size=GeoVector.EMPTY)

        north = max(point.latitude for point in points)
        south = min(point.latitude for point in points)
        east = max(point.longitude for point in points)
        west = min(point.longitude for point in points)

        return cls(
            north_west=GeoPoint(latitude=north, longitude=west),
            size=GeoVector(delta_latitude=north - south, delta_longitude=east - west),
        )

    @property
    def is_empty(self) -> bool:
        return self.north_west.is_empty or self.size.is_empty

    @property
    def is_degenerate(self) -> bool:
        """True for a non-empty area with a negative extent on either axis."""
        return not self.is_empty and (
            self.size.delta_latitude < 0 or self.size.delta_longitude < 0
        )

    @property
    def north(self) -> float:
        return self.north_west.latitude

    @property
    def west(self) -> float:
        return self.north_west.longitude

    @property
    def south(self) -> float:
        return self.north_west.latitude - self.size.delta_latitude

    @property
    def east(self) -> float:
        return self.north_west.longitude + self.size.delta_longitude

    @property
    def north_east(self) -> GeoPoint:
        return GeoPoint(latitude=self.north, longitude=self.east)

    @property
    def south_west(self) -> GeoPoint:
        return GeoPoint(latitude=self.south, longitude=self.west)

    @property
    def south_east(self) -> GeoPoint:
        return GeoPoint(latitude=self.south, longitude=self.east)

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(
            latitude=self.north - self.size.delta_latitude / 2,
            longitude=self.west + self.size.delta_longitude / 2,
        )

    def contains_point(self, point: GeoPoint) -> bool:
        """Check if a point lies inside the area (edges inclusive)."""
        return is_in_range(
            point.latitude, self.south, self.north, DEGREE_PRECISION
        ) and is_in_range(point.longitude, self.west, self.east, DEGREE_PRECISION)

    def expand(self, dimensions: GeoVector) -> GeoArea:
        """Grow the area by ``dimensions`` while keeping its center fixed.

        Half of each delta is added on either side.

        Args:
            dimensions: Total growth in latitude and longitude. Negative
                values shrink the area.

        Returns:
            A new, larger GeoArea with the same center.
        """
        return GeoArea(
            north_west=GeoPoint(
                latitude=self.north + dimensions.delta_latitude / 2,
                longitude=self.west - dimensions.delta_longitude / 2,
            ),
            size=self.size + dimensions,
        )

    @staticmethod
    def intersection(first: GeoArea, second: GeoArea) -> GeoArea:
        """Calculate the overlap of two areas.

        The overlap is the component-wise min/max of the corners. Disjoint
        inputs produce a degenerate area (negative size) rather than an
        error; either input being empty produces ``GeoArea.EMPTY``.

        Args:
            first: The primary GeoArea.
            second: The secondary GeoArea.

        Returns:
            The GeoArea shared by both.
        """
        if first.is_empty or second.is_empty:
            return GeoArea.EMPTY

        north = min(first.north, second.north)
        east = min(first.east, second.east)
        south = max(first.south, second.south)
        west = max(first.west, second.west)

        return GeoArea(
            north_west=GeoPoint(latitude=north, longitude=west),
            size=GeoVector(delta_latitude=north - south, delta_longitude=east - west),
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, GeoArea):
            return NotImplemented
        return self.north_west == other.north_west and self.size == other.size

    def __hash__(self) -> int:
        return hash((self.north_west, self.size))

    def __str__(self) -> str:
        return f"{{{self.north_west}, {self.south_east}}}"


GeoVector.EMPTY = GeoVector(delta_latitude=math.nan, delta_longitude=math.nan)
GeoVector.ZERO = GeoVector(delta_latitude=0, delta_longitude=0)
GeoPoint.EMPTY = GeoPoint(latitude=math.nan, longitude=math.nan)
GeoArea.EMPTY = GeoArea(north_west=GeoPoint.EMPTY, size=GeoVector.EMPTY)
