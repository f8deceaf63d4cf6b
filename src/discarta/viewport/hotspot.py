"""Hot spots: the anchor point of a marker plotted at a GeoPoint.

A hot spot says which point inside an element sits exactly on the
element's geographic location, one value per axis. The default is the
center (50%), which suits most icons; pins and markers usually want the
bottom center instead (50% horizontally, 100% vertically).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Self

from pydantic import BaseModel, Field, model_validator

from discarta.geometry.precision import is_in_range, is_same_as

_PERCENT_TOLERANCE = 0.01
_PIXEL_TOLERANCE = 1.0

# Length suffixes accepted in addition to "px" and "%", as pixels per unit
_PIXEL_EQUIVALENTS: dict[str, float] = {
    "in": 96.0,
    "cm": 96.0 / 2.54,
    "pt": 96.0 / 72.0,
}


class HotSpotUnit(str, Enum):
    """How a HotSpot value is interpreted."""

    PIXEL = "px"  # display units from the top/left edge
    PERCENT = "%"  # fraction of the element's size, 0 to 1


class HotSpot(BaseModel, frozen=True):
    """Offset of an element's anchor along one axis.

    Attributes:
        value: Pixels for ``PIXEL`` (>= 0), a fraction in [0, 1] for ``PERCENT``.
        unit: Interpretation of ``value``.

    Example:
        >>> HotSpot.parse("25%").apply(200)
        50.0
        >>> HotSpot(value=12).apply(200)
        12.0
    """

    CENTER: ClassVar[HotSpot]

    value: float = Field(..., description="Offset in pixels or as a fraction")
    unit: HotSpotUnit = Field(default=HotSpotUnit.PIXEL, description="Unit of value")

    @model_validator(mode="after")
    def _validate_value(self) -> Self:
        if self.is_proportional and not is_in_range(
            self.value, 0, 1, _PERCENT_TOLERANCE
        ):
            raise ValueError(f"{self.value} must be between 0 and 1")
        if self.is_absolute and self.value < 0:
            raise ValueError(f"{self.value} must be greater than or equal to 0")
        return self

    @property
    def is_absolute(self) -> bool:
        return self.unit is HotSpotUnit.PIXEL

    @property
    def is_proportional(self) -> bool:
        return self.unit is HotSpotUnit.PERCENT

    def apply(self, dimension: float) -> float:
        """Offset from the top/left edge of an element ``dimension`` long."""
        return float(self.value) if self.is_absolute else dimension * self.value

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse a hot spot from text.

        Accepted forms are ``"50%"``, ``"12px"``, ``"12"`` (pixels) and
        lengths in ``in``, ``cm`` or ``pt`` which are converted to pixels.

        Raises:
            ValueError: If the text has no parsable number or the value is
                out of range for its unit.
        """
        cleaned = text.strip().lower()
        unit = HotSpotUnit.PIXEL
        factor = 1.0

        if cleaned.endswith("%"):
            unit = HotSpotUnit.PERCENT
            factor = 0.01
            cleaned = cleaned[:-1]
        elif cleaned.endswith("px"):
            cleaned = cleaned[:-2]
        else:
            for suffix, pixels in _PIXEL_EQUIVALENTS.items():
                if cleaned.endswith(suffix):
                    factor = pixels
                    cleaned = cleaned[: -len(suffix)]
                    break

        try:
            number = float(cleaned.strip())
        except ValueError:
            raise ValueError(f"Cannot parse hot spot from {text!r}") from None

        return cls(value=number * factor, unit=unit)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, HotSpot):
            return NotImplemented
        precision = _PIXEL_TOLERANCE if self.is_absolute else _PERCENT_TOLERANCE
        return self.unit is other.unit and is_same_as(self.value, other.value, precision)

    def __hash__(self) -> int:
        return hash(self.unit)

    def __str__(self) -> str:
        if self.is_absolute:
            return f"{self.value:.0f} px"
        return f"{self.value:.0%}"


HotSpot.CENTER = HotSpot(value=0.5, unit=HotSpotUnit.PERCENT)
