"""Unit tests for precision-bounded comparisons."""

from __future__ import annotations

import math

from hypothesis import given
from hypothesis import strategies as st

from discarta.geometry.precision import (
    DEGREE_PRECISION,
    clip_to_range,
    is_in_range,
    is_same_as,
    to_degrees,
    to_radians,
)

finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False)


class TestComparisons:
    """Tests for tolerance-aware float comparisons."""

    def test_same_within_precision(self) -> None:
        """Test values closer than the precision are the same."""
        assert is_same_as(1.0, 1.000001, DEGREE_PRECISION)
        assert not is_same_as(1.0, 1.001, DEGREE_PRECISION)

    def test_nan_is_never_the_same(self) -> None:
        """Test NaN compares unequal to everything."""
        assert not is_same_as(math.nan, math.nan, DEGREE_PRECISION)

    def test_in_range_tolerates_edges(self) -> None:
        """Test values just outside the range count as inside."""
        assert is_in_range(90.000001, -90, 90, DEGREE_PRECISION)
        assert not is_in_range(90.1, -90, 90, DEGREE_PRECISION)


class TestClipToRange:
    """Tests for strict clamping."""

    def test_clamps_both_ends(self) -> None:
        """Test values are pulled into the closed range."""
        assert clip_to_range(-5, 0, 10) == 0
        assert clip_to_range(15, 0, 10) == 10
        assert clip_to_range(5, 0, 10) == 5

    @given(value=finite, low=finite, span=st.floats(min_value=0, max_value=1e6))
    def test_result_always_inside(self, value: float, low: float, span: float) -> None:
        """Test the clamped value never leaves the range."""
        high = low + span
        clipped = clip_to_range(value, low, high)
        assert low <= clipped <= high


class TestAngles:
    """Tests for degree/radian conversion."""

    def test_round_trip(self) -> None:
        """Test converting to radians and back."""
        assert math.isclose(to_radians(180), math.pi)
        assert math.isclose(to_degrees(to_radians(37.5)), 37.5)
