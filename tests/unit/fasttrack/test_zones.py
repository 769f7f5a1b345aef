"""
Tests for the zone catalogue and calculator in `fasttrack/domain/zones.py`.

Covers:
- Boundary exactness at the first threshold
- Fallback to the first zone before any boundary (and for negative elapsed)
- Monotonicity of zone_for (property-based)
- Progress clamping and zero-goal handling
- Time in zone, next zone and lookup by name
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fasttrack.domain.models import HOUR
from fasttrack.domain.zones import (
    ANABOLIC,
    AUTOPHAGY,
    CATABOLIC,
    DEEP_AUTOPHAGY,
    FAT_BURNING,
    ZONES,
    next_zone,
    time_in_current_zone,
    zone_by_name,
    zone_for,
    zone_progress,
)

elapsed_seconds = st.floats(
    min_value=-10 * HOUR, max_value=200 * HOUR, allow_nan=False, allow_infinity=False
)


class TestZoneCatalogue:
    def test_thresholds_strictly_increase(self) -> None:
        thresholds = [zone.threshold_seconds for zone in ZONES]
        assert thresholds == sorted(thresholds)
        assert len(set(thresholds)) == len(thresholds)

    def test_catalogue_order(self) -> None:
        assert [zone.name for zone in ZONES] == [
            "Anabolic",
            "Catabolic",
            "Fat Burning",
            "Ketosis",
            "Autophagy",
            "Deep Autophagy",
        ]

    def test_zones_are_immutable(self) -> None:
        with pytest.raises(Exception):
            ANABOLIC.name = "Renamed"  # type: ignore[misc]


class TestZoneFor:
    def test_zero_elapsed_is_first_zone(self) -> None:
        assert zone_for(0) == ANABOLIC

    def test_negative_elapsed_is_first_zone(self) -> None:
        assert zone_for(-5000) == ANABOLIC

    def test_first_boundary_is_exact(self) -> None:
        assert zone_for(4 * HOUR - 1) == ANABOLIC
        assert zone_for(4 * HOUR) == CATABOLIC

    def test_later_boundaries(self) -> None:
        assert zone_for(12 * HOUR - 1) == CATABOLIC
        assert zone_for(12 * HOUR) == FAT_BURNING

    def test_last_zone_is_sticky(self) -> None:
        assert zone_for(72 * HOUR) == DEEP_AUTOPHAGY
        assert zone_for(500 * HOUR) == DEEP_AUTOPHAGY

    @given(a=elapsed_seconds, b=elapsed_seconds)
    def test_zone_for_is_monotonic(self, a: float, b: float) -> None:
        low, high = sorted((a, b))
        assert zone_for(low).threshold_seconds <= zone_for(high).threshold_seconds

    @given(elapsed=elapsed_seconds)
    def test_zone_for_always_returns_catalogue_zone(self, elapsed: float) -> None:
        assert zone_for(elapsed) in ZONES


class TestZoneProgress:
    def test_quarter_progress(self) -> None:
        assert zone_progress(4 * HOUR, 16 * HOUR) == pytest.approx(0.25)

    def test_progress_is_clamped(self) -> None:
        assert zone_progress(-100, 16 * HOUR) == 0.0
        assert zone_progress(20 * HOUR, 16 * HOUR) == 1.0

    def test_zero_goal_has_no_progress(self) -> None:
        assert zone_progress(1000, 0) == 0.0
        assert zone_progress(1000, -1) == 0.0

    @given(elapsed=elapsed_seconds, goal=st.floats(min_value=1.0, max_value=100 * HOUR))
    def test_progress_stays_in_unit_interval(self, elapsed: float, goal: float) -> None:
        assert 0.0 <= zone_progress(elapsed, goal) <= 1.0


class TestZoneNavigation:
    def test_time_in_first_zone_is_elapsed(self) -> None:
        assert time_in_current_zone(3600) == 3600

    def test_time_in_zone_after_boundary(self) -> None:
        assert time_in_current_zone(5 * HOUR) == pytest.approx(1 * HOUR)

    def test_next_zone(self) -> None:
        assert next_zone(0) == CATABOLIC
        assert next_zone(30 * HOUR) == DEEP_AUTOPHAGY
        assert next_zone(80 * HOUR) is None

    def test_zone_by_name(self) -> None:
        assert zone_by_name("Autophagy") == AUTOPHAGY
        with pytest.raises(KeyError):
            zone_by_name("Hibernation")
