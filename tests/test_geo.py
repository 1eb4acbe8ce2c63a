# =============================================================================
# tests/test_geo.py - Distance Math Tests
# =============================================================================
# Run with: pytest tests/test_geo.py -v
# =============================================================================

import pytest

from lib.geo import EARTH_RADIUS_KM, format_distance, haversine_distance


class TestHaversineDistance:
    """Tests for haversine_distance."""

    def test_same_point_is_zero(self):
        assert haversine_distance(47.4979, 19.0402, 47.4979, 19.0402) == 0.0

    def test_budapest_to_szeged(self):
        """Known pair, about 160 km as the crow flies."""
        # Arrange
        budapest = (47.4979, 19.0402)
        szeged = (46.2530, 20.1414)

        # Act
        km = haversine_distance(*budapest, *szeged)

        # Assert
        assert km == pytest.approx(161, abs=2)

    def test_is_symmetric(self):
        a = haversine_distance(51.5074, -0.1278, 48.8566, 2.3522)
        b = haversine_distance(48.8566, 2.3522, 51.5074, -0.1278)
        assert a == pytest.approx(b)

    def test_antipodes_are_half_circumference(self):
        km = haversine_distance(0, 0, 0, 180)
        assert km == pytest.approx(3.141592653589793 * EARTH_RADIUS_KM)


class TestFormatDistance:
    """Tests for format_distance."""

    @pytest.mark.parametrize("km,expected", [
        (0.0, "0m"),
        (0.42, "420m"),
        (0.9994, "999m"),
        (0.0005, "1m"),
        (1.0, "1.0km"),
        (3.14159, "3.1km"),
        (9.94, "9.9km"),
        (10.0, "10km"),
        (123.4, "123km"),
        (123.6, "124km"),
        (12.5, "13km"),
    ])
    def test_formats(self, km, expected):
        assert format_distance(km) == expected
