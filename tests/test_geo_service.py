# =============================================================================
# tests/test_geo_service.py - Geocode & Distance Cache Tests
# =============================================================================
# Cache RPCs are answered by FakeSupabase; Nominatim is replaced with a
# MagicMock geolocator.
#
# Run with: pytest tests/test_geo_service.py -v
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from geopy.exc import GeocoderServiceError, GeocoderTimedOut

from core.services.geo_service import GeoService
from lib.geo import haversine_distance

CITIES = {
    "Budapest": (47.4979, 19.0402),
    "Szeged": (46.2530, 20.1414),
    "Debrecen": (47.5316, 21.6273),
}


@pytest.fixture
def geolocator():
    """Nominatim stand-in that knows a few Hungarian cities."""
    locator = MagicMock()

    def _geocode(name):
        if name in CITIES:
            lat, lon = CITIES[name]
            return SimpleNamespace(latitude=lat, longitude=lon)
        return None

    locator.geocode.side_effect = _geocode
    with patch.object(GeoService, "get_geolocator", return_value=locator):
        yield locator


@pytest.fixture
def empty_cache(fake_db):
    """Every cache lookup misses; writes succeed."""
    fake_db.rpc_handlers.update({
        "get_or_cache_city_coordinates": [],
        "cache_city_coordinates": None,
        "get_cached_distance": None,
        "cache_distance": None,
    })
    return fake_db


class TestGeocodeCity:
    """Tests for GeoService.geocode_city."""

    def test_cache_hit_skips_nominatim(self, fake_db, geolocator):
        fake_db.rpc_handlers["get_or_cache_city_coordinates"] = [{"latitude": "46.253", "longitude": "20.1414"}]

        coords = GeoService.geocode_city("Szeged")

        assert coords.lat == pytest.approx(46.253)
        assert coords.lon == pytest.approx(20.1414)
        geolocator.geocode.assert_not_called()
        assert fake_db.rpc_calls[0] == ("get_or_cache_city_coordinates", {"city_name_param": "Szeged"})

    def test_cache_miss_geocodes_and_stores(self, empty_cache, geolocator):
        coords = GeoService.geocode_city("Budapest")

        assert (coords.lat, coords.lon) == CITIES["Budapest"]
        assert ("cache_city_coordinates", {
            "city_name_param": "Budapest",
            "lat_param": 47.4979,
            "lon_param": 19.0402,
        }) in empty_cache.rpc_calls

    def test_unknown_city(self, empty_cache, geolocator):
        assert GeoService.geocode_city("Atlantis") is None
        assert "cache_city_coordinates" not in empty_cache.rpc_names()

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name(self, fake_db, geolocator, name):
        assert GeoService.geocode_city(name) is None
        assert fake_db.rpc_calls == []

    @pytest.mark.parametrize("error", [GeocoderTimedOut("slow"), GeocoderServiceError("down")])
    def test_geocoder_errors_yield_none(self, empty_cache, geolocator, error):
        geolocator.geocode.side_effect = error

        assert GeoService.geocode_city("Budapest") is None

    def test_cache_write_failure_still_returns_coordinates(self, empty_cache, geolocator):
        empty_cache.rpc_handlers["cache_city_coordinates"] = Exception("permission denied")

        coords = GeoService.geocode_city("Szeged")

        assert (coords.lat, coords.lon) == CITIES["Szeged"]

    def test_cache_read_failure_falls_back_to_nominatim(self, empty_cache, geolocator):
        empty_cache.rpc_handlers["get_or_cache_city_coordinates"] = Exception("timeout")

        coords = GeoService.geocode_city("Szeged")

        assert coords is not None
        geolocator.geocode.assert_called_once_with("Szeged")

    @pytest.mark.parametrize("rows", [
        [{"latitude": None, "longitude": "20.1414"}],
        [{"lat": 1}],
        [{"latitude": "north", "longitude": "east"}],
        [{"latitude": 200, "longitude": 20}],
        [None],
    ])
    def test_malformed_cache_row_is_a_miss(self, empty_cache, geolocator, rows):
        empty_cache.rpc_handlers["get_or_cache_city_coordinates"] = rows

        coords = GeoService.geocode_city("Szeged")

        assert (coords.lat, coords.lon) == CITIES["Szeged"]
        geolocator.geocode.assert_called_once_with("Szeged")


class TestCalculateCachedDistance:
    """Tests for GeoService.calculate_cached_distance."""

    def test_cached_value_is_returned(self, fake_db, geolocator):
        fake_db.rpc_handlers["get_cached_distance"] = 161.2

        assert GeoService.calculate_cached_distance("Budapest", "Szeged") == 161.2
        geolocator.geocode.assert_not_called()

    @pytest.mark.parametrize("cached", [None, float("nan"), "n/a", True])
    def test_unusable_cache_values_are_misses(self, empty_cache, geolocator, cached):
        empty_cache.rpc_handlers["get_cached_distance"] = cached

        km = GeoService.calculate_cached_distance("Budapest", "Szeged")

        assert km == pytest.approx(haversine_distance(*CITIES["Budapest"], *CITIES["Szeged"]))

    def test_miss_computes_and_caches(self, empty_cache, geolocator):
        km = GeoService.calculate_cached_distance("Budapest", "Szeged")

        name, params = empty_cache.rpc_calls[-1]
        assert name == "cache_distance"
        assert params["city_a_param"] == "Budapest"
        assert params["city_b_param"] == "Szeged"
        assert params["distance_param"] == pytest.approx(km)

    def test_unknown_city_gives_none(self, empty_cache, geolocator):
        assert GeoService.calculate_cached_distance("Budapest", "Atlantis") is None
        assert "cache_distance" not in empty_cache.rpc_names()

    def test_empty_city_gives_none(self, fake_db, geolocator):
        assert GeoService.calculate_cached_distance("", "Szeged") is None


class TestBatchCalculateDistances:
    """Tests for GeoService.batch_calculate_distances."""

    def test_distances_in_input_order(self, empty_cache, geolocator):
        # Act
        result = GeoService.batch_calculate_distances(
            "Budapest", ["Szeged", "", "Atlantis", "Debrecen", "Szeged"],
        )

        # Assert
        assert len(result) == 5
        assert result[0] == pytest.approx(haversine_distance(*CITIES["Budapest"], *CITIES["Szeged"]))
        assert result[1] is None
        assert result[2] is None
        assert result[3] == pytest.approx(haversine_distance(*CITIES["Budapest"], *CITIES["Debrecen"]))
        assert result[4] == pytest.approx(result[0])

    def test_each_city_geocoded_once(self, empty_cache, geolocator):
        GeoService.batch_calculate_distances("Budapest", ["Szeged", "Szeged", "Budapest"])

        names = [call.args[0] for call in geolocator.geocode.call_args_list]
        assert sorted(names) == ["Budapest", "Szeged"]

    def test_unknown_origin_gives_all_none(self, empty_cache, geolocator):
        assert GeoService.batch_calculate_distances("Atlantis", ["Szeged", "Debrecen"]) == [None, None]

    def test_cached_distances_are_used(self, empty_cache, geolocator):
        empty_cache.rpc_handlers["get_cached_distance"] = lambda params: (
            42.0 if params["city_b_param"] == "Debrecen" else None
        )

        result = GeoService.batch_calculate_distances("Budapest", ["Szeged", "Debrecen"])

        assert result[1] == 42.0
        assert result[0] == pytest.approx(haversine_distance(*CITIES["Budapest"], *CITIES["Szeged"]))

    def test_error_for_one_city_only_affects_that_city(self, empty_cache, geolocator):
        def _lookup(params):
            if params["city_b_param"] == "Szeged":
                raise Exception("connection reset")
            return None

        empty_cache.rpc_handlers["get_cached_distance"] = _lookup

        result = GeoService.batch_calculate_distances("Budapest", ["Szeged", "Debrecen"])

        assert result[0] is None
        assert result[1] is not None

    def test_malformed_cache_row_does_not_break_batch(self, empty_cache, geolocator):
        # Arrange
        empty_cache.rpc_handlers["get_or_cache_city_coordinates"] = lambda params: (
            [{"lat": 1}] if params["city_name_param"] == "Budapest" else []
        )

        # Act
        result = GeoService.batch_calculate_distances("Budapest", ["Szeged"])

        # Assert
        assert result[0] == pytest.approx(haversine_distance(*CITIES["Budapest"], *CITIES["Szeged"]))
