# =============================================================================
# core/services/geo_service.py - City Geocoding & Distance Cache
# =============================================================================
# Resolves city names to coordinates and computes city-to-city distances.
# Both are cached in the database through stored procedures:
# - get_or_cache_city_coordinates / cache_city_coordinates
# - get_cached_distance / cache_distance
#
# Cache misses are geocoded with Nominatim (OpenStreetMap) through geopy.
# Every lookup degrades to None instead of raising: a distance is
# decoration on a listing and must never break it.
# =============================================================================

import logging
import math
from typing import Any

from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from geopy.geocoders import Nominatim

from app.config import settings
from core.models.geo import Coordinates
from lib.geo import haversine_distance
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


class GeoService:
    """
    Service for geocoding cities and caching distances between them.

    Example:
        km = GeoService.calculate_cached_distance("Budapest", "Szeged")
        kms = GeoService.batch_calculate_distances("Budapest", ["Szeged", "Pécs"])
    """

    _geolocator: Nominatim | None = None

    @classmethod
    def get_geolocator(cls) -> Nominatim:
        """Lazily build the shared Nominatim client."""
        if cls._geolocator is None:
            cls._geolocator = Nominatim(
                user_agent=settings.GEOCODER_USER_AGENT,
                timeout=settings.GEOCODER_TIMEOUT,
            )
        return cls._geolocator

    # -------------------------------------------------------------------------
    # Geocoding
    # -------------------------------------------------------------------------

    @classmethod
    def geocode_city(cls, city_name: str) -> Coordinates | None:
        """
        Resolve a city name to coordinates.

        Looks in the database cache first, then asks Nominatim and
        stores the answer.

        Args:
            city_name: Free-form city name ("Budapest", "Szeged, Hungary")

        Returns:
            Coordinates, or None when the city is unknown or lookup failed
        """
        if not city_name or not city_name.strip():
            return None

        try:
            cached = SupabaseClient.call_rpc(
                "get_or_cache_city_coordinates",
                {"city_name_param": city_name},
            )
            coords = _as_coordinates(cached)
            if coords is not None:
                return coords
        except SupabaseClientError as e:
            logger.warning(f"Coordinate cache lookup failed for {city_name}: {e}")

        logger.info(f"Geocoding {city_name} using Nominatim")
        try:
            location = cls.get_geolocator().geocode(city_name)
        except (GeocoderTimedOut, GeocoderServiceError) as e:
            logger.warning(f"Geocoding failed for {city_name}: {e}")
            return None

        if location is None:
            logger.info(f"No geocoding result for {city_name}")
            return None

        coords = Coordinates(lat=location.latitude, lon=location.longitude)

        try:
            SupabaseClient.call_rpc(
                "cache_city_coordinates",
                {
                    "city_name_param": city_name,
                    "lat_param": coords.lat,
                    "lon_param": coords.lon,
                },
            )
        except SupabaseClientError as e:
            logger.warning(f"Failed to cache coordinates for {city_name}: {e}")

        return coords

    # -------------------------------------------------------------------------
    # Distances
    # -------------------------------------------------------------------------

    @staticmethod
    def _cached_distance(city_a: str, city_b: str) -> float | None:
        """Distance stored for the pair, or None on a miss."""
        value = SupabaseClient.call_rpc(
            "get_cached_distance",
            {"city_a_param": city_a, "city_b_param": city_b},
        )
        return _as_distance(value)

    @staticmethod
    def _store_distance(city_a: str, city_b: str, distance: float) -> None:
        try:
            SupabaseClient.call_rpc(
                "cache_distance",
                {
                    "city_a_param": city_a,
                    "city_b_param": city_b,
                    "distance_param": distance,
                },
            )
        except SupabaseClientError as e:
            logger.warning(f"Failed to cache distance {city_a} -> {city_b}: {e}")

    @classmethod
    def calculate_cached_distance(cls, city_a: str, city_b: str) -> float | None:
        """
        Distance in kilometers between two cities.

        Returns:
            Kilometers, or None when either city cannot be geocoded
        """
        if not city_a or not city_b:
            return None

        try:
            cached = cls._cached_distance(city_a, city_b)
        except SupabaseClientError as e:
            logger.warning(f"Distance cache lookup failed: {e}")
            cached = None
        if cached is not None:
            return cached

        coords_a = cls.geocode_city(city_a)
        coords_b = cls.geocode_city(city_b)
        if coords_a is None or coords_b is None:
            return None

        distance = haversine_distance(coords_a.lat, coords_a.lon, coords_b.lat, coords_b.lon)
        cls._store_distance(city_a, city_b, distance)
        return distance

    @classmethod
    def batch_calculate_distances(
        cls,
        company_city: str,
        cities: list[str],
    ) -> list[float | None]:
        """
        Distances from one origin to many cities, in input order.

        Each distinct city is geocoded once. If the origin cannot be
        resolved every entry is None; a failure for one city only
        affects that entry.

        Args:
            company_city: Origin city
            cities: Destination cities (empty strings allowed)

        Returns:
            List of kilometers or None, same length as cities
        """
        unique = [c for c in dict.fromkeys([company_city, *cities]) if c]
        coordinates: dict[str, Coordinates] = {}
        for city in unique:
            coords = cls.geocode_city(city)
            if coords is not None:
                coordinates[city] = coords

        origin = coordinates.get(company_city)
        if origin is None:
            return [None for _ in cities]

        distances: list[float | None] = []
        for city in cities:
            if not city:
                distances.append(None)
                continue

            try:
                cached = cls._cached_distance(company_city, city)
                if cached is not None:
                    distances.append(cached)
                    continue

                target = coordinates.get(city)
                if target is None:
                    distances.append(None)
                    continue

                distance = haversine_distance(origin.lat, origin.lon, target.lat, target.lon)
                cls._store_distance(company_city, city, distance)
                distances.append(distance)

            except Exception as e:
                logger.error(f"Error calculating distance to {city}: {e}")
                distances.append(None)

        return distances


def _as_distance(value: Any) -> float | None:
    """Coerce an RPC scalar into a finite float, else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        distance = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(distance) else distance


def _as_coordinates(rows: Any) -> Coordinates | None:
    """First cached coordinate row as Coordinates; malformed rows count as a miss."""
    if not rows:
        return None
    try:
        row = rows[0]
        return Coordinates(lat=float(row["latitude"]), lon=float(row["longitude"]))
    except (KeyError, IndexError, TypeError, ValueError) as e:
        logger.warning(f"Ignoring malformed cached coordinates {rows!r}: {e}")
        return None
