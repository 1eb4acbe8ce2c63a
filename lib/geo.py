# =============================================================================
# lib/geo.py - Great-Circle Distance Helpers
# =============================================================================
# Pure functions, no I/O. The cached, geocoder-backed lookups live in
# core/services/geo_service.py.
# =============================================================================

import math

EARTH_RADIUS_KM = 6371.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distance between two points on Earth using the Haversine formula.

    Args:
        lat1, lon1: First point in decimal degrees
        lat2, lon2: Second point in decimal degrees

    Returns:
        Distance in kilometers
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def format_distance(distance_km: float) -> str:
    """
    Format a distance for display.

    Under 1 km in metres, under 10 km with one decimal, otherwise whole km.

    Example:
        >>> format_distance(0.42), format_distance(3.14159), format_distance(123.6)
        ('420m', '3.1km', '124km')
    """
    if distance_km < 1:
        return f"{_round_half_up(distance_km * 1000)}m"
    if distance_km < 10:
        return f"{distance_km:.1f}km"
    return f"{_round_half_up(distance_km)}km"


def _round_half_up(value: float) -> int:
    # round() would bank 0.5 towards even
    return int(math.floor(value + 0.5))
