# =============================================================================
# app/routers/distances.py - City Distance Endpoints
# =============================================================================
# Distances between cities through the geocode and distance caches.
# Unknown cities yield distance_km = null rather than an error.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from core.models.geo import BatchDistanceRequest, CityDistance, DistanceResponse
from core.services.geo_service import GeoService
from lib.geo import format_distance

router = APIRouter()


def _formatted(km: float | None) -> str | None:
    return format_distance(km) if km is not None else None


@router.get("", response_model=DistanceResponse)
def get_distance(
    from_city: Annotated[str, Query(alias="from", min_length=1)],
    to_city: Annotated[str, Query(alias="to", min_length=1)],
):
    """Distance between two cities in kilometers."""
    km = GeoService.calculate_cached_distance(from_city, to_city)
    return DistanceResponse(
        from_city=from_city,
        to_city=to_city,
        distance_km=km,
        formatted=_formatted(km),
    )


@router.post("/batch", response_model=list[CityDistance])
def batch_distances(request: BatchDistanceRequest):
    """Distances from one origin to many cities, in input order."""
    distances = GeoService.batch_calculate_distances(request.origin, request.cities)
    return [
        CityDistance(city=city, distance_km=km, formatted=_formatted(km))
        for city, km in zip(request.cities, distances)
    ]
