# =============================================================================
# core/models/geo.py - Geocoding & Distance Schemas
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """A geocoded point in decimal degrees."""
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class DistanceResponse(BaseModel):
    """Distance between two cities; distance_km is null when either city is unknown."""
    model_config = ConfigDict(populate_by_name=True)

    from_city: str = Field(..., alias="from")
    to_city: str = Field(..., alias="to")
    distance_km: float | None = None
    formatted: str | None = None


class BatchDistanceRequest(BaseModel):
    """
    Body of POST /distances/batch.

    Example:
        {"origin": "Budapest", "cities": ["Szeged", "Debrecen", ""]}
    """
    origin: str = Field(..., min_length=1)
    cities: list[str] = Field(default_factory=list, max_length=500)


class CityDistance(BaseModel):
    city: str
    distance_km: float | None = None
    formatted: str | None = None
