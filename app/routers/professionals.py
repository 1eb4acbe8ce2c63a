# =============================================================================
# app/routers/professionals.py - Professional Directory Endpoints
# =============================================================================
# Public listing and profiles, availability updates by the professional
# (or an admin), contact requests from companies and visibility moderation.
# =============================================================================

import logging
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, ensure_self_or_admin, get_current_user, require_admin
from app.dependencies import rate_limited
from core.models.availability import AvailabilityUpdate, AvailabilityUpdateResult
from core.models.contact import ContactRequestCreate
from core.models.registration import SearchableUpdate
from core.services.availability_service import AvailabilityService
from core.services.contact_service import ContactService
from core.services.professional_service import ProfessionalService
from core.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_professionals(
    origin_city: Annotated[str | None, Query(alias="city", description="Rank by distance from this city")] = None,
    max_distance_km: Annotated[float | None, Query(alias="max_distance", gt=0)] = None,
    available_only: Annotated[bool, Query(alias="available")] = False,
) -> list[dict[str, Any]]:
    """
    Public professional directory.

    With ?city=..., each entry carries distance_km and a formatted
    distance, nearest first.
    """
    return ProfessionalService.list_public(
        origin_city=origin_city,
        max_distance_km=max_distance_km,
        available_only=available_only,
    )


@router.get("/{user_id}")
async def get_professional(
    user_id: Annotated[UUID, Path(description="Professional's user id")],
) -> dict[str, Any]:
    """Public profile with experience and education split into sections."""
    return ProfessionalService.get_public(user_id)


@router.put("/{user_id}/availability", response_model=AvailabilityUpdateResult)
def update_availability(
    user_id: Annotated[UUID, Path(description="Professional's user id")],
    request: AvailabilityUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Mark a professional available, or unavailable until a date.

    Going unavailable schedules a reminder email for the return date.

    Raises:
        400: available=false without available_from
        403: Not your profile
        404: No professional profile
    """
    ensure_self_or_admin(user, str(user_id))
    return AvailabilityService.update_availability(
        user_id,
        available=request.available,
        available_from=request.available_from,
    )


@router.post(
    "/{user_id}/contact",
    status_code=201,
    dependencies=[Depends(rate_limited("contact"))],
)
async def contact_professional(
    user_id: Annotated[UUID, Path(description="Professional's user id")],
    request: ContactRequestCreate,
) -> dict[str, Any]:
    """Send a contact request to a professional."""
    return ContactService.create(user_id, request)


@router.put("/{user_id}/searchable")
async def set_searchable(
    user_id: Annotated[UUID, Path(description="Professional's user id")],
    request: SearchableUpdate,
    admin: AuthUser = Depends(require_admin),
) -> dict[str, Any]:
    """Show or hide a professional in search (admin only)."""
    logger.info(f"Admin {admin.id} set searchable={request.is_searchable} for {user_id}")
    return RegistrationService.set_searchable(user_id, request.is_searchable)
