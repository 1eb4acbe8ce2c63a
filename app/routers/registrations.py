# =============================================================================
# app/routers/registrations.py - Registration Review Endpoints
# =============================================================================
# Submission by the applicant and the admin moderation actions for
# professionals and companies. Moderation emails never fail the action;
# each response reports whether the email went out.
# =============================================================================

import logging
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel

from app.auth import AuthUser, get_current_user, require_admin
from core.models.registration import (
    ApprovalStatus,
    CompanyStatusUpdate,
    ModerationResult,
    RegistrationSubmit,
    RejectionRequest,
)
from core.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter()


class SubmitResponse(BaseModel):
    """Registration request plus the admin notification task."""
    registration: dict[str, Any]
    notification_queued: bool
    task_id: str | None = None


UserIdPath = Annotated[UUID, Path(description="Applicant's user id")]


# =============================================================================
# Applicant
# =============================================================================

@router.post("", response_model=SubmitResponse)
def submit_registration(
    request: RegistrationSubmit | None = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Submit the caller's profile for review.

    Admins are notified by email in the background.
    """
    profile_type = (request or RegistrationSubmit()).profile_type
    registration = RegistrationService.submit(user.id, profile_type)

    try:
        from workers.tasks import notify_admins_of_registration

        result = notify_admins_of_registration.delay(str(user.id), profile_type.value)
        return SubmitResponse(registration=registration, notification_queued=True, task_id=result.id)

    except Exception as e:
        logger.exception(f"Failed to queue admin notification for {user.id}: {e}")
        return SubmitResponse(registration=registration, notification_queued=False)


# =============================================================================
# Admin
# =============================================================================

@router.get("")
async def list_registrations(
    status: Annotated[ApprovalStatus | None, Query(description="Filter by status")] = None,
    admin: AuthUser = Depends(require_admin),
) -> list[dict[str, Any]]:
    """Registration requests with applicant names and emails."""
    return RegistrationService.list_requests(status)


@router.post("/{user_id}/approve", response_model=ModerationResult)
def approve_registration(user_id: UserIdPath, admin: AuthUser = Depends(require_admin)):
    """Approve a professional and send the approval email."""
    return RegistrationService.approve_professional(user_id, admin.id)


@router.post("/{user_id}/reject", response_model=ModerationResult)
def reject_registration(
    user_id: UserIdPath,
    request: RejectionRequest | None = None,
    admin: AuthUser = Depends(require_admin),
):
    """Reject a professional, optionally with a reason for the email."""
    reason = request.reason if request else None
    return RegistrationService.reject_professional(user_id, admin.id, reason)


@router.post("/{user_id}/reset", response_model=ModerationResult)
def reset_registration(user_id: UserIdPath, admin: AuthUser = Depends(require_admin)):
    """Put a professional back in the review queue."""
    return RegistrationService.reset_professional(user_id, admin.id)


@router.post("/{user_id}/ban", response_model=ModerationResult)
def ban_professional(user_id: UserIdPath, admin: AuthUser = Depends(require_admin)):
    """Suspend a professional's profile."""
    return RegistrationService.ban_professional(user_id, admin.id)


@router.put("/companies/{company_id}/status", response_model=ModerationResult)
def update_company_status(
    company_id: Annotated[UUID, Path(description="Company profile id")],
    request: CompanyStatusUpdate,
    admin: AuthUser = Depends(require_admin),
):
    """Approve, reject or reset a company profile."""
    return RegistrationService.set_company_status(
        company_id,
        request.status,
        admin.id,
        reason=request.reason,
    )
