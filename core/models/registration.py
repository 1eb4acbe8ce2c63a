# =============================================================================
# core/models/registration.py - Registration Review Schemas
# =============================================================================
# New professional and company accounts pass an admin approval gate.
# registration_requests.status, professional_profiles.profile_status and
# company_profiles.profile_status all use ApprovalStatus.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserRole(str, Enum):
    ADMIN = "admin"
    PROFESSIONAL = "professional"
    USER = "user"
    COMPANY = "company"


class ProfileType(str, Enum):
    PROFESSIONAL = "professional"
    COMPANY = "company"


class RegistrationSubmit(BaseModel):
    """Body of POST /registrations."""
    profile_type: ProfileType = ProfileType.PROFESSIONAL


class RejectionRequest(BaseModel):
    """Optional reason quoted in the rejection email."""
    reason: str | None = Field(default=None, max_length=1000)


class CompanyStatusUpdate(BaseModel):
    """Body of PUT /registrations/companies/{company_id}/status."""
    status: ApprovalStatus = Field(
        ...,
        description="approved or rejected"
    )
    reason: str | None = Field(default=None, max_length=1000)


class SearchableUpdate(BaseModel):
    """Body of PUT /professionals/{user_id}/searchable."""
    is_searchable: bool


class ModerationResult(BaseModel):
    """
    Outcome of a moderation action.

    The action itself succeeded; email_sent reports whether the
    notification went out.
    """

    user_id: str
    status: ApprovalStatus
    email_sent: bool = False
    email_error: str | None = None
    message: str
