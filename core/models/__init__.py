# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - availability.py: Availability updates and reminder dispatch reports
# - email.py: Outgoing email options and delivery results
# - registration.py: Approval statuses, roles and moderation results
# - contact.py: Company contact requests
# - geo.py: Coordinates and distance responses
# - media.py: Cloudinary images and Vercel Blob files
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Availability Models - Reminder scheduling
# -----------------------------------------------------------------------------
from .availability import (
    AvailabilityUpdate,
    AvailabilityUpdateResult,
    DispatchItem,
    DispatchReport,
    ReminderEmailData,
    ReminderStatus,
)

# -----------------------------------------------------------------------------
# Email Models - Transactional email through Resend
# -----------------------------------------------------------------------------
from .email import (
    BulkEmailResult,
    CancelEmailRequest,
    EmailOptions,
    EmailResult,
    EmailServiceStatus,
    EmailUsage,
)

# -----------------------------------------------------------------------------
# Registration Models - Admin review workflow
# -----------------------------------------------------------------------------
from .registration import (
    ApprovalStatus,
    CompanyStatusUpdate,
    ModerationResult,
    ProfileType,
    RegistrationSubmit,
    RejectionRequest,
    SearchableUpdate,
    UserRole,
)

# -----------------------------------------------------------------------------
# Contact Models - Company inquiries
# -----------------------------------------------------------------------------
from .contact import (
    ContactRequestCreate,
    ContactStatus,
    ContactStatusUpdate,
)

# -----------------------------------------------------------------------------
# Geo Models - Distance lookups
# -----------------------------------------------------------------------------
from .geo import (
    BatchDistanceRequest,
    CityDistance,
    Coordinates,
    DistanceResponse,
)

# -----------------------------------------------------------------------------
# Media Models - Images and documents
# -----------------------------------------------------------------------------
from .media import (
    BlobFile,
    ImageDeleteRequest,
    ImageUploadResult,
    ProfileImage,
    TermsDeleteRequest,
    TermsUploadResult,
)

__all__ = [
    # Availability
    "AvailabilityUpdate",
    "AvailabilityUpdateResult",
    "DispatchItem",
    "DispatchReport",
    "ReminderEmailData",
    "ReminderStatus",
    # Email
    "BulkEmailResult",
    "CancelEmailRequest",
    "EmailOptions",
    "EmailResult",
    "EmailServiceStatus",
    "EmailUsage",
    # Registration
    "ApprovalStatus",
    "CompanyStatusUpdate",
    "ModerationResult",
    "ProfileType",
    "RegistrationSubmit",
    "RejectionRequest",
    "SearchableUpdate",
    "UserRole",
    # Contact
    "ContactRequestCreate",
    "ContactStatus",
    "ContactStatusUpdate",
    # Geo
    "BatchDistanceRequest",
    "CityDistance",
    "Coordinates",
    "DistanceResponse",
    # Media
    "BlobFile",
    "ImageDeleteRequest",
    "ImageUploadResult",
    "ProfileImage",
    "TermsDeleteRequest",
    "TermsUploadResult",
]
