# =============================================================================
# core/models/availability.py - Availability & Reminder Schemas
# =============================================================================
# These models define the contract for availability updates and for the
# periodic reminder dispatch:
# - AvailabilityUpdate: what a professional sends when changing availability
# - ReminderStatus: lifecycle of a scheduled_availability_emails row
# - ReminderEmailData: the JSON payload stored on each reminder row
# - AvailabilityUpdateResult / DispatchReport: service results
#
# Reminder lifecycle:
#   pending   -> scheduled -> sent      (handed to Resend ahead of time)
#   pending   -> sent                   (date already reached at dispatch)
#   pending   -> failed
#   any       -> cancelled              (availability changed again)
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ReminderStatus(str, Enum):
    """States of a scheduled availability reminder."""
    PENDING = "pending"
    SCHEDULED = "scheduled"
    SENT = "sent"
    FAILED = "failed"
    CANCELLED = "cancelled"


class AvailabilityUpdate(BaseModel):
    """
    Request body for PUT /professionals/{user_id}/availability.

    Example:
        {"available": false, "available_from": "2025-09-01T00:00:00Z"}
    """

    available: bool = Field(
        ...,
        description="Whether the professional is available right now"
    )

    available_from: datetime | None = Field(
        default=None,
        description="Date the professional becomes available again (required when available=false)"
    )


class ReminderEmailData(BaseModel):
    """
    JSON stored in scheduled_availability_emails.email_data.

    Field names match the stored JSON keys.
    """

    email: str
    user_name: str
    availableFrom: str
    profile_url: str = ""


class AvailabilityUpdateResult(BaseModel):
    """Outcome of an availability change."""

    available: bool
    available_from: str | None = Field(
        default=None,
        description="Stored availablefrom value (YYYY-MM-DD) or null"
    )
    reminder_status: ReminderStatus | None = Field(
        default=None,
        description="Status of the reminder created for this change, if any"
    )
    resend_email_id: str | None = None
    message: str


class DispatchItem(BaseModel):
    """Per-row outcome of a dispatch run."""
    id: str
    success: bool
    error: str | None = None


class DispatchReport(BaseModel):
    """
    Summary returned by the reminder dispatch job.

    Example:
        {"processed": 2, "success_count": 1, "failure_count": 1,
         "results": [{"id": "...", "success": true, "error": null}, ...]}
    """

    processed: int = 0
    success_count: int = 0
    failure_count: int = 0
    results: list[DispatchItem] = Field(default_factory=list)

    def record(self, row_id: str, success: bool, error: str | None = None) -> None:
        self.processed += 1
        if success:
            self.success_count += 1
        else:
            self.failure_count += 1
        self.results.append(DispatchItem(id=row_id, success=success, error=error))
