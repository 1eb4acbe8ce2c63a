# =============================================================================
# core/models/email.py - Email Schemas
# =============================================================================
# EmailOptions mirrors what Resend accepts; to/cc/bcc may be given as a
# single address or a list and are always stored as lists.
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class EmailOptions(BaseModel):
    """
    A single outgoing email.

    Example:
        {
            "to": "jane@example.com",
            "subject": "Welcome!",
            "html": "<p>Hello</p>",
            "scheduled_at": "2025-09-01T07:00:00Z"
        }
    """

    to: list[str] = Field(..., min_length=1, description="Recipient address(es)")
    subject: str = Field(..., min_length=1, max_length=998)
    html: str | None = None
    text: str | None = None
    reply_to: str | None = None
    cc: list[str] | None = None
    bcc: list[str] | None = None
    scheduled_at: datetime | None = Field(
        default=None,
        description="Deliver later instead of immediately"
    )

    @field_validator("to", "cc", "bcc", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> Any:
        if value is None or isinstance(value, list):
            return value
        return [value]


class EmailResult(BaseModel):
    """Outcome of a send or cancel call."""
    success: bool
    message_id: str | None = None
    error: str | None = None


class BulkEmailResult(BaseModel):
    """Outcome of sending several emails one after another."""
    success: bool
    results: list[EmailResult] = Field(default_factory=list)
    errors: list[dict[str, Any]] = Field(default_factory=list)


class CancelEmailRequest(BaseModel):
    """Request body for POST /email/cancel."""
    email_id: str = Field(..., min_length=1)


class EmailUsage(BaseModel):
    """In-process quota counters."""
    daily: int
    monthly: int
    daily_limit: int
    monthly_limit: int


class EmailServiceStatus(BaseModel):
    """Configuration status (never exposes secrets)."""
    configured: bool
    from_email_configured: bool
    status: str = "operational"
