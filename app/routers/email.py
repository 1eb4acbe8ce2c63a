# =============================================================================
# app/routers/email.py - Transactional Email Endpoints
# =============================================================================
# Thin HTTP layer over EmailService. Every endpoint is origin-checked;
# sending and usage are admin-only, cancelling is rate-limited per IP.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.auth import AuthUser, require_admin
from app.dependencies import rate_limited, require_allowed_origin
from core.models.email import (
    CancelEmailRequest,
    EmailOptions,
    EmailResult,
    EmailServiceStatus,
    EmailUsage,
)
from core.services.email_service import EmailService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_allowed_origin)])


@router.post("/send", response_model=EmailResult)
def send_email(
    options: EmailOptions,
    admin: AuthUser = Depends(require_admin),
):
    """
    Send (or schedule, with scheduled_at) an email.

    Raises:
        502: If Resend refuses the email or the quota is spent
    """
    logger.info(f"Admin {admin.id} sending email to {len(options.to)} recipient(s)")
    return EmailService.send_or_raise(options)


@router.post(
    "/cancel",
    response_model=EmailResult,
    dependencies=[Depends(rate_limited("email"))],
)
def cancel_email(request: CancelEmailRequest):
    """
    Cancel a scheduled email by its Resend id.

    Raises:
        400: If Resend could not cancel it
        429: Too many requests from this IP
    """
    result = EmailService.cancel(request.email_id)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return result


@router.get("/status", response_model=EmailServiceStatus)
async def email_status():
    """Whether email delivery is configured. Never exposes secrets."""
    return EmailService.status()


@router.get("/usage", response_model=EmailUsage)
async def email_usage(admin: AuthUser = Depends(require_admin)):
    """In-process quota counters for this worker."""
    return EmailService.usage_stats()
