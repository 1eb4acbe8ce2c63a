# =============================================================================
# app/routers/cron.py - Scheduled Job Endpoints
# =============================================================================
# HTTP trigger for the availability reminder job, for platforms that call
# a URL on a schedule instead of running Celery beat. Protected by
# CRON_SECRET; admins can also run the job by hand.
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.auth import AuthUser, require_admin
from app.config import settings
from app.dependencies import verify_cron_secret
from app.exceptions import ServiceNotConfiguredError
from core.models.availability import DispatchItem, DispatchReport
from core.services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)

router = APIRouter()


class CronRunResponse(BaseModel):
    """Summary of one reminder job run."""
    success: bool = True
    message: str
    processed: int = 0
    success_count: int = 0
    failure_count: int = 0
    results: list[DispatchItem] = Field(default_factory=list)


def _run_reminder_job() -> CronRunResponse:
    if not settings.resend_configured:
        raise ServiceNotConfiguredError("Email service", "RESEND_API_KEY")

    report: DispatchReport = AvailabilityService.dispatch_due_reminders()
    message = "Cron job completed" if report.processed else "No pending emails to process"
    return CronRunResponse(
        message=message,
        processed=report.processed,
        success_count=report.success_count,
        failure_count=report.failure_count,
        results=report.results,
    )


@router.api_route(
    "/availability-emails",
    methods=["GET", "POST"],
    response_model=CronRunResponse,
    dependencies=[Depends(verify_cron_secret)],
)
def availability_emails_cron():
    """
    Dispatch due availability reminders.

    Requires 'Authorization: Bearer <CRON_SECRET>' when CRON_SECRET is set.

    Raises:
        401: Wrong or missing secret
        500: Resend is not configured
    """
    logger.info("Availability reminder cron triggered")
    return _run_reminder_job()


@router.post("/availability-emails/run", response_model=CronRunResponse)
def run_availability_emails(admin: AuthUser = Depends(require_admin)):
    """Run the reminder job now (admin only)."""
    logger.info(f"Availability reminder job run manually by {admin.id}")
    return _run_reminder_job()
