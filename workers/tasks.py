# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks for email delivery.
#
# Tasks:
# - dispatch_availability_reminders: Daily reminder run (scheduled by beat)
# - notify_admins_of_registration: Tell admins a profile awaits review
# =============================================================================

import logging
from typing import Any

from celery import shared_task

from app.config import settings
from app.exceptions import ServiceNotConfiguredError

logger = logging.getLogger(__name__)


# =============================================================================
# Availability Reminders
# =============================================================================

@shared_task(bind=True, name="workers.tasks.dispatch_availability_reminders")
def dispatch_availability_reminders(self) -> dict[str, Any]:
    """
    Send due availability reminders and flip returning professionals
    back to available.

    A run that cannot fetch reminders is retried (up to max_retries) and
    then fails, so task_failure fires. Without Resend nothing is attempted.

    Returns:
        Dict with:
        - success: bool
        - processed / success_count / failure_count
        - results: per-row outcome

    Raises:
        ServiceNotConfiguredError: If RESEND_API_KEY is missing
    """
    from core.services.availability_service import AvailabilityService

    if not settings.resend_configured:
        logger.error("Availability reminders not dispatched: Resend is not configured")
        raise ServiceNotConfiguredError("Email service", "RESEND_API_KEY")

    logger.info("Dispatching availability reminders")

    try:
        report = AvailabilityService.dispatch_due_reminders()
    except Exception as e:
        logger.warning(f"Availability reminder run failed, retrying: {e}")
        raise self.retry(exc=e)

    return {"success": True, **report.model_dump()}


# =============================================================================
# Registration Notifications
# =============================================================================

@shared_task(bind=True, name="workers.tasks.notify_admins_of_registration")
def notify_admins_of_registration(
    self,
    user_id: str,
    profile_type: str = "professional",
) -> dict[str, Any]:
    """
    Email every admin that a new profile is waiting for review.

    Lookup failures are retried (up to max_retries); per-recipient send
    failures are reported, not retried, so admins aren't emailed twice.

    Args:
        user_id: Applicant's user id
        profile_type: "professional" or "company"
    """
    logger.info(f"Notifying admins of {profile_type} registration {user_id}")

    from core.models.registration import ProfileType
    from core.services.registration_service import RegistrationService

    try:
        result = RegistrationService.notify_admins(user_id, ProfileType(profile_type))
    except ServiceNotConfiguredError as e:
        logger.warning(f"Skipping admin notification: {e.message}")
        return {"success": False, "error": e.message}
    except Exception as e:
        logger.warning(f"Admin notification failed, retrying: {e}")
        raise self.retry(exc=e)

    return {
        "success": result.success,
        "sent": len(result.results),
        "errors": result.errors,
    }
