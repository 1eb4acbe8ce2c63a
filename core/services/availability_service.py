# =============================================================================
# core/services/availability_service.py - Availability & Reminder Scheduling
# =============================================================================
# A professional who marks themselves unavailable names the date they are
# free again. On that date they get a reminder email and their profile is
# flipped back to available.
#
# Reminders live in scheduled_availability_emails:
# - Dates inside the scheduling window are handed to Resend right away as
#   a scheduled send (status "scheduled").
# - Dates further out stay "pending" until the daily dispatch job brings
#   them inside the window.
#
# dispatch_due_reminders() is the daily job (Celery beat or HTTP cron):
#   pass 1: pending rows inside the window are sent (due) or scheduled
#   pass 2: scheduled rows whose date has passed flip the profile and
#           are marked sent
# =============================================================================

import logging
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import (
    AvailabilityDateRequiredError,
    ProfileNotFoundError,
    ServiceNotConfiguredError,
)
from core.models.availability import (
    AvailabilityUpdateResult,
    DispatchReport,
    ReminderStatus,
)
from core.models.email import EmailOptions
from core.services.email_service import EmailService
from core.services.email_templates import EmailTemplates
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import ensure_utc, normalize_uuid, parse_timestamp, utc_now

logger = logging.getLogger(__name__)

TABLE = "scheduled_availability_emails"

# Keys every reminder's email_data must carry
REQUIRED_EMAIL_DATA = ("email", "user_name", "availableFrom")


def profile_url_for(user_id: str) -> str:
    """Public profile link used in reminder emails."""
    return f"{settings.SITE_URL.rstrip('/')}/profile/{user_id}"


class AvailabilityService:
    """
    Service for availability changes and reminder dispatch.

    Example:
        AvailabilityService.update_availability(user_id, False, datetime(2025, 9, 1))
        report = AvailabilityService.dispatch_due_reminders()
    """

    # -------------------------------------------------------------------------
    # Availability changes
    # -------------------------------------------------------------------------

    @staticmethod
    def update_availability(
        user_id: str | UUID,
        available: bool,
        available_from: datetime | None = None,
        now: datetime | None = None,
    ) -> AvailabilityUpdateResult:
        """
        Change a professional's availability and (re)schedule the reminder.

        Args:
            user_id: Professional's user ID
            available: True when available right now
            available_from: Return date, required when available is False
            now: Override of the current time (tests)

        Returns:
            AvailabilityUpdateResult

        Raises:
            AvailabilityDateRequiredError: Unavailable without a date
            ProfileNotFoundError: No professional profile for the user
            EmailDeliveryError: Resend refused the scheduled reminder
        """
        if not available and available_from is None:
            raise AvailabilityDateRequiredError()

        user_id_str = normalize_uuid(user_id)
        now = ensure_utc(now) if now else utc_now()
        available_from = ensure_utc(available_from) if available_from else None

        AvailabilityService.cancel_reminders(user_id_str)

        stored_date = None
        if not available and available_from is not None:
            stored_date = available_from.date().isoformat()

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("professional_profiles")
                .update({
                    "available": bool(available),
                    "availablefrom": stored_date,
                    "updated_at": now.isoformat(),
                })
                .eq("user_id", user_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update availability for {user_id_str}: {e}")
            raise

        if not response.data:
            raise ProfileNotFoundError(user_id_str)

        if available:
            logger.info(f"Professional {user_id_str} marked available")
            return AvailabilityUpdateResult(
                available=True,
                message="You are now marked as available for new projects",
            )

        row = AvailabilityService._schedule_reminder(user_id_str, available_from, now)
        logger.info(
            f"Professional {user_id_str} unavailable until {stored_date} "
            f"(reminder {row['status']})"
        )
        return AvailabilityUpdateResult(
            available=False,
            available_from=stored_date,
            reminder_status=ReminderStatus(row["status"]),
            resend_email_id=row.get("resend_email_id"),
            message=f"Availability set for {stored_date}. You'll receive a reminder email.",
        )

    @staticmethod
    def _schedule_reminder(user_id: str, available_from: datetime, now: datetime) -> dict[str, Any]:
        """Insert the reminder row, handing it to Resend when inside the window."""
        profile = SupabaseClient.fetch_profile(user_id) or {}
        email_data = {
            "email": profile.get("email"),
            "user_name": profile.get("full_name"),
            "availableFrom": available_from.isoformat(),
            "profile_url": profile_url_for(user_id),
        }

        status = ReminderStatus.PENDING
        resend_id = None
        window_end = now + timedelta(days=settings.AVAILABILITY_SCHEDULE_WINDOW_DAYS)
        if available_from < window_end:
            options = AvailabilityService._reminder_email(email_data, scheduled_at=available_from)
            resend_id = EmailService.send_or_raise(options).message_id
            status = ReminderStatus.SCHEDULED

        row = {
            "user_id": user_id,
            "professional_id": user_id,
            "available_date": available_from.isoformat(),
            "email_data": email_data,
            "scheduled_date": available_from.isoformat(),
            "status": status.value,
            "resend_email_id": resend_id,
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(row).execute()
        except Exception as e:
            logger.error(f"Failed to store reminder for {user_id}: {e}")
            raise

        return response.data[0] if response.data else row

    @staticmethod
    def cancel_reminders(user_id: str | UUID) -> int:
        """
        Cancel and delete every reminder a user has.

        Resend cancel failures are logged; the rows are deleted anyway.

        Returns:
            Number of reminder rows removed
        """
        user_id_str = normalize_uuid(user_id)
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("id, resend_email_id, status")
                .eq("user_id", user_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch reminders for {user_id_str}: {e}")
            raise

        rows = response.data or []
        if not rows:
            return 0

        for row in rows:
            resend_id = row.get("resend_email_id")
            if resend_id and row.get("status") == ReminderStatus.SCHEDULED.value:
                try:
                    result = EmailService.cancel(resend_id)
                except ServiceNotConfiguredError as e:
                    logger.warning(f"Could not cancel scheduled email {resend_id}: {e.message}")
                    continue
                if not result.success:
                    logger.warning(f"Could not cancel scheduled email {resend_id}: {result.error}")

        try:
            client.table(TABLE).delete().eq("user_id", user_id_str).execute()
        except Exception as e:
            logger.error(f"Failed to delete reminders for {user_id_str}: {e}")
            raise

        logger.info(f"Removed {len(rows)} reminder(s) for {user_id_str}")
        return len(rows)

    # -------------------------------------------------------------------------
    # Dispatch job
    # -------------------------------------------------------------------------

    @staticmethod
    def _reminder_email(email_data: dict[str, Any], scheduled_at: datetime | None = None) -> EmailOptions:
        options = EmailTemplates.availability_reminder(
            user_name=email_data["user_name"],
            user_email=email_data["email"],
            available_date=email_data["availableFrom"],
            profile_url=email_data.get("profile_url") or None,
        )
        if scheduled_at is not None:
            options.scheduled_at = scheduled_at
        return options

    @staticmethod
    def _mark(row_id: str, fields: dict[str, Any], now: datetime) -> None:
        client = SupabaseClient.get_client()
        client.table(TABLE).update({**fields, "updated_at": now.isoformat()}).eq("id", row_id).execute()

    @staticmethod
    def _mark_available(user_id: str, now: datetime) -> None:
        """Flip the professional back to available. Failures are only logged."""
        client = SupabaseClient.get_client()
        try:
            (
                client.table("professional_profiles")
                .update({
                    "available": True,
                    "availablefrom": None,
                    "updated_at": now.isoformat(),
                })
                .eq("user_id", user_id)
                .execute()
            )
            logger.info(f"Updated professional profile availability for user {user_id}")
        except Exception as e:
            logger.error(f"Error updating professional profile for user {user_id}: {e}")

    @staticmethod
    def _fetch(status: ReminderStatus, until: datetime, unsent_only: bool = False) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        try:
            query = (
                client.table(TABLE)
                .select("*")
                .eq("status", status.value)
            )
            if unsent_only:
                query = query.is_("resend_email_id", "null")
            response = query.lte("available_date", until.isoformat()).execute()
            return response.data or []
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch {status.value} reminders: {e}",
                code="FETCH_REMINDERS_FAILED",
            )

    @staticmethod
    def _process_pending(row: dict[str, Any], now: datetime) -> str | None:
        """
        Send or schedule one pending reminder.

        Returns:
            None on success, else the error message
        """
        email_data = row.get("email_data") or {}
        if not all(email_data.get(key) for key in REQUIRED_EMAIL_DATA):
            logger.warning(f"Skipping reminder {row['id']} - missing required data")
            return "Missing required data"

        available_date = parse_timestamp(row.get("available_date")) or now
        due = available_date <= now

        options = AvailabilityService._reminder_email(
            email_data,
            scheduled_at=None if due else available_date,
        )
        result = EmailService.send(options)
        if not result.success:
            logger.error(f"Failed to send reminder {row['id']}: {result.error}")
            AvailabilityService._mark(row["id"], {"status": ReminderStatus.FAILED.value}, now)
            return result.error or "Unknown error"

        fields: dict[str, Any] = {"resend_email_id": result.message_id}
        if due:
            fields["status"] = ReminderStatus.SENT.value
            fields["sent_at"] = now.isoformat()
        else:
            fields["status"] = ReminderStatus.SCHEDULED.value

        # Resend has accepted the email from here on; the row must not become "failed"
        mark_error = None
        try:
            AvailabilityService._mark(row["id"], fields, now)
        except Exception as e:
            logger.error(f"Reminder {row['id']} accepted by Resend as {result.message_id} but not recorded: {e}")
            mark_error = f"Email {result.message_id} accepted but status update failed: {e}"

        if due:
            AvailabilityService._mark_available(row["user_id"], now)
        return mark_error

    @staticmethod
    def dispatch_due_reminders(now: datetime | None = None) -> DispatchReport:
        """
        Run the daily reminder job.

        Args:
            now: Override of the current time (tests, backfills)

        Returns:
            DispatchReport with one result per processed row

        Raises:
            SupabaseClientError: If reminders cannot be fetched
        """
        now = ensure_utc(now) if now else utc_now()
        window_end = now + timedelta(days=settings.AVAILABILITY_SCHEDULE_WINDOW_DAYS)
        report = DispatchReport()

        pending = AvailabilityService._fetch(ReminderStatus.PENDING, window_end, unsent_only=True)
        logger.info(f"Processing {len(pending)} pending availability reminder(s)")

        for row in pending:
            try:
                error = AvailabilityService._process_pending(row, now)
            except Exception as e:
                logger.error(f"Error processing reminder {row.get('id')}: {e}")
                error = str(e)
                try:
                    AvailabilityService._mark(row["id"], {"status": ReminderStatus.FAILED.value}, now)
                except Exception as mark_error:
                    logger.error(f"Could not mark reminder {row.get('id')} failed: {mark_error}")
            report.record(str(row.get("id")), error is None, error)

        delivered = AvailabilityService._fetch(ReminderStatus.SCHEDULED, now)
        logger.info(f"Completing {len(delivered)} delivered reminder(s)")

        for row in delivered:
            try:
                AvailabilityService._mark_available(row["user_id"], now)
                AvailabilityService._mark(
                    row["id"],
                    {"status": ReminderStatus.SENT.value, "sent_at": now.isoformat()},
                    now,
                )
                report.record(str(row["id"]), True)
            except Exception as e:
                logger.error(f"Error completing reminder {row.get('id')}: {e}")
                report.record(str(row.get("id")), False, str(e))

        logger.info(
            f"Finished availability reminders. "
            f"Success: {report.success_count}, Failed: {report.failure_count}"
        )
        return report
