# =============================================================================
# core/services/email_service.py - Transactional Email via Resend
# =============================================================================
# Thin wrapper around the Resend SDK:
# - send / send_or_raise: one email, immediate or scheduled
# - cancel: cancel a scheduled email
# - send_bulk: several emails one after another
# - usage_stats / status: quota counters and configuration state
#
# The free Resend tier allows a fixed number of emails per day and per
# month. This process keeps its own counters and refuses to send once a
# limit is reached. Counters are per process and reset on restart.
# =============================================================================

import logging
import threading
import time
from datetime import datetime
from typing import Any

import resend

from app.config import DEFAULT_FROM_EMAIL, settings
from app.exceptions import EmailDeliveryError, ServiceNotConfiguredError
from core.models.email import (
    BulkEmailResult,
    EmailOptions,
    EmailResult,
    EmailServiceStatus,
    EmailUsage,
)
from lib.utils import ensure_utc, utc_now

logger = logging.getLogger(__name__)

# Pause between emails in send_bulk (seconds)
BULK_SEND_DELAY = 0.1


class EmailService:
    """
    Service for sending transactional email through Resend.

    All methods are class methods; quota counters are shared by every
    caller in the process.

    Example:
        result = EmailService.send(EmailOptions(to="a@b.c", subject="Hi", html="<p>Hi</p>"))
        if not result.success:
            logger.warning(result.error)
    """

    _lock = threading.Lock()
    _daily_count = 0
    _monthly_count = 0
    _last_reset: datetime | None = None

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @staticmethod
    def _configure() -> None:
        """Point the SDK at our API key, or fail if there is none."""
        if not settings.resend_configured:
            raise ServiceNotConfiguredError("Email service", "RESEND_API_KEY")
        resend.api_key = settings.RESEND_API_KEY

    @staticmethod
    def status() -> EmailServiceStatus:
        """Configuration status. Never exposes the key itself."""
        return EmailServiceStatus(
            configured=settings.resend_configured,
            from_email_configured=bool(settings.RESEND_FROM_EMAIL)
            and settings.RESEND_FROM_EMAIL != DEFAULT_FROM_EMAIL,
        )

    # -------------------------------------------------------------------------
    # Quota
    # -------------------------------------------------------------------------

    @classmethod
    def _roll_counters(cls, now: datetime) -> None:
        """Reset counters when the day or month changed since the last check."""
        last = cls._last_reset
        if last is not None:
            if now.date() != last.date():
                cls._daily_count = 0
            if (now.year, now.month) != (last.year, last.month):
                cls._monthly_count = 0
        cls._last_reset = now

    @classmethod
    def _within_quota(cls) -> bool:
        with cls._lock:
            cls._roll_counters(utc_now())
            return (
                cls._daily_count < settings.EMAIL_DAILY_LIMIT
                and cls._monthly_count < settings.EMAIL_MONTHLY_LIMIT
            )

    @classmethod
    def _count_sent(cls) -> None:
        with cls._lock:
            cls._daily_count += 1
            cls._monthly_count += 1

    @classmethod
    def usage_stats(cls) -> EmailUsage:
        """Emails sent today and this month, with the configured limits."""
        with cls._lock:
            cls._roll_counters(utc_now())
            return EmailUsage(
                daily=cls._daily_count,
                monthly=cls._monthly_count,
                daily_limit=settings.EMAIL_DAILY_LIMIT,
                monthly_limit=settings.EMAIL_MONTHLY_LIMIT,
            )

    @classmethod
    def reset_usage(cls) -> None:
        """Zero the counters (tests, process maintenance)."""
        with cls._lock:
            cls._daily_count = 0
            cls._monthly_count = 0
            cls._last_reset = None

    # -------------------------------------------------------------------------
    # Sending
    # -------------------------------------------------------------------------

    @staticmethod
    def _build_params(options: EmailOptions) -> dict[str, Any]:
        """Translate EmailOptions into Resend's send parameters."""
        params: dict[str, Any] = {
            "from": settings.RESEND_FROM_EMAIL,
            "to": options.to,
            "subject": options.subject,
        }
        if options.html:
            params["html"] = options.html
        if options.text:
            params["text"] = options.text
        if options.reply_to:
            params["reply_to"] = options.reply_to
        if options.cc:
            params["cc"] = options.cc
        if options.bcc:
            params["bcc"] = options.bcc
        if options.scheduled_at:
            params["scheduled_at"] = ensure_utc(options.scheduled_at).isoformat()
        return params

    @classmethod
    def send(cls, options: EmailOptions) -> EmailResult:
        """
        Send one email, or schedule it when scheduled_at is set.

        Args:
            options: Recipients, subject and body

        Returns:
            EmailResult; success=False carries the vendor or quota error

        Raises:
            ServiceNotConfiguredError: If RESEND_API_KEY is missing
        """
        cls._configure()

        if not cls._within_quota():
            return EmailResult(
                success=False,
                error=(
                    f"Rate limit exceeded. Free tier allows {settings.EMAIL_DAILY_LIMIT} "
                    f"emails per day and {settings.EMAIL_MONTHLY_LIMIT} per month."
                ),
            )

        try:
            response = resend.Emails.send(cls._build_params(options))
        except Exception as e:
            logger.error(f"Resend send failed for {options.to}: {e}")
            return EmailResult(success=False, error=str(e))

        message_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
        cls._count_sent()
        logger.info(f"Email sent: {message_id} ({options.subject!r})")
        return EmailResult(success=True, message_id=message_id)

    @classmethod
    def send_or_raise(cls, options: EmailOptions) -> EmailResult:
        """
        Like send(), but a failed delivery raises.

        Raises:
            EmailDeliveryError: If Resend (or the quota) refused the email
        """
        result = cls.send(options)
        if not result.success:
            raise EmailDeliveryError(result.error or "Unknown error")
        return result

    @classmethod
    def cancel(cls, email_id: str) -> EmailResult:
        """
        Cancel a scheduled email.

        Returns:
            EmailResult with the cancelled email's id, or the vendor error
        """
        cls._configure()

        try:
            response = resend.Emails.cancel(email_id)
        except Exception as e:
            logger.error(f"Resend cancel failed for {email_id}: {e}")
            return EmailResult(success=False, error=str(e))

        message_id = response.get("id", email_id) if isinstance(response, dict) else email_id
        logger.info(f"Email cancelled: {message_id}")
        return EmailResult(success=True, message_id=message_id)

    @classmethod
    def send_bulk(cls, emails: list[EmailOptions]) -> BulkEmailResult:
        """Send emails sequentially, pausing briefly between them."""
        results: list[EmailResult] = []
        errors: list[dict[str, Any]] = []

        for index, options in enumerate(emails):
            if index:
                time.sleep(BULK_SEND_DELAY)
            result = cls.send(options)
            if result.success:
                results.append(result)
            else:
                errors.append({"email": options.to, "error": result.error})

        return BulkEmailResult(success=not errors, results=results, errors=errors)
