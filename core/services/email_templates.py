# =============================================================================
# core/services/email_templates.py - Transactional Email Templates
# =============================================================================
# Renders the Jinja2 templates in core/templates/email/ into EmailOptions.
# Every email has an HTML and a plain-text body sharing one base layout.
# HTML output is autoescaped, so user-supplied values (names, reasons,
# messages) are safe to pass straight in.
#
# Usage:
#   options = EmailTemplates.welcome(user_name="Jane", user_email="jane@x.y")
#   EmailService.send(options)
# =============================================================================

import logging
from datetime import date
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from app.config import settings
from core.models.email import EmailOptions
from lib.utils import utc_now

logger = logging.getLogger(__name__)

AVAILABILITY_REMINDER_SUBJECT = "Availability Reminder - You're Available Today!"

_env = Environment(
    loader=PackageLoader("core", "templates"),
    autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render(template_name: str, **context: Any) -> tuple[str, str]:
    """
    Render email/<template_name>.html and email/<template_name>.txt.

    Returns:
        (html, text)
    """
    context.setdefault("site_name", settings.SITE_NAME)
    context.setdefault("year", utc_now().year)
    html = _env.get_template(f"email/{template_name}.html").render(**context)
    text = _env.get_template(f"email/{template_name}.txt").render(**context)
    return html, text.strip() + "\n"


def format_available_date(value: str) -> str:
    """'2025-09-01' -> 'September 1, 2025'. Unparseable values pass through."""
    try:
        parsed = date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return value
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


class EmailTemplates:
    """Pre-built transactional emails."""

    @staticmethod
    def welcome(user_name: str, user_email: str, login_url: str | None = None) -> EmailOptions:
        html, text = render("welcome", user_name=user_name, user_email=user_email, login_url=login_url)
        return EmailOptions(
            to=user_email,
            subject=f"Welcome to {settings.SITE_NAME}!",
            html=html,
            text=text,
        )

    @staticmethod
    def password_reset(
        user_name: str,
        user_email: str,
        reset_url: str,
        expires_in: str = "1 hour",
    ) -> EmailOptions:
        html, text = render(
            "password_reset",
            user_name=user_name,
            reset_url=reset_url,
            expires_in=expires_in,
        )
        return EmailOptions(
            to=user_email,
            subject=f"Password Reset Request - {settings.SITE_NAME}",
            html=html,
            text=text,
        )

    @staticmethod
    def email_verification(
        user_name: str,
        user_email: str,
        verification_url: str,
        expires_in: str = "24 hours",
    ) -> EmailOptions:
        html, text = render(
            "email_verification",
            user_name=user_name,
            verification_url=verification_url,
            expires_in=expires_in,
        )
        return EmailOptions(
            to=user_email,
            subject=f"Verify Your Email Address - {settings.SITE_NAME}",
            html=html,
            text=text,
        )

    # -------------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------------

    @staticmethod
    def company_approval(
        company_name: str,
        contact_person: str,
        user_email: str,
        login_url: str | None = None,
    ) -> EmailOptions:
        html, text = render(
            "company_approval",
            company_name=company_name,
            contact_person=contact_person,
            login_url=login_url,
        )
        return EmailOptions(
            to=user_email,
            subject="Your Company Profile Has Been Approved!",
            html=html,
            text=text,
        )

    @staticmethod
    def company_rejection(
        company_name: str,
        contact_person: str,
        user_email: str,
        reason: str | None = None,
        support_email: str | None = None,
    ) -> EmailOptions:
        html, text = render(
            "company_rejection",
            company_name=company_name,
            contact_person=contact_person,
            reason=reason,
            support_email=support_email or settings.SUPPORT_EMAIL,
        )
        return EmailOptions(
            to=user_email,
            subject="Update on Your Company Profile Application",
            html=html,
            text=text,
        )

    @staticmethod
    def professional_approval(
        user_name: str,
        user_email: str,
        login_url: str | None = None,
    ) -> EmailOptions:
        html, text = render("professional_approval", user_name=user_name, login_url=login_url)
        return EmailOptions(
            to=user_email,
            subject="Your Professional Profile Has Been Approved!",
            html=html,
            text=text,
        )

    @staticmethod
    def professional_rejection(
        user_name: str,
        user_email: str,
        reason: str | None = None,
        support_email: str | None = None,
    ) -> EmailOptions:
        html, text = render(
            "professional_rejection",
            user_name=user_name,
            reason=reason,
            support_email=support_email or settings.SUPPORT_EMAIL,
        )
        return EmailOptions(
            to=user_email,
            subject="Update on Your Professional Profile Application",
            html=html,
            text=text,
        )

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    @staticmethod
    def notification(
        user_name: str,
        user_email: str,
        title: str,
        message: str,
        action_url: str | None = None,
        action_text: str | None = None,
    ) -> EmailOptions:
        html, text = render(
            "notification",
            user_name=user_name,
            title=title,
            message=message,
            action_url=action_url,
            action_text=action_text,
        )
        return EmailOptions(to=user_email, subject=title, html=html, text=text)

    @staticmethod
    def availability_reminder(
        user_name: str,
        user_email: str,
        available_date: str,
        profile_url: str | None = None,
    ) -> EmailOptions:
        """
        Reminder sent on the day a professional becomes available again.

        Args:
            available_date: ISO date (YYYY-MM-DD) the professional chose
        """
        html, text = render(
            "availability_reminder",
            user_name=user_name,
            available_date=format_available_date(available_date),
            profile_url=profile_url,
        )
        return EmailOptions(
            to=user_email,
            subject=AVAILABILITY_REMINDER_SUBJECT,
            html=html,
            text=text,
        )

    @staticmethod
    def new_profile_to_review(
        admin_email: str,
        name: str,
        profile_url: str | None = None,
        profile_type: str = "professional",
    ) -> EmailOptions:
        label = profile_type.capitalize()
        html, text = render(
            "new_profile_to_review",
            name=name,
            profile_url=profile_url,
            profile_type=profile_type,
            profile_label=label,
        )
        return EmailOptions(
            to=admin_email,
            subject=f"New {label} Profile to Review - {name}",
            html=html,
            text=text,
        )
