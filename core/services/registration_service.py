# =============================================================================
# core/services/registration_service.py - Registration Review Workflow
# =============================================================================
# New professional and company accounts wait in registration_requests
# until an admin approves or rejects them. Each moderation action updates
# the request (and the profile), then emails the account owner.
#
# Email failures never undo a moderation action: the result reports
# email_sent / email_error instead.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import (
    CompanyNotFoundError,
    ProfileNotFoundError,
    RegistrationRequestNotFoundError,
    SelfModerationError,
    ServiceNotConfiguredError,
)
from core.models.email import BulkEmailResult, EmailOptions
from core.models.registration import ApprovalStatus, ModerationResult, ProfileType
from core.services.email_service import EmailService
from core.services.email_templates import EmailTemplates
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now

logger = logging.getLogger(__name__)

BAN_REASON = "Your account has been suspended due to policy violations."


class RegistrationService:
    """
    Service for the admin approval workflow.

    Example:
        result = RegistrationService.approve_professional(user_id, admin_id)
        if not result.email_sent:
            logger.warning(result.email_error)
    """

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    @staticmethod
    def submit(user_id: str | UUID, profile_type: ProfileType = ProfileType.PROFESSIONAL) -> dict[str, Any]:
        """
        Make sure the user has a registration request awaiting review.

        An existing request is returned unchanged.

        Returns:
            The registration request row
        """
        user_id_str = normalize_uuid(user_id)
        client = SupabaseClient.get_client()

        try:
            existing = (
                client.table("registration_requests")
                .select("*")
                .eq("user_id", user_id_str)
                .limit(1)
                .execute()
            )
            if existing.data:
                return existing.data[0]

            response = (
                client.table("registration_requests")
                .insert({"user_id": user_id_str, "status": ApprovalStatus.PENDING.value})
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to submit registration for {user_id_str}: {e}")
            raise

        logger.info(f"Registration submitted: {user_id_str} ({profile_type.value})")
        return response.data[0] if response.data else {"user_id": user_id_str, "status": "pending"}

    @staticmethod
    def notify_admins(
        user_id: str | UUID,
        profile_type: ProfileType = ProfileType.PROFESSIONAL,
    ) -> BulkEmailResult:
        """
        Tell every admin that a new profile is waiting for review.

        Returns:
            BulkEmailResult (success=True with no results when there are no admins)
        """
        user_id_str = normalize_uuid(user_id)
        profile = SupabaseClient.fetch_profile(user_id_str) or {}
        name = profile.get("full_name") or profile.get("email") or user_id_str

        if profile_type == ProfileType.PROFESSIONAL:
            profile_url = f"{settings.SITE_URL.rstrip('/')}/profile/{user_id_str}"
        else:
            profile_url = f"{settings.SITE_URL.rstrip('/')}/admin"

        admin_emails = SupabaseClient.fetch_admin_emails()
        if not admin_emails:
            logger.warning("No admin emails found; skipping review notification")
            return BulkEmailResult(success=True)

        emails = [
            EmailTemplates.new_profile_to_review(
                admin_email=email,
                name=name,
                profile_url=profile_url,
                profile_type=profile_type.value,
            )
            for email in admin_emails
        ]
        result = EmailService.send_bulk(emails)
        logger.info(
            f"Review notification for {user_id_str}: "
            f"{len(result.results)} sent, {len(result.errors)} failed"
        )
        return result

    @staticmethod
    def list_requests(status: ApprovalStatus | None = None) -> list[dict[str, Any]]:
        """
        Registration requests, newest first, with the applicant's name and email.
        """
        client = SupabaseClient.get_client()
        try:
            query = client.table("registration_requests").select("*")
            if status:
                query = query.eq("status", status.value)
            response = query.order("created_at", desc=True).execute()
        except Exception as e:
            logger.error(f"Failed to list registration requests: {e}")
            raise

        rows = response.data or []
        profiles = SupabaseClient.fetch_profiles_by_ids([row["user_id"] for row in rows])
        for row in rows:
            profile = profiles.get(row["user_id"], {})
            row["full_name"] = profile.get("full_name")
            row["email"] = profile.get("email")
        return rows

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _update_request(user_id: str, status: ApprovalStatus, admin_id: str | None) -> dict[str, Any]:
        """Set request status; approved_at/approved_by follow admin_id (None clears)."""
        client = SupabaseClient.get_client()
        data = {
            "status": status.value,
            "approved_at": utc_now().isoformat() if admin_id else None,
            "approved_by": admin_id,
            "updated_at": utc_now().isoformat(),
        }
        response = (
            client.table("registration_requests")
            .update(data)
            .eq("user_id", user_id)
            .execute()
        )
        if not response.data:
            raise RegistrationRequestNotFoundError(user_id)
        return response.data[0]

    @staticmethod
    def _set_professional_status(user_id: str, status: ApprovalStatus) -> None:
        client = SupabaseClient.get_client()
        (
            client.table("professional_profiles")
            .update({"profile_status": status.value, "updated_at": utc_now().isoformat()})
            .eq("user_id", user_id)
            .execute()
        )

    @staticmethod
    def _guard_self(user_id: str, admin_id: str, action: str) -> None:
        if user_id == admin_id:
            raise SelfModerationError(action)

    @staticmethod
    def _deliver(options: EmailOptions | None) -> tuple[bool, str | None]:
        """Send a moderation email; never raises."""
        if options is None:
            return False, "No email address found for notification"
        try:
            result = EmailService.send(options)
        except ServiceNotConfiguredError as e:
            logger.warning(f"Moderation email not sent: {e.message}")
            return False, e.message
        if not result.success:
            logger.error(f"Failed to send moderation email to {options.to}: {result.error}")
        return result.success, result.error

    @staticmethod
    def _account(user_id: str) -> dict[str, Any]:
        profile = SupabaseClient.fetch_profile(user_id)
        if not profile:
            raise ProfileNotFoundError(user_id)
        return profile

    # -------------------------------------------------------------------------
    # Professionals
    # -------------------------------------------------------------------------

    @staticmethod
    def approve_professional(user_id: str | UUID, admin_id: str | UUID) -> ModerationResult:
        """Approve the request and the professional profile; send the approval email."""
        user_id_str = normalize_uuid(user_id)
        admin_id_str = normalize_uuid(admin_id)
        account = RegistrationService._account(user_id_str)

        RegistrationService._update_request(user_id_str, ApprovalStatus.APPROVED, admin_id_str)
        RegistrationService._set_professional_status(user_id_str, ApprovalStatus.APPROVED)
        logger.info(f"Professional {user_id_str} approved by {admin_id_str}")

        sent, error = RegistrationService._deliver(
            EmailTemplates.professional_approval(
                user_name=account.get("full_name") or "",
                user_email=account["email"],
                login_url=f"{settings.SITE_URL.rstrip('/')}/",
            ) if account.get("email") else None
        )
        return ModerationResult(
            user_id=user_id_str,
            status=ApprovalStatus.APPROVED,
            email_sent=sent,
            email_error=error,
            message="User approved successfully",
        )

    @staticmethod
    def reject_professional(
        user_id: str | UUID,
        admin_id: str | UUID,
        reason: str | None = None,
    ) -> ModerationResult:
        """Reject the registration request; send the rejection email."""
        user_id_str = normalize_uuid(user_id)
        admin_id_str = normalize_uuid(admin_id)
        RegistrationService._guard_self(user_id_str, admin_id_str, "reject")
        account = RegistrationService._account(user_id_str)

        RegistrationService._update_request(user_id_str, ApprovalStatus.REJECTED, admin_id_str)
        logger.info(f"Professional {user_id_str} rejected by {admin_id_str}")

        sent, error = RegistrationService._deliver(
            EmailTemplates.professional_rejection(
                user_name=account.get("full_name") or "",
                user_email=account["email"],
                reason=reason,
            ) if account.get("email") else None
        )
        return ModerationResult(
            user_id=user_id_str,
            status=ApprovalStatus.REJECTED,
            email_sent=sent,
            email_error=error,
            message="User rejected successfully",
        )

    @staticmethod
    def reset_professional(user_id: str | UUID, admin_id: str | UUID) -> ModerationResult:
        """Send the request back to pending and clear the approval metadata."""
        user_id_str = normalize_uuid(user_id)
        admin_id_str = normalize_uuid(admin_id)
        RegistrationService._guard_self(user_id_str, admin_id_str, "reset")

        RegistrationService._update_request(user_id_str, ApprovalStatus.PENDING, None)
        logger.info(f"Registration for {user_id_str} reset to pending by {admin_id_str}")
        return ModerationResult(
            user_id=user_id_str,
            status=ApprovalStatus.PENDING,
            message="User status changed to pending",
        )

    @staticmethod
    def ban_professional(user_id: str | UUID, admin_id: str | UUID) -> ModerationResult:
        """Reject the professional profile and tell the user why."""
        user_id_str = normalize_uuid(user_id)
        admin_id_str = normalize_uuid(admin_id)
        RegistrationService._guard_self(user_id_str, admin_id_str, "ban")
        account = RegistrationService._account(user_id_str)

        RegistrationService._set_professional_status(user_id_str, ApprovalStatus.REJECTED)
        logger.info(f"Professional {user_id_str} banned by {admin_id_str}")

        sent, error = RegistrationService._deliver(
            EmailTemplates.professional_rejection(
                user_name=account.get("full_name") or "",
                user_email=account["email"],
                reason=BAN_REASON,
            ) if account.get("email") else None
        )
        return ModerationResult(
            user_id=user_id_str,
            status=ApprovalStatus.REJECTED,
            email_sent=sent,
            email_error=error,
            message="User banned successfully",
        )

    @staticmethod
    def set_searchable(user_id: str | UUID, searchable: bool) -> dict[str, Any]:
        """Show or hide a professional in public search."""
        user_id_str = normalize_uuid(user_id)
        client = SupabaseClient.get_client()
        response = (
            client.table("professional_profiles")
            .update({"is_searchable": searchable, "updated_at": utc_now().isoformat()})
            .eq("user_id", user_id_str)
            .execute()
        )
        if not response.data:
            raise ProfileNotFoundError(user_id_str)
        logger.info(f"Professional {user_id_str} searchable={searchable}")
        return response.data[0]

    # -------------------------------------------------------------------------
    # Companies
    # -------------------------------------------------------------------------

    @staticmethod
    def set_company_status(
        company_id: str | UUID,
        status: ApprovalStatus,
        admin_id: str | UUID,
        reason: str | None = None,
    ) -> ModerationResult:
        """
        Approve or reject a company profile.

        Approval records approved_at/approved_by; rejection clears them.
        The owner's registration request follows the company status.

        Raises:
            CompanyNotFoundError: If the company profile doesn't exist
        """
        company_id_str = normalize_uuid(company_id)
        admin_id_str = normalize_uuid(admin_id)
        client = SupabaseClient.get_client()

        approved = status == ApprovalStatus.APPROVED
        data = {
            "profile_status": status.value,
            "approved_at": utc_now().isoformat() if approved else None,
            "approved_by": admin_id_str if approved else None,
            "updated_at": utc_now().isoformat(),
        }
        response = (
            client.table("company_profiles")
            .update(data)
            .eq("id", company_id_str)
            .execute()
        )
        if not response.data:
            raise CompanyNotFoundError(company_id_str)

        company = response.data[0]
        owner_id = company["user_id"]

        (
            client.table("registration_requests")
            .update({
                "status": status.value,
                "approved_at": data["approved_at"],
                "approved_by": data["approved_by"],
                "updated_at": data["updated_at"],
            })
            .eq("user_id", owner_id)
            .execute()
        )
        logger.info(f"Company {company_id_str} {status.value} by {admin_id_str}")

        owner = SupabaseClient.fetch_profile(owner_id) or {}
        owner_email = owner.get("email")
        if not owner_email:
            logger.warning(f"Company {company_id_str} {status.value}, but no email address found for notification")

        contact_person = company.get("contact_person") or owner.get("full_name") or ""
        options = None
        if owner_email and approved:
            options = EmailTemplates.company_approval(
                company_name=company.get("company_name", ""),
                contact_person=contact_person,
                user_email=owner_email,
                login_url=f"{settings.SITE_URL.rstrip('/')}/",
            )
        elif owner_email and status == ApprovalStatus.REJECTED:
            options = EmailTemplates.company_rejection(
                company_name=company.get("company_name", ""),
                contact_person=contact_person,
                user_email=owner_email,
                reason=reason,
            )

        sent, error = False, None
        if status != ApprovalStatus.PENDING:
            sent, error = RegistrationService._deliver(options)
        return ModerationResult(
            user_id=owner_id,
            status=status,
            email_sent=sent,
            email_error=error,
            message=f"Company {status.value} successfully",
        )
