# =============================================================================
# core/services/user_service.py - Account Administration
# =============================================================================
# Role lookups, company approval checks, account deletion and password
# reset emails. Deletion and password reset go through Supabase Auth.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.config import settings
from core.models.registration import ApprovalStatus, UserRole
from core.services.availability_service import AvailabilityService
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


class UserService:
    """Service for account-level operations."""

    @staticmethod
    def get_role(user_id: str | UUID) -> UserRole | None:
        """Application role, or None when the user has no role row."""
        role = SupabaseClient.fetch_user_role(user_id)
        if role is None:
            return None
        try:
            return UserRole(role)
        except ValueError:
            logger.warning(f"Unknown role {role!r} for user {user_id}")
            return None

    @staticmethod
    def is_admin(user_id: str | UUID) -> bool:
        return UserService.get_role(user_id) == UserRole.ADMIN

    @staticmethod
    def is_approved_company(user_id: str | UUID) -> dict[str, Any]:
        """
        Whether the user owns a company profile, and whether it is approved.

        Returns:
            {"is_company": bool, "is_approved": bool, "status": str | None}
        """
        user_id_str = normalize_uuid(user_id)
        if UserService.get_role(user_id_str) != UserRole.COMPANY:
            return {"is_company": False, "is_approved": False, "status": None}

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("company_profiles")
                .select("profile_status")
                .eq("user_id", user_id_str)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to check company status for {user_id_str}: {e}")
            raise

        status = response.data[0].get("profile_status") if response.data else None
        return {
            "is_company": True,
            "is_approved": status == ApprovalStatus.APPROVED.value,
            "status": status,
        }

    @staticmethod
    def delete_user(user_id: str | UUID) -> None:
        """
        Delete an account through Supabase Auth.

        Pending reminders are cancelled first so no email reaches a
        deleted user.

        Raises:
            SupabaseClientError: If Supabase refuses the deletion
        """
        user_id_str = normalize_uuid(user_id)
        AvailabilityService.cancel_reminders(user_id_str)

        client = SupabaseClient.get_client()
        try:
            client.auth.admin.delete_user(user_id_str)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete user: {e}",
                code="DELETE_USER_FAILED",
                details={"user_id": user_id_str},
            )
        logger.info(f"Deleted user {user_id_str}")

    @staticmethod
    def send_password_reset(email: str) -> None:
        """Ask Supabase Auth to email a reset link that lands on /auth."""
        client = SupabaseClient.get_client()
        redirect_to = f"{settings.SITE_URL.rstrip('/')}/auth"
        try:
            client.auth.reset_password_for_email(email, {"redirect_to": redirect_to})
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to send password reset: {e}",
                code="PASSWORD_RESET_FAILED",
            )
        logger.info("Password reset email requested")
