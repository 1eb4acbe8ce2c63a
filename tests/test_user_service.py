# =============================================================================
# tests/test_user_service.py - Account Administration Tests
# =============================================================================
# Run with: pytest tests/test_user_service.py -v
# =============================================================================

from unittest.mock import patch

import pytest

from app.config import settings
from core.models.registration import UserRole
from core.services.user_service import UserService
from lib.supabase_client import SupabaseClientError


class TestRoles:
    """Tests for role lookups."""

    def test_known_role(self, fake_db, admin_id):
        fake_db.seed("user_roles", {"user_id": admin_id, "role": "admin"})

        assert UserService.get_role(admin_id) == UserRole.ADMIN
        assert UserService.is_admin(admin_id) is True

    def test_missing_role(self, fake_db, professional_id):
        assert UserService.get_role(professional_id) is None
        assert UserService.is_admin(professional_id) is False

    def test_unknown_role_value(self, fake_db, professional_id):
        fake_db.seed("user_roles", {"user_id": professional_id, "role": "superuser"})

        assert UserService.get_role(professional_id) is None


class TestIsApprovedCompany:
    """Tests for UserService.is_approved_company."""

    def test_not_a_company(self, fake_db, professional_id):
        fake_db.seed("user_roles", {"user_id": professional_id, "role": "professional"})

        assert UserService.is_approved_company(professional_id) == {
            "is_company": False, "is_approved": False, "status": None,
        }

    @pytest.mark.parametrize("status,approved", [
        ("approved", True),
        ("pending", False),
        ("rejected", False),
    ])
    def test_company_status(self, fake_db, professional_id, status, approved):
        fake_db.seed("user_roles", {"user_id": professional_id, "role": "company"})
        fake_db.seed("company_profiles", {"id": "co-1", "user_id": professional_id, "profile_status": status})

        result = UserService.is_approved_company(professional_id)

        assert result == {"is_company": True, "is_approved": approved, "status": status}

    def test_company_without_profile(self, fake_db, professional_id):
        fake_db.seed("user_roles", {"user_id": professional_id, "role": "company"})

        result = UserService.is_approved_company(professional_id)

        assert result["is_company"] is True
        assert result["status"] is None


class TestDeleteUser:
    """Tests for UserService.delete_user."""

    def test_cancels_reminders_then_deletes(self, fake_db, professional_id, mock_resend):
        # Arrange
        fake_db.seed("scheduled_availability_emails", {
            "id": "rem-1",
            "user_id": professional_id,
            "status": "scheduled",
            "resend_email_id": "re_old",
        })

        # Act
        UserService.delete_user(professional_id)

        # Assert
        mock_resend.cancel.assert_called_once_with("re_old")
        assert fake_db.rows("scheduled_availability_emails") == []
        fake_db.auth.admin.delete_user.assert_called_once_with(professional_id)

    def test_unconfigured_email_does_not_block_deletion(self, fake_db, professional_id, mock_resend):
        fake_db.seed("scheduled_availability_emails", {
            "id": "rem-1",
            "user_id": professional_id,
            "status": "scheduled",
            "resend_email_id": "re_old",
        })

        with patch.object(settings, "RESEND_API_KEY", ""):
            UserService.delete_user(professional_id)

        assert fake_db.rows("scheduled_availability_emails") == []
        fake_db.auth.admin.delete_user.assert_called_once_with(professional_id)

    def test_auth_failure(self, fake_db, professional_id):
        fake_db.auth.admin.delete_user.side_effect = Exception("User not found")

        with pytest.raises(SupabaseClientError) as exc_info:
            UserService.delete_user(professional_id)

        assert exc_info.value.code == "DELETE_USER_FAILED"


class TestPasswordReset:
    """Tests for UserService.send_password_reset."""

    def test_redirects_to_auth_page(self, fake_db):
        UserService.send_password_reset("jane@example.com")

        fake_db.auth.reset_password_for_email.assert_called_once_with(
            "jane@example.com", {"redirect_to": "https://talentflow.test/auth"},
        )

    def test_failure(self, fake_db):
        fake_db.auth.reset_password_for_email.side_effect = Exception("rate limited")

        with pytest.raises(SupabaseClientError) as exc_info:
            UserService.send_password_reset("jane@example.com")

        assert exc_info.value.code == "PASSWORD_RESET_FAILED"
