# =============================================================================
# app/routers/users.py - Account Endpoints
# =============================================================================
# Account deletion, admin-triggered password resets and the company
# approval check used by the frontend to gate company features.
# =============================================================================

import logging
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Path

from app.auth import AuthUser, ensure_self_or_admin, get_current_user, require_admin
from app.exceptions import ProfileNotFoundError
from core.services.user_service import UserService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()

UserIdPath = Annotated[UUID, Path(description="User id")]


@router.get("/me/company-status")
async def my_company_status(user: AuthUser = Depends(get_current_user)) -> dict[str, Any]:
    """Whether the caller is a company and whether it has been approved."""
    return UserService.is_approved_company(user.id)


@router.delete("/{user_id}")
def delete_user(
    user_id: UserIdPath,
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Delete an account. Users may delete themselves; admins anyone.

    Scheduled availability reminders are cancelled first.
    """
    ensure_self_or_admin(user, str(user_id))
    UserService.delete_user(user_id)
    return {"success": True, "message": "User deleted successfully"}


@router.post("/{user_id}/password-reset")
def send_password_reset(
    user_id: UserIdPath,
    admin: AuthUser = Depends(require_admin),
) -> dict[str, Any]:
    """Email the user a password reset link (admin only)."""
    profile = SupabaseClient.fetch_profile(user_id)
    if not profile or not profile.get("email"):
        raise ProfileNotFoundError(str(user_id))

    UserService.send_password_reset(profile["email"])
    logger.info(f"Admin {admin.id} sent password reset to {user_id}")
    return {"success": True, "message": "Password reset email sent"}
