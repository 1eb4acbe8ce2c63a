# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes are for getting user info after authentication.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user's profile and role.

    Raises:
        401: If not authenticated
    """
    role = SupabaseClient.fetch_user_role(user.id)

    try:
        profile = SupabaseClient.fetch_profile(user.id)
    except SupabaseClientError as e:
        logger.warning(f"Could not fetch user profile: {e}")
        profile = None

    if profile:
        return UserResponse(
            id=user.id,
            email=profile.get("email") or user.email,
            full_name=profile.get("full_name"),
            phone=profile.get("phone"),
            role=role or profile.get("role"),
            created_at=profile.get("created_at"),
        )

    # Signed up in auth but the profiles row isn't there yet
    return UserResponse(id=user.id, email=user.email, role=role)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Returns:
        dict: Confirmation with user_id

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
