# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth, plus role checks
# against the user_roles table.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import (
    ensure_self_or_admin,
    get_current_user,
    require_admin,
)
from app.auth.models import AuthUser, UserResponse

__all__ = [
    "ensure_self_or_admin",
    "get_current_user",
    "require_admin",
    "AuthUser",
    "UserResponse",
]
