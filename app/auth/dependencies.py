# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies Supabase access tokens and resolves the caller's role.
#
# Token verification supports both:
# - ES256/RS256 (Supabase JWT signing keys) via the project's JWKS
# - HS256 (legacy Supabase JWT secret)
#
# Usage:
#   from app.auth import get_current_user, require_admin, AuthUser
#
#   @router.delete("/users/{user_id}")
#   def delete_user(user_id: str, admin: AuthUser = Depends(require_admin)):
#       ...
# =============================================================================

import logging
import time
from typing import Any
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.auth.models import AuthUser
from app.config import settings
from app.exceptions import AdminAccessRequiredError, ForbiddenError
from core.models.registration import UserRole
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _fetch_jwks() -> dict:
    """Fetch the project's JWKS, cached for an hour."""
    global _jwks_cache, _jwks_cache_time

    now = time.time()
    if _jwks_cache and (now - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    jwks_url = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"
    try:
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = now
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Stale keys beat no keys
        return _jwks_cache or {"keys": []}


def _get_signing_key(token: str) -> tuple[Any, str]:
    """
    Pick the key that verifies this token.

    Returns:
        (key, algorithm)
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = header.get("alg", "HS256")
    kid = header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token.

    Raises:
        HTTPException: 401 if the token is invalid, expired or has no subject
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated",
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    return AuthUser(id=user_uuid, email=payload.get("email"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Authenticated caller from the Authorization: Bearer header.

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    user = decode_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user


async def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Caller must hold the admin role in user_roles.

    Raises:
        AdminAccessRequiredError: 403 for every other role
    """
    role = SupabaseClient.fetch_user_role(user.id)
    if role != UserRole.ADMIN.value:
        logger.warning(f"Admin access denied for {user.id} (role={role})")
        raise AdminAccessRequiredError()
    return user


def ensure_self_or_admin(user: AuthUser, user_id: str) -> None:
    """
    Allow acting on user_id only for that user or an admin.

    Raises:
        ForbiddenError: 403 otherwise
    """
    if str(user.id) == str(user_id):
        return
    if SupabaseClient.fetch_user_role(user.id) == UserRole.ADMIN.value:
        return
    raise ForbiddenError()
