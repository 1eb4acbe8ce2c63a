# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for the lookups every service needs:
# - Account profiles (email, full name) and roles
# - Professional profiles
# - Stored procedure (RPC) calls
#
# Services with table-specific queries use get_client() directly.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   profile = SupabaseClient.fetch_profile(user_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError, normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for "JSON object requested, multiple (or no) rows returned"
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(ApplicationError):
    """
    Error during Supabase operations.

    Provides actionable error messages: the code says what failed,
    the suggestion says how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, suggestion, details)

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def is_no_rows_error(error: Exception) -> bool:
    """True when a .single() query failed only because nothing matched."""
    return NO_ROWS_CODE in str(error)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        profile = SupabaseClient.fetch_profile("550e8400-...")
        role = SupabaseClient.fetch_user_role("550e8400-...")
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (tests swap in a fake)."""
        cls._instance = None

    # -------------------------------------------------------------------------
    # Account Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch the account profile (email, full_name, phone, role) for a user.

        Returns:
            Profile dict, or None if the user has no profile row

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .select("user_id, email, full_name, phone, role, created_at")
                .eq("user_id", user_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_no_rows_error(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def fetch_profiles_by_ids(cls, user_ids: list[str]) -> dict[str, dict[str, Any]]:
        """
        Fetch account profiles for many users in one round trip.

        Returns:
            Mapping of user_id -> profile dict (missing users are absent)
        """
        if not user_ids:
            return {}

        client = cls.get_client()
        try:
            response = (
                client.table("profiles")
                .select("user_id, email, full_name")
                .in_("user_id", list(dict.fromkeys(user_ids)))
                .execute()
            )
            return {row["user_id"]: row for row in (response.data or [])}

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profiles: {e}",
                code="FETCH_PROFILES_FAILED",
                details={"count": len(user_ids)}
            )

    @classmethod
    def fetch_user_role(cls, user_id: str | UUID) -> str | None:
        """
        Fetch the application role (admin, professional, user, company).

        Returns:
            Role string, or None when no role row exists
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("user_roles")
                .select("role")
                .eq("user_id", user_id_str)
                .single()
                .execute()
            )
            return response.data.get("role") if response.data else None

        except Exception as e:
            if is_no_rows_error(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch user role: {e}",
                code="FETCH_ROLE_FAILED",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Professional Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_professional_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch the professional profile row for a user.

        Returns:
            Professional profile dict, or None if not found
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("professional_profiles")
                .select("*")
                .eq("user_id", user_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_no_rows_error(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch professional profile: {e}",
                code="FETCH_PROFESSIONAL_FAILED",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Stored Procedures
    # -------------------------------------------------------------------------

    @classmethod
    def call_rpc(cls, function: str, params: dict[str, Any] | None = None) -> Any:
        """
        Call a Postgres function exposed through PostgREST.

        Args:
            function: Function name (e.g. "get_cached_distance")
            params: Named arguments

        Returns:
            The function's result (scalar, row list, or None)

        Raises:
            SupabaseClientError: If the call fails
        """
        client = cls.get_client()

        try:
            response = client.rpc(function, params or {}).execute()
            return response.data

        except Exception as e:
            raise SupabaseClientError(
                message=f"RPC {function} failed: {e}",
                code="RPC_FAILED",
                details={"function": function}
            )

    @classmethod
    def fetch_admin_emails(cls) -> list[str]:
        """Email addresses of every admin account."""
        rows = cls.call_rpc("get_admin_emails") or []
        return [row["email"] for row in rows if row.get("email")]
