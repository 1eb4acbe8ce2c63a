# =============================================================================
# core/services/professional_service.py - Public Professional Directory
# =============================================================================
# Public listings come from masking stored procedures so contact details
# never leave the database unmasked:
# - get_professionals_for_public(): every searchable, approved professional
# - get_profile_for_public(_user_id): one profile
#
# Listings can be ranked by distance from a company's city.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import ProfileNotFoundError
from core.services.geo_service import GeoService
from lib.geo import format_distance
from lib.supabase_client import SupabaseClient
from lib.text_fields import parse_education, parse_work_experience
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


def _expand_text_fields(row: dict[str, Any]) -> dict[str, Any]:
    """Split the separator-joined experience and education columns."""
    work = parse_work_experience(row.get("work_experience"))
    row["experience_summary"] = work.summary
    row["work_experience_items"] = work.sections
    row["education_items"] = parse_education(row.get("education"))
    return row


class ProfessionalService:
    """Service for the public professional directory."""

    @staticmethod
    def list_public(
        origin_city: str | None = None,
        max_distance_km: float | None = None,
        available_only: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Public professional listing.

        Args:
            origin_city: When set, each row gains distance_km / distance and
                the list is sorted nearest first (unknown distances last)
            max_distance_km: Drop rows farther than this (needs origin_city)
            available_only: Only professionals available right now

        Returns:
            List of masked profile dicts
        """
        rows = SupabaseClient.call_rpc("get_professionals_for_public") or []

        if available_only:
            rows = [row for row in rows if row.get("available")]

        if not origin_city:
            return rows

        distances = GeoService.batch_calculate_distances(
            origin_city,
            [row.get("city") or "" for row in rows],
        )
        for row, km in zip(rows, distances):
            row["distance_km"] = km
            row["distance"] = format_distance(km) if km is not None else None

        if max_distance_km is not None:
            rows = [
                row for row in rows
                if row["distance_km"] is not None and row["distance_km"] <= max_distance_km
            ]

        rows.sort(key=lambda row: (row["distance_km"] is None, row["distance_km"] or 0.0))
        logger.info(f"Ranked {len(rows)} professionals from {origin_city}")
        return rows

    @staticmethod
    def get_public(user_id: str | UUID) -> dict[str, Any]:
        """
        One masked public profile with experience and education split
        into sections.

        Raises:
            ProfileNotFoundError: If the procedure returns nothing
        """
        user_id_str = normalize_uuid(user_id)
        rows = SupabaseClient.call_rpc("get_profile_for_public", {"_user_id": user_id_str})
        if not rows:
            raise ProfileNotFoundError(user_id_str)

        row = rows[0] if isinstance(rows, list) else rows
        return _expand_text_fields(dict(row))
