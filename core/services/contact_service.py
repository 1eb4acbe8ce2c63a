# =============================================================================
# core/services/contact_service.py - Company Contact Requests
# =============================================================================
# Companies send inquiries about a professional; admins triage them
# through new -> contacted -> closed.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import ContactRequestNotFoundError, ProfileNotFoundError
from core.models.contact import ContactRequestCreate, ContactStatus
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now

logger = logging.getLogger(__name__)

TABLE = "contact_requests"

# Columns matched by the free-text search
SEARCH_FIELDS = ("company_name", "contact_person", "email")

UNKNOWN_PROFESSIONAL = "Unknown Professional"


class ContactService:
    """Service for contact request CRUD."""

    @staticmethod
    def create(professional_id: str | UUID, payload: ContactRequestCreate) -> dict[str, Any]:
        """
        Store a new contact request with status 'new'.

        Raises:
            ProfileNotFoundError: If the professional doesn't exist
        """
        professional_id_str = normalize_uuid(professional_id)
        if SupabaseClient.fetch_professional_profile(professional_id_str) is None:
            raise ProfileNotFoundError(professional_id_str)

        data = payload.model_dump()
        data["professional_id"] = professional_id_str
        data["status"] = ContactStatus.NEW.value

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to create contact request: {e}")
            raise

        if not response.data:
            raise Exception("Insert returned no data")

        contact = response.data[0]
        logger.info(f"Created contact request {contact.get('id')} for {professional_id_str}")
        return contact

    @staticmethod
    def list(status: ContactStatus | None = None, search: str | None = None) -> list[dict[str, Any]]:
        """
        Contact requests, newest first.

        Each row gains a `professional` object ({user_id, full_name}).

        Args:
            status: Only rows in this status
            search: Case-insensitive match on company, contact person or email
        """
        client = SupabaseClient.get_client()
        try:
            query = client.table(TABLE).select("*")
            if status:
                query = query.eq("status", status.value)
            response = query.order("created_at", desc=True).execute()
        except Exception as e:
            logger.error(f"Failed to list contact requests: {e}")
            raise

        rows = response.data or []
        if search:
            needle = search.strip().lower()
            rows = [
                row for row in rows
                if any(needle in str(row.get(field) or "").lower() for field in SEARCH_FIELDS)
            ]

        ids = [row["professional_id"] for row in rows if row.get("professional_id")]
        profiles = SupabaseClient.fetch_profiles_by_ids(ids)
        for row in rows:
            professional_id = row.get("professional_id")
            if not professional_id:
                row["professional"] = None
                continue
            profile = profiles.get(professional_id)
            row["professional"] = {
                "user_id": professional_id,
                "full_name": profile.get("full_name") if profile else UNKNOWN_PROFESSIONAL,
            }
        return rows

    @staticmethod
    def update_status(contact_id: str | UUID, status: ContactStatus) -> dict[str, Any]:
        """
        Move a contact request to a new status.

        Raises:
            ContactRequestNotFoundError: If the request doesn't exist
        """
        contact_id_str = normalize_uuid(contact_id)
        client = SupabaseClient.get_client()
        response = (
            client.table(TABLE)
            .update({"status": status.value, "updated_at": utc_now().isoformat()})
            .eq("id", contact_id_str)
            .execute()
        )
        if not response.data:
            raise ContactRequestNotFoundError(contact_id_str)

        logger.info(f"Contact request {contact_id_str} -> {status.value}")
        return response.data[0]

    @staticmethod
    def delete(contact_id: str | UUID) -> None:
        """
        Delete a contact request.

        Raises:
            ContactRequestNotFoundError: If the request doesn't exist
        """
        contact_id_str = normalize_uuid(contact_id)
        client = SupabaseClient.get_client()
        response = client.table(TABLE).delete().eq("id", contact_id_str).execute()
        if not response.data:
            raise ContactRequestNotFoundError(contact_id_str)
        logger.info(f"Deleted contact request {contact_id_str}")
