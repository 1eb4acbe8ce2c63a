# =============================================================================
# app/routers/contacts.py - Contact Request Administration
# =============================================================================
# Admin inbox for contact requests sent to professionals.
# =============================================================================

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from app.auth import require_admin
from core.models.contact import ContactStatus, ContactStatusUpdate
from core.services.contact_service import ContactService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("")
async def list_contacts(
    status: Annotated[ContactStatus | None, Query(description="Filter by status")] = None,
    search: Annotated[str | None, Query(description="Company, contact person or email")] = None,
) -> list[dict[str, Any]]:
    """Contact requests, newest first."""
    return ContactService.list(status=status, search=search)


@router.patch("/{contact_id}")
async def update_contact_status(
    contact_id: Annotated[UUID, Path(description="Contact request id")],
    request: ContactStatusUpdate,
) -> dict[str, Any]:
    """Move a contact request to new, contacted or closed."""
    return ContactService.update_status(contact_id, request.status)


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: Annotated[UUID, Path(description="Contact request id")],
) -> dict[str, Any]:
    """Delete a contact request."""
    ContactService.delete(contact_id)
    return {"success": True, "message": "Contact request deleted"}
