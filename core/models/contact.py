# =============================================================================
# core/models/contact.py - Contact Request Schemas
# =============================================================================
# A contact request is a company's inquiry about one professional.
# Admins move it through new -> contacted -> closed.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, EmailStr, Field


class ContactStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    CLOSED = "closed"


class ContactRequestCreate(BaseModel):
    """
    Body of POST /professionals/{user_id}/contact.

    Example:
        {
            "company_name": "Acme Kft.",
            "contact_person": "Jane Doe",
            "email": "jane@acme.example",
            "message": "We have a three month project starting in May."
        }
    """

    company_name: str = Field(..., min_length=1, max_length=255)
    contact_person: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)
    subject: str | None = Field(default=None, max_length=255)
    message: str = Field(..., min_length=1, max_length=5000)
    duration: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)


class ContactStatusUpdate(BaseModel):
    """Body of PATCH /contacts/{id}."""
    status: ContactStatus
