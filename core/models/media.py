# =============================================================================
# core/models/media.py - Image & Document Schemas
# =============================================================================

from pydantic import BaseModel, Field


class ImageUploadResult(BaseModel):
    """What Cloudinary reports for a stored image."""
    public_id: str
    url: str | None = None
    secure_url: str
    width: int | None = None
    height: int | None = None
    format: str | None = None
    resource_type: str = "image"
    bytes: int | None = None
    created_at: str | None = None


class ImageDeleteRequest(BaseModel):
    """Body of POST /images/delete. Length is validated by the service."""
    public_id: str | None = None


class ProfileImage(BaseModel):
    """A user's current profile picture."""
    uid: str
    src: str
    cloudinary_public_id: str | None = None


class BlobFile(BaseModel):
    """A file stored in Vercel Blob."""
    url: str
    download_url: str | None = None
    pathname: str
    content_type: str | None = None


class TermsUploadResult(BaseModel):
    download_url: str


class TermsDeleteRequest(BaseModel):
    url: str = Field(..., min_length=1)
