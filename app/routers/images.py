# =============================================================================
# app/routers/images.py - Image Endpoints
# =============================================================================
# Cloudinary uploads and deletes for the frontend, plus profile pictures.
# Generic upload/delete are origin-checked and rate-limited per IP;
# profile picture changes need a signed-in user.
# =============================================================================

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.auth import AuthUser, get_current_user
from app.dependencies import rate_limited, require_allowed_origin
from core.models.media import ImageDeleteRequest, ImageUploadResult, ProfileImage
from core.services.image_service import ImageService

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_json_field(name: str, raw: str | None) -> Any:
    """Multipart forms carry tags/transformation as JSON strings."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail=f"Invalid JSON in '{name}' field")


@router.post(
    "/images/upload",
    response_model=ImageUploadResult,
    dependencies=[Depends(require_allowed_origin), Depends(rate_limited("image_upload"))],
)
async def upload_image(
    file: Annotated[UploadFile, File(description="Image file")],
    folder: Annotated[str | None, Form()] = None,
    public_id: Annotated[str | None, Form(alias="publicId")] = None,
    tags: Annotated[str | None, Form(description="JSON array of tags")] = None,
    transformation: Annotated[str | None, Form(description="JSON Cloudinary transformation")] = None,
):
    """
    Upload an image to Cloudinary.

    Raises:
        400: Empty file, bad JSON field or unsupported type
        413: File larger than MAX_IMAGE_SIZE_MB
        429: Too many uploads from this IP
    """
    parsed_tags = _parse_json_field("tags", tags)
    if parsed_tags is not None and not isinstance(parsed_tags, list):
        raise HTTPException(status_code=400, detail="'tags' must be a JSON array")

    content = await file.read()
    logger.info(f"Image upload: {file.filename} ({len(content)} bytes)")

    return await run_in_threadpool(
        ImageService.upload,
        content,
        file.filename,
        file.content_type,
        folder=folder,
        public_id=public_id,
        tags=parsed_tags,
        transformation=_parse_json_field("transformation", transformation),
    )


@router.post(
    "/images/delete",
    dependencies=[Depends(require_allowed_origin), Depends(rate_limited("image_delete"))],
)
def delete_image(request: ImageDeleteRequest) -> dict[str, Any]:
    """
    Delete an image by public id and invalidate CDN copies.

    Raises:
        400: Missing or malformed public id
        404: No such image
    """
    return ImageService.delete(request.public_id)


@router.put("/profile-image", response_model=ProfileImage)
async def set_profile_image(
    file: Annotated[UploadFile, File(description="Profile picture")],
    user: AuthUser = Depends(get_current_user),
):
    """Replace the caller's profile picture."""
    content = await file.read()
    return await run_in_threadpool(
        ImageService.set_profile_image, user.id, content, file.filename, file.content_type,
    )


@router.delete("/profile-image")
def delete_profile_image(user: AuthUser = Depends(get_current_user)) -> dict[str, Any]:
    """Remove the caller's profile picture."""
    ImageService.delete_profile_image(user.id)
    return {"success": True, "message": "Profile image deleted"}
