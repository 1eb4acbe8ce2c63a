# =============================================================================
# core/services/image_service.py - Cloudinary Image Storage
# =============================================================================
# Uploads and deletes images through the Cloudinary SDK, and keeps each
# user's profile picture in the profileimages table:
#   profileimages(uid, src, cloudinary_public_id)
# =============================================================================

import logging
from typing import Any
from uuid import UUID

import cloudinary
import cloudinary.uploader

from app.config import settings
from app.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    ImageDeleteError,
    ImageNotFoundError,
    ImageUploadError,
    InvalidFileTypeError,
    InvalidPublicIdError,
    ServiceNotConfiguredError,
)
from core.models.media import ImageUploadResult, ProfileImage
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now

logger = logging.getLogger(__name__)

PROFILE_IMAGE_FOLDER = "profile-pictures"
MAX_PUBLIC_ID_LENGTH = 500


class ImageService:
    """
    Service for Cloudinary image operations.

    Example:
        result = ImageService.upload(data, "me.png", "image/png", folder="avatars")
        ImageService.delete(result.public_id)
    """

    @staticmethod
    def _configure() -> None:
        """Point the SDK at our account, or fail if credentials are missing."""
        if not settings.cloudinary_configured:
            raise ServiceNotConfiguredError(
                "Cloudinary",
                "CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET",
            )
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )

    @staticmethod
    def validate_upload(content: bytes, content_type: str | None) -> None:
        """
        Check type and size before anything is sent to Cloudinary.

        Raises:
            EmptyFileError, InvalidFileTypeError, FileTooLargeError
        """
        if not content:
            raise EmptyFileError()

        allowed = settings.allowed_image_types_list
        if (content_type or "").lower() not in allowed:
            raise InvalidFileTypeError(content_type or "unknown", allowed)

        if len(content) > settings.max_image_size_bytes:
            raise FileTooLargeError(len(content) / (1024 * 1024), settings.MAX_IMAGE_SIZE_MB)

    @staticmethod
    def upload(
        content: bytes,
        filename: str | None,
        content_type: str | None,
        folder: str | None = None,
        public_id: str | None = None,
        tags: list[str] | None = None,
        transformation: Any = None,
    ) -> ImageUploadResult:
        """
        Upload an image.

        Args:
            content: Raw image bytes
            filename: Original filename (used for the public ID)
            content_type: MIME type reported by the client
            folder: Cloudinary folder (default CLOUDINARY_DEFAULT_FOLDER)
            public_id: Fixed public ID; an existing asset is overwritten
            tags: Cloudinary tags
            transformation: Cloudinary incoming transformation

        Returns:
            ImageUploadResult

        Raises:
            ImageUploadError: If Cloudinary rejects the upload
        """
        ImageService.validate_upload(content, content_type)
        ImageService._configure()

        options: dict[str, Any] = {
            "resource_type": "image",
            "folder": folder or settings.CLOUDINARY_DEFAULT_FOLDER,
            "use_filename": True,
            "unique_filename": True,
            "overwrite": False,
        }
        if filename:
            options["filename_override"] = filename
        if public_id:
            options["public_id"] = public_id
            options["overwrite"] = True
        if tags:
            options["tags"] = tags
        if transformation:
            options["transformation"] = transformation

        try:
            result = cloudinary.uploader.upload(content, **options)
        except Exception as e:
            logger.error(f"Cloudinary upload error: {e}")
            raise ImageUploadError(str(e))

        logger.info(f"Uploaded image {result.get('public_id')} ({result.get('bytes')} bytes)")
        return ImageUploadResult(
            public_id=result["public_id"],
            url=result.get("url"),
            secure_url=result["secure_url"],
            width=result.get("width"),
            height=result.get("height"),
            format=result.get("format"),
            resource_type=result.get("resource_type", "image"),
            bytes=result.get("bytes"),
            created_at=result.get("created_at"),
        )

    @staticmethod
    def delete(public_id: Any) -> dict[str, Any]:
        """
        Delete an image and invalidate CDN copies.

        Raises:
            InvalidPublicIdError: Missing, non-string or over-long ID
            ImageNotFoundError: Cloudinary does not know the ID
            ImageDeleteError: Any other Cloudinary answer
        """
        if not public_id:
            raise InvalidPublicIdError("Public ID is required")
        if not isinstance(public_id, str) or len(public_id) > MAX_PUBLIC_ID_LENGTH:
            raise InvalidPublicIdError()

        ImageService._configure()

        try:
            result = cloudinary.uploader.destroy(public_id, invalidate=True)
        except Exception as e:
            logger.error(f"Cloudinary delete error for {public_id}: {e}")
            raise ImageDeleteError(str(e))

        outcome = result.get("result")
        if outcome == "ok":
            logger.info(f"Deleted image {public_id}")
            return {"success": True, "result": outcome}
        if outcome == "not found":
            raise ImageNotFoundError(public_id)
        raise ImageDeleteError(str(outcome))

    # -------------------------------------------------------------------------
    # Profile pictures
    # -------------------------------------------------------------------------

    @staticmethod
    def get_profile_image(user_id: str | UUID) -> ProfileImage | None:
        user_id_str = normalize_uuid(user_id)
        client = SupabaseClient.get_client()
        response = (
            client.table("profileimages")
            .select("uid, src, cloudinary_public_id")
            .eq("uid", user_id_str)
            .limit(1)
            .execute()
        )
        return ProfileImage(**response.data[0]) if response.data else None

    @staticmethod
    def _discard(public_id: str) -> None:
        """Delete an asset we no longer reference; failures are logged."""
        try:
            ImageService.delete(public_id)
        except (ImageNotFoundError, ImageDeleteError) as e:
            logger.warning(f"Could not delete old image {public_id}: {e.message}")

    @staticmethod
    def set_profile_image(
        user_id: str | UUID,
        content: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> ProfileImage:
        """
        Replace a user's profile picture.

        The previous asset is deleted first. If the database write fails
        the freshly uploaded asset is deleted again.
        """
        user_id_str = normalize_uuid(user_id)
        ImageService.validate_upload(content, content_type)

        existing = ImageService.get_profile_image(user_id_str)
        if existing and existing.cloudinary_public_id:
            ImageService._discard(existing.cloudinary_public_id)

        uploaded = ImageService.upload(
            content,
            filename,
            content_type,
            folder=PROFILE_IMAGE_FOLDER,
        )

        image = ProfileImage(
            uid=user_id_str,
            src=uploaded.secure_url,
            cloudinary_public_id=uploaded.public_id,
        )
        client = SupabaseClient.get_client()
        try:
            client.table("profileimages").upsert({
                **image.model_dump(),
                "updated": utc_now().isoformat(),
            }).execute()
        except Exception as e:
            logger.error(f"Failed to save profile image for {user_id_str}: {e}")
            ImageService._discard(uploaded.public_id)
            raise

        logger.info(f"Profile image updated for {user_id_str}")
        return image

    @staticmethod
    def delete_profile_image(user_id: str | UUID) -> None:
        """
        Remove a user's profile picture.

        Raises:
            ImageNotFoundError: If the user has no profile picture
        """
        user_id_str = normalize_uuid(user_id)
        existing = ImageService.get_profile_image(user_id_str)
        if existing is None:
            raise ImageNotFoundError(user_id_str)

        if existing.cloudinary_public_id:
            ImageService._discard(existing.cloudinary_public_id)

        client = SupabaseClient.get_client()
        client.table("profileimages").delete().eq("uid", user_id_str).execute()
        logger.info(f"Profile image deleted for {user_id_str}")
