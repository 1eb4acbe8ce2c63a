# =============================================================================
# core/services/blob_service.py - Vercel Blob Storage
# =============================================================================
# Minimal client for the Vercel Blob REST API:
#   PUT  {BLOB_API_URL}/{pathname}   upload (public access)
#   POST {BLOB_API_URL}/delete       delete by URL
#
# Errors are raised as BlobStorageError; callers translate them into
# HTTP errors.
# =============================================================================

import logging
from urllib.parse import quote

import httpx

from app.config import settings
from core.models.media import BlobFile
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

BLOB_API_VERSION = "7"
BLOB_TIMEOUT = 60


class BlobStorageError(ApplicationError):
    """Vercel Blob refused a request or could not be reached."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(
            message=message,
            code="BLOB_STORAGE_ERROR",
            suggestion="Check BLOB_READ_WRITE_TOKEN and try again",
            details=details,
        )


class BlobService:
    """
    Service for Vercel Blob uploads and deletes.

    Example:
        blob = BlobService.put("terms-1700000000000.pdf", data, "application/pdf")
        BlobService.delete([blob.url])
    """

    @staticmethod
    def _headers(extra: dict[str, str] | None = None) -> dict[str, str]:
        if not settings.blob_configured:
            raise BlobStorageError("Blob storage not configured")
        headers = {
            "authorization": f"Bearer {settings.BLOB_READ_WRITE_TOKEN}",
            "x-api-version": BLOB_API_VERSION,
        }
        headers.update(extra or {})
        return headers

    @staticmethod
    def put(pathname: str, content: bytes, content_type: str | None = None) -> BlobFile:
        """
        Upload a public file.

        Returns:
            BlobFile with the public URL

        Raises:
            BlobStorageError: If the upload fails
        """
        extra = {"x-add-random-suffix": "0"}
        if content_type:
            extra["x-content-type"] = content_type

        url = f"{settings.BLOB_API_URL.rstrip('/')}/{quote(pathname)}"
        try:
            response = httpx.put(
                url,
                content=content,
                headers=BlobService._headers(extra),
                params={"access": "public"},
                timeout=BLOB_TIMEOUT,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Blob upload failed for {pathname}: {e}")
            raise BlobStorageError(f"Upload failed: {e}", details={"pathname": pathname})

        data = response.json()
        logger.info(f"Uploaded blob {data.get('pathname', pathname)}")
        return BlobFile(
            url=data["url"],
            download_url=data.get("downloadUrl"),
            pathname=data.get("pathname", pathname),
            content_type=data.get("contentType", content_type),
        )

    @staticmethod
    def delete(urls: list[str]) -> None:
        """
        Delete files by URL.

        Raises:
            BlobStorageError: If the delete fails
        """
        if not urls:
            return

        try:
            response = httpx.post(
                f"{settings.BLOB_API_URL.rstrip('/')}/delete",
                json={"urls": urls},
                headers=BlobService._headers(),
                timeout=BLOB_TIMEOUT,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Blob delete failed: {e}")
            raise BlobStorageError(f"Delete failed: {e}", details={"urls": urls})

        logger.info(f"Deleted {len(urls)} blob(s)")
