# =============================================================================
# core/services/document_service.py - Terms & Admin Document Library
# =============================================================================
# Files live in Vercel Blob; the database keeps the URLs:
# - site_settings.terms_conditions_url: current Terms & Conditions file
# - documents: the admin document library
# =============================================================================

import logging
import time
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import (
    DocumentNotFoundError,
    EmptyFileError,
    FileTooLargeError,
    StorageDeleteError,
    StorageUploadError,
)
from core.services.blob_service import BlobService, BlobStorageError
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now

logger = logging.getLogger(__name__)

DEFAULT_TERMS_FILENAME = "terms-conditions.pdf"
DEFAULT_TERMS_CONTENT_TYPE = "application/pdf"
UNKNOWN_UPLOADER = "Unknown User"


def terms_pathname(filename: str | None, timestamp_ms: int | None = None) -> str:
    """
    Unique blob name for a terms upload.

    Example:
        terms_pathname("tc.docx", 1700000000000) -> "terms-conditions-1700000000000.docx"
    """
    filename = filename or DEFAULT_TERMS_FILENAME
    timestamp_ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    extension = filename.rsplit(".", 1)[-1]
    return f"terms-conditions-{timestamp_ms}.{extension}"


class DocumentService:
    """Service for the terms file and the admin document library."""

    @staticmethod
    def _check_size(content: bytes) -> None:
        if not content:
            raise EmptyFileError()
        if len(content) > settings.max_document_size_bytes:
            raise FileTooLargeError(len(content) / (1024 * 1024), settings.MAX_DOCUMENT_SIZE_MB)

    # -------------------------------------------------------------------------
    # Terms & Conditions
    # -------------------------------------------------------------------------

    @staticmethod
    def _site_settings() -> dict[str, Any] | None:
        client = SupabaseClient.get_client()
        response = (
            client.table("site_settings")
            .select("id, terms_conditions_url")
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    @staticmethod
    def get_terms_url() -> str | None:
        """Current Terms & Conditions URL, or None."""
        row = DocumentService._site_settings()
        return row.get("terms_conditions_url") if row else None

    @staticmethod
    def _store_terms_url(url: str | None) -> None:
        client = SupabaseClient.get_client()
        row = DocumentService._site_settings()
        data = {"terms_conditions_url": url, "updated_at": utc_now().isoformat()}
        if row:
            client.table("site_settings").update(data).eq("id", row["id"]).execute()
        else:
            client.table("site_settings").insert(data).execute()

    @staticmethod
    def upload_terms(
        content: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> str:
        """
        Upload a new Terms & Conditions file and make it current.

        The previous file is deleted afterwards; failure to do so is
        only logged.

        Returns:
            Public URL of the new file

        Raises:
            StorageUploadError: If the blob upload fails
        """
        DocumentService._check_size(content)
        pathname = terms_pathname(filename)
        previous = DocumentService.get_terms_url()

        try:
            blob = BlobService.put(pathname, content, content_type or DEFAULT_TERMS_CONTENT_TYPE)
        except BlobStorageError as e:
            raise StorageUploadError(e.message)

        DocumentService._store_terms_url(blob.url)
        logger.info(f"Terms & Conditions updated: {blob.pathname}")

        if previous and previous != blob.url:
            try:
                BlobService.delete([previous])
            except BlobStorageError as e:
                logger.warning(f"Could not delete previous terms file: {e.message}")

        return blob.url

    @staticmethod
    def delete_terms(url: str) -> None:
        """
        Delete a terms file; clears site_settings when it was the current one.

        Raises:
            StorageDeleteError: If the blob delete fails
        """
        try:
            BlobService.delete([url])
        except BlobStorageError as e:
            raise StorageDeleteError(url, e.message)

        if DocumentService.get_terms_url() == url:
            DocumentService._store_terms_url(None)
        logger.info("Terms & Conditions file deleted")

    # -------------------------------------------------------------------------
    # Document library
    # -------------------------------------------------------------------------

    @staticmethod
    def list_documents() -> list[dict[str, Any]]:
        """Documents, newest first, each with uploader_name."""
        client = SupabaseClient.get_client()
        response = (
            client.table("documents")
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        rows = response.data or []

        uploaders = SupabaseClient.fetch_profiles_by_ids(
            [row["uploaded_by"] for row in rows if row.get("uploaded_by")]
        )
        for row in rows:
            uploader = uploaders.get(row.get("uploaded_by"))
            row["uploader_name"] = uploader.get("full_name") if uploader else UNKNOWN_UPLOADER
        return rows

    @staticmethod
    def upload_document(
        content: bytes,
        filename: str,
        content_type: str | None,
        uploaded_by: str | UUID,
    ) -> dict[str, Any]:
        """
        Store a file in the library.

        Raises:
            StorageUploadError: If the blob upload fails
        """
        DocumentService._check_size(content)
        pathname = f"documents/{int(time.time() * 1000)}-{filename}"

        try:
            blob = BlobService.put(pathname, content, content_type)
        except BlobStorageError as e:
            raise StorageUploadError(e.message)

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("documents")
                .insert({
                    "file_id": blob.pathname,
                    "file_name": filename,
                    "file_url": blob.url,
                    "file_size": len(content),
                    "mime_type": content_type,
                    "uploaded_by": normalize_uuid(uploaded_by),
                })
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to record document {filename}: {e}")
            try:
                BlobService.delete([blob.url])
            except BlobStorageError as cleanup_error:
                logger.warning(f"Could not remove orphaned blob {blob.url}: {cleanup_error.message}")
            raise

        logger.info(f"Document uploaded: {filename}")
        return response.data[0]

    @staticmethod
    def delete_document(document_id: str | UUID) -> None:
        """
        Delete a library document and its blob.

        Raises:
            DocumentNotFoundError: If the document doesn't exist
        """
        document_id_str = normalize_uuid(document_id)
        client = SupabaseClient.get_client()
        response = (
            client.table("documents")
            .delete()
            .eq("id", document_id_str)
            .execute()
        )
        if not response.data:
            raise DocumentNotFoundError(document_id_str)

        url = response.data[0].get("file_url")
        if url:
            try:
                BlobService.delete([url])
            except BlobStorageError as e:
                logger.warning(f"Document row deleted but blob remains: {e.message}")
        logger.info(f"Document deleted: {document_id_str}")
