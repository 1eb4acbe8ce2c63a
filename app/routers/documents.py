# =============================================================================
# app/routers/documents.py - Terms & Document Library Endpoints
# =============================================================================
# Terms & Conditions file (public read, admin write) and the admin-only
# document library. Files live in Vercel Blob; metadata in Supabase.
# =============================================================================

import logging
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, File, Header, Path, Query, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.auth import AuthUser, require_admin
from app.exceptions import EmptyFileError
from core.models.media import TermsDeleteRequest, TermsUploadResult
from core.services.document_service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Terms & Conditions
# =============================================================================

@router.get("/terms")
async def get_terms() -> dict[str, Any]:
    """Current Terms & Conditions URL (null when none uploaded)."""
    return {"url": DocumentService.get_terms_url()}


@router.post("/terms", response_model=TermsUploadResult)
async def upload_terms(
    request: Request,
    filename: Annotated[str | None, Query(description="Original filename")] = None,
    x_filename: Annotated[str | None, Header()] = None,
    content_type: Annotated[str | None, Header()] = None,
    admin: AuthUser = Depends(require_admin),
):
    """
    Upload a new Terms & Conditions file as the raw request body.

    The filename comes from ?filename= or the X-Filename header.

    Raises:
        400: Empty body
        413: Larger than MAX_DOCUMENT_SIZE_MB
    """
    content = await request.body()
    if not content:
        raise EmptyFileError()

    url = await run_in_threadpool(
        DocumentService.upload_terms, content, filename or x_filename, content_type,
    )
    logger.info(f"Admin {admin.id} uploaded new terms")
    return TermsUploadResult(download_url=url)


@router.delete("/terms")
def delete_terms(
    request: TermsDeleteRequest,
    admin: AuthUser = Depends(require_admin),
) -> dict[str, Any]:
    """Delete a terms file by URL."""
    DocumentService.delete_terms(request.url)
    return {"success": True}


# =============================================================================
# Document Library
# =============================================================================

@router.get("/documents")
async def list_documents(admin: AuthUser = Depends(require_admin)) -> list[dict[str, Any]]:
    """Library documents, newest first, with uploader names."""
    return DocumentService.list_documents()


@router.post("/documents", status_code=201)
async def upload_document(
    file: Annotated[UploadFile, File(description="Document to store")],
    admin: AuthUser = Depends(require_admin),
) -> dict[str, Any]:
    """Add a document to the library."""
    content = await file.read()
    if not content:
        raise EmptyFileError()
    return await run_in_threadpool(
        DocumentService.upload_document,
        content,
        file.filename or "document",
        file.content_type,
        uploaded_by=admin.id,
    )


@router.delete("/documents/{document_id}")
def delete_document(
    document_id: Annotated[UUID, Path(description="Document id")],
    admin: AuthUser = Depends(require_admin),
) -> dict[str, Any]:
    """Remove a document and its file."""
    DocumentService.delete_document(document_id)
    return {"success": True, "message": "Document deleted"}
