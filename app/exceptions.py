# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors carry a machine-readable code and, where possible, a suggestion
# telling the caller how to fix the request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class TalentFlowException(Exception):
    """
    Base exception for the TalentFlow API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "TALENTFLOW_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Lookup Exceptions
# =============================================================================

class ProfileNotFoundError(TalentFlowException):
    """Raised when a user has no (professional) profile row."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"Profile not found: {user_id}",
            code="PROFILE_NOT_FOUND",
            status_code=404,
            suggestion="Check that the user_id is correct and the user finished registration",
            details={"user_id": user_id}
        )


class CompanyNotFoundError(TalentFlowException):
    """Raised when a company profile ID doesn't exist."""

    def __init__(self, company_id: str):
        super().__init__(
            message=f"Company not found: {company_id}",
            code="COMPANY_NOT_FOUND",
            status_code=404,
            suggestion="Check that the company_id is correct",
            details={"company_id": company_id}
        )


class ContactRequestNotFoundError(TalentFlowException):
    """Raised when a contact request ID doesn't exist."""

    def __init__(self, contact_id: str):
        super().__init__(
            message=f"Contact request not found: {contact_id}",
            code="CONTACT_NOT_FOUND",
            status_code=404,
            details={"contact_id": contact_id}
        )


class RegistrationRequestNotFoundError(TalentFlowException):
    """Raised when a user has no registration request to moderate."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"Registration request not found for user: {user_id}",
            code="REGISTRATION_NOT_FOUND",
            status_code=404,
            suggestion="The user must submit a registration before it can be reviewed",
            details={"user_id": user_id}
        )


class DocumentNotFoundError(TalentFlowException):
    """Raised when a document ID doesn't exist."""

    def __init__(self, document_id: str):
        super().__init__(
            message=f"Document not found: {document_id}",
            code="DOCUMENT_NOT_FOUND",
            status_code=404,
            details={"document_id": document_id}
        )


class ImageNotFoundError(TalentFlowException):
    """Raised when Cloudinary reports an unknown public ID."""

    def __init__(self, public_id: str):
        super().__init__(
            message="Image not found",
            code="IMAGE_NOT_FOUND",
            status_code=404,
            details={"public_id": public_id, "result": "not found"}
        )


# =============================================================================
# Validation Exceptions
# =============================================================================

class AvailabilityDateRequiredError(TalentFlowException):
    """Raised when a professional goes unavailable without a return date."""

    def __init__(self):
        super().__init__(
            message="Please set an available date when marking yourself as unavailable",
            code="AVAILABLE_DATE_REQUIRED",
            status_code=400,
            suggestion="Send available_from together with available=false",
        )


class InvalidFileTypeError(TalentFlowException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, content_type: str, allowed: list[str]):
        super().__init__(
            message="Invalid file type. Only JPEG, PNG, WebP, and GIF are allowed.",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"content_type": content_type, "allowed_types": allowed}
        )


class EmptyFileError(TalentFlowException):
    """Raised when an upload carries no bytes."""

    def __init__(self):
        super().__init__(
            message="No file uploaded",
            code="EMPTY_FILE",
            status_code=400,
            suggestion="Attach a non-empty file in the 'file' form field",
        )


class FileTooLargeError(TalentFlowException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class InvalidPublicIdError(TalentFlowException):
    """Raised when an image public ID is missing or malformed."""

    def __init__(self, reason: str = "Invalid public ID format"):
        super().__init__(
            message=reason,
            code="INVALID_PUBLIC_ID",
            status_code=400,
            suggestion="Send the Cloudinary public_id returned by the upload (1-500 characters)",
        )


class SelfModerationError(TalentFlowException):
    """Raised when an admin tries to reject or ban their own account."""

    def __init__(self, action: str):
        super().__init__(
            message=f"You cannot {action} your own account",
            code="SELF_MODERATION",
            status_code=400,
            details={"action": action}
        )


# =============================================================================
# Access Exceptions
# =============================================================================

class AdminAccessRequiredError(TalentFlowException):
    """Raised when a non-admin calls an admin endpoint."""

    def __init__(self):
        super().__init__(
            message="Admin access required",
            code="ADMIN_REQUIRED",
            status_code=403,
        )


class ForbiddenError(TalentFlowException):
    """Raised when a user acts on a resource that is not theirs."""

    def __init__(self, message: str = "You can only modify your own profile"):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
        )


class ForbiddenOriginError(TalentFlowException):
    """Raised when a browser request comes from an origin outside the allow-list."""

    def __init__(self, origin: str | None):
        super().__init__(
            message="Forbidden: Request from unauthorized origin",
            code="FORBIDDEN_ORIGIN",
            status_code=403,
            details={"origin": origin} if origin else None,
        )


class CronUnauthorizedError(TalentFlowException):
    """Raised when the cron endpoint is called without the cron secret."""

    def __init__(self):
        super().__init__(
            message="Unauthorized",
            code="CRON_UNAUTHORIZED",
            status_code=401,
            suggestion="Send 'Authorization: Bearer <CRON_SECRET>'",
        )


class RateLimitExceededError(TalentFlowException):
    """Raised when a client IP exceeds its sliding-window budget."""

    def __init__(self, limit: int, action: str, window_seconds: int):
        minutes = max(1, window_seconds // 60)
        super().__init__(
            message=f"Rate limit exceeded. Maximum {limit} {action} per {minutes} minutes.",
            code="RATE_LIMIT_EXCEEDED",
            status_code=429,
            details={"limit": limit, "window_seconds": window_seconds}
        )


# =============================================================================
# Vendor Exceptions
# =============================================================================

class ServiceNotConfiguredError(TalentFlowException):
    """Raised when a vendor integration is called without credentials."""

    def __init__(self, service: str, setting: str):
        super().__init__(
            message=f"{service} not configured",
            code="SERVICE_NOT_CONFIGURED",
            status_code=500,
            suggestion=f"Set {setting} in the environment",
            details={"service": service}
        )


class EmailDeliveryError(TalentFlowException):
    """Raised when Resend refuses or fails to send/cancel an email."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to send email: {error}",
            code="EMAIL_DELIVERY_FAILED",
            status_code=502,
            suggestion="Check RESEND_API_KEY and RESEND_FROM_EMAIL, then retry",
            details={"error": error}
        )


class ImageUploadError(TalentFlowException):
    """Raised when Cloudinary rejects an upload."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to upload image",
            code="IMAGE_UPLOAD_FAILED",
            status_code=502,
            details={"error": error}
        )


class ImageDeleteError(TalentFlowException):
    """Raised when Cloudinary answers a delete with anything but ok/not found."""

    def __init__(self, result: str):
        super().__init__(
            message="Failed to delete image",
            code="IMAGE_DELETE_FAILED",
            status_code=400,
            details={"result": result}
        )


class StorageUploadError(TalentFlowException):
    """Raised when file upload to blob storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to upload file",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


class StorageDeleteError(TalentFlowException):
    """Raised when file deletion from blob storage fails."""

    def __init__(self, url: str, error: str):
        super().__init__(
            message="Failed to delete file",
            code="STORAGE_DELETE_ERROR",
            status_code=500,
            details={"url": url, "error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def talentflow_exception_handler(
    request: Request,
    exc: TalentFlowException
) -> JSONResponse:
    """
    Convert TalentFlowException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
