# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .availability_service import AvailabilityService
from .blob_service import BlobService, BlobStorageError
from .contact_service import ContactService
from .document_service import DocumentService
from .email_service import EmailService
from .email_templates import EmailTemplates
from .geo_service import GeoService
from .image_service import ImageService
from .professional_service import ProfessionalService
from .registration_service import RegistrationService
from .user_service import UserService

__all__ = [
    "AvailabilityService",
    "BlobService",
    "BlobStorageError",
    "ContactService",
    "DocumentService",
    "EmailService",
    "EmailTemplates",
    "GeoService",
    "ImageService",
    "ProfessionalService",
    "RegistrationService",
    "UserService",
]
