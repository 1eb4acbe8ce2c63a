# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - professionals.py: Public directory, availability, contact requests
# - registrations.py: Registration submission and admin moderation
# - contacts.py: Admin inbox for contact requests
# - users.py: Account deletion, password resets, company status
# - email.py: Transactional email sending and status
# - cron.py: Scheduled availability reminder job
# - distances.py: City distance lookups
# - images.py: Cloudinary uploads and profile pictures
# - documents.py: Terms & Conditions and the document library
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import professionals
from . import registrations
from . import contacts
from . import users
from . import email
from . import cron
from . import distances
from . import images
from . import documents

__all__ = [
    "health",
    "professionals",
    "registrations",
    "contacts",
    "users",
    "email",
    "cron",
    "distances",
    "images",
    "documents",
]
