# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas for data validation
# - services/: Availability, email, moderation, geo and media services
# - templates/email/: Jinja2 email templates (HTML and plain text)
#
# Code in this package should NOT import FastAPI routers or Celery tasks.
# This keeps the logic testable and reusable from the worker.
# =============================================================================
