# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the TalentFlow API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import TalentFlowException, talentflow_exception_handler
from app.routers import (
    contacts,
    cron,
    distances,
    documents,
    email,
    health,
    images,
    professionals,
    registrations,
    users,
)
from app.auth import routes as auth_routes
from lib.utils import ApplicationError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs configuration on startup so a misconfigured vendor shows up
    in the first lines of the log rather than on the first request.
    """
    logger.info(f"Starting TalentFlow API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.resend_configured:
        logger.warning("RESEND_API_KEY not set; email features are disabled")
    if not settings.cloudinary_configured:
        logger.warning("Cloudinary credentials not set; image uploads are disabled")
    if not settings.blob_configured:
        logger.warning("BLOB_READ_WRITE_TOKEN not set; document uploads are disabled")

    yield

    logger.info("Shutting down TalentFlow API")


# Create FastAPI application
app = FastAPI(
    title="TalentFlow API",
    description="""
## Talent Marketplace Backend

TalentFlow connects companies with freelance professionals.

### Key Features

- **Directory**: Public professional profiles ranked by distance from a city
- **Availability**: Professionals go unavailable until a date and get a reminder email when it arrives
- **Registration Review**: Admins approve, reject, reset or ban profiles, with notification emails
- **Contact Requests**: Companies reach professionals; admins manage the inbox
- **Media**: Cloudinary images and Vercel Blob documents
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Verify Supabase tokens and read the current user"},
        {"name": "Professionals", "description": "Public directory, availability and contact"},
        {"name": "Registrations", "description": "Registration submission and moderation"},
        {"name": "Contacts", "description": "Contact request inbox (admin)"},
        {"name": "Users", "description": "Account management"},
        {"name": "Email", "description": "Transactional email"},
        {"name": "Cron", "description": "Scheduled jobs"},
        {"name": "Distances", "description": "City distance lookups"},
        {"name": "Images", "description": "Image uploads and profile pictures"},
        {"name": "Documents", "description": "Terms & Conditions and document library"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(TalentFlowException)
async def handle_talentflow_exception(request: Request, exc: TalentFlowException):
    """Handle custom TalentFlow exceptions."""
    return await talentflow_exception_handler(request, exc)


@app.exception_handler(ApplicationError)
async def handle_application_error(request: Request, exc: ApplicationError):
    """Database and storage client errors surface as 500 with their code."""
    logger.error(f"{exc.code}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content={"detail": exc.message, "code": exc.code},
    )


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, prefix=API_PREFIX)
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(professionals.router, prefix=f"{API_PREFIX}/professionals", tags=["Professionals"])
app.include_router(registrations.router, prefix=f"{API_PREFIX}/registrations", tags=["Registrations"])
app.include_router(contacts.router, prefix=f"{API_PREFIX}/contacts", tags=["Contacts"])
app.include_router(users.router, prefix=f"{API_PREFIX}/users", tags=["Users"])
app.include_router(email.router, prefix=f"{API_PREFIX}/email", tags=["Email"])
app.include_router(cron.router, prefix=f"{API_PREFIX}/cron", tags=["Cron"])
app.include_router(distances.router, prefix=f"{API_PREFIX}/distances", tags=["Distances"])
app.include_router(images.router, prefix=API_PREFIX, tags=["Images"])
app.include_router(documents.router, prefix=API_PREFIX, tags=["Documents"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "TalentFlow API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
