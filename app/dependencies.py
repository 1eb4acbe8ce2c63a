# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources and request guards:
# - SupabaseDep: the Supabase client wrapper
# - get_client_ip: caller IP behind proxies
# - rate_limited(policy): per-IP sliding-window limits
# - require_allowed_origin: Origin/Referer allow-list for browser calls
# - verify_cron_secret: bearer secret for the scheduler endpoint
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Annotated, Callable

from fastapi import Depends, Request

from app.config import settings
from app.exceptions import (
    CronUnauthorizedError,
    ForbiddenOriginError,
    RateLimitExceededError,
)
from lib.rate_limit import SlidingWindowRateLimiter
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client instance.

    Returns the singleton client wrapper.
    """
    return SupabaseClient


# Type alias for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]


# =============================================================================
# Client IP
# =============================================================================

def get_client_ip(request: Request) -> str:
    """
    Best guess at the caller's IP.

    First X-Forwarded-For entry, then X-Real-IP, then the socket peer.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


ClientIP = Annotated[str, Depends(get_client_ip)]


# =============================================================================
# Rate Limiting
# =============================================================================

@dataclass
class RateLimitPolicy:
    """One named limit: the limiter plus the noun used in the error message."""
    limiter: SlidingWindowRateLimiter
    action: str


def _build_policies() -> dict[str, RateLimitPolicy]:
    window = settings.RATE_LIMIT_WINDOW_SECONDS
    return {
        "email": RateLimitPolicy(SlidingWindowRateLimiter(settings.RATE_LIMIT_EMAIL, window), "emails"),
        "image_upload": RateLimitPolicy(SlidingWindowRateLimiter(settings.RATE_LIMIT_IMAGE_UPLOAD, window), "uploads"),
        "image_delete": RateLimitPolicy(SlidingWindowRateLimiter(settings.RATE_LIMIT_IMAGE_DELETE, window), "deletions"),
        "contact": RateLimitPolicy(SlidingWindowRateLimiter(settings.RATE_LIMIT_CONTACT, window), "contact requests"),
    }


RATE_LIMIT_POLICIES: dict[str, RateLimitPolicy] = _build_policies()


def reset_rate_limits() -> None:
    """Forget every recorded hit (tests, admin maintenance)."""
    for policy in RATE_LIMIT_POLICIES.values():
        policy.limiter.reset()


def rate_limited(policy_name: str) -> Callable[[Request], None]:
    """
    Build a dependency that charges one request to the caller's IP.

    Usage:
        @router.post("/cancel", dependencies=[Depends(rate_limited("email"))])

    Raises:
        RateLimitExceededError: 429 once the IP is over budget
    """
    if policy_name not in RATE_LIMIT_POLICIES:
        raise KeyError(f"Unknown rate limit policy: {policy_name}")

    def dependency(request: Request) -> None:
        policy = RATE_LIMIT_POLICIES[policy_name]
        ip = get_client_ip(request)
        if not policy.limiter.hit(ip):
            logger.warning(f"Rate limit '{policy_name}' exceeded for {ip}")
            raise RateLimitExceededError(
                limit=policy.limiter.max_requests,
                action=policy.action,
                window_seconds=int(policy.limiter.window_seconds),
            )

    return dependency


# =============================================================================
# Origin & Cron Guards
# =============================================================================

def is_allowed_origin(origin: str | None) -> bool:
    """True when origin starts with one of the configured CORS origins."""
    if not origin:
        return False
    return any(origin.startswith(allowed) for allowed in settings.cors_origins_list)


def require_allowed_origin(request: Request) -> None:
    """
    Reject browser calls from origins outside the allow-list.

    The Origin header is used, falling back to Referer.

    Raises:
        ForbiddenOriginError: 403 when missing or not allowed
    """
    origin = request.headers.get("origin") or request.headers.get("referer")
    if not is_allowed_origin(origin):
        logger.warning(f"Rejected request from origin {origin!r}")
        raise ForbiddenOriginError(origin)


def verify_cron_secret(request: Request) -> None:
    """
    Require 'Authorization: Bearer <CRON_SECRET>' when a secret is set.

    Raises:
        CronUnauthorizedError: 401 on a missing or wrong secret
    """
    secret = settings.CRON_SECRET
    if not secret:
        return
    if request.headers.get("authorization") != f"Bearer {secret}":
        raise CronUnauthorizedError()
