# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - geo.py: Haversine distance and distance formatting
# - rate_limit.py: Per-IP sliding-window rate limiter
# - text_fields.py: Separator-joined multi-section text columns
# - utils.py: Shared utilities (error base class, UUID/time helpers)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.geo import format_distance, haversine_distance
from lib.rate_limit import SlidingWindowRateLimiter
from lib.text_fields import (
    WorkExperience,
    parse_education,
    parse_work_experience,
)
from lib.utils import ApplicationError, normalize_uuid, parse_timestamp, utc_now

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Geo
    "format_distance",
    "haversine_distance",
    # Rate limiting
    "SlidingWindowRateLimiter",
    # Text fields
    "WorkExperience",
    "parse_education",
    "parse_work_experience",
    # Utils
    "ApplicationError",
    "normalize_uuid",
    "parse_timestamp",
    "utc_now",
]
