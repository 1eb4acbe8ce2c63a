# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - FakeSupabase: an in-memory stand-in for the supabase-py query builder
# - Resets in-process state (email quota, rate limits, geocoder) per test
# =============================================================================

import os
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock, patch

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault("RESEND_FROM_EMAIL", "TalentFlow <noreply@talentflow.test>")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "test-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "test-cloudinary-key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-cloudinary-secret")
os.environ.setdefault("BLOB_READ_WRITE_TOKEN", "vercel_blob_rw_test")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("SITE_URL", "https://talentflow.test")
os.environ.setdefault("CORS_ORIGINS", "https://talentflow.test,http://localhost:3000")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from lib.supabase_client import NO_ROWS_CODE, SupabaseClient


# =============================================================================
# Fake Supabase Client
# =============================================================================

def _comparable(value: Any) -> Any:
    """Timestamps compare as datetimes, everything else as-is."""
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return value


class FakeResponse:
    def __init__(self, data: Any):
        self.data = data


class FakeQuery:
    """Chainable query over one in-memory table."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload: Any = None
        self.on_conflict: str | None = None
        self.filters: list[tuple[str, str, Any]] = []
        self.order_by: tuple[str, bool] | None = None
        self.max_rows: int | None = None
        self.single_row = False

    # Operations
    def select(self, *columns, **kwargs):
        self.op = "select"
        return self

    def insert(self, data):
        self.op, self.payload = "insert", data
        return self

    def update(self, data):
        self.op, self.payload = "update", data
        return self

    def upsert(self, data, on_conflict: str | None = None, **kwargs):
        self.op, self.payload, self.on_conflict = "upsert", data, on_conflict
        return self

    def delete(self):
        self.op = "delete"
        return self

    # Filters
    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def is_(self, column, value):
        self.filters.append(("is", column, value))
        return self

    def lte(self, column, value):
        self.filters.append(("lte", column, value))
        return self

    def in_(self, column, values):
        self.filters.append(("in", column, list(values)))
        return self

    def order(self, column, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def single(self):
        self.single_row = True
        return self

    def _matches(self, row: dict) -> bool:
        for kind, column, value in self.filters:
            current = row.get(column)
            if kind == "eq" and current != value:
                return False
            if kind == "is" and value == "null" and current is not None:
                return False
            if kind == "lte" and (current is None or _comparable(current) > _comparable(value)):
                return False
            if kind == "in" and current not in value:
                return False
        return True

    def execute(self) -> FakeResponse:
        self.db.queries.append(self)
        if self.table in self.db.failing_tables:
            raise Exception(f"simulated failure on {self.table}")

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in items:
                row = {"id": str(uuid.uuid4()), "created_at": datetime.now().isoformat(), **item}
                rows.append(row)
                created.append(dict(row))
            return FakeResponse(created)

        if self.op == "upsert":
            key = self.on_conflict or next(k for k in ("id", "uid", "user_id") if k in self.payload)
            for row in rows:
                if row.get(key) == self.payload[key]:
                    row.update(self.payload)
                    return FakeResponse([dict(row)])
            row = {"id": str(uuid.uuid4()), **self.payload}
            rows.append(row)
            return FakeResponse([dict(row)])

        matched = [row for row in rows if self._matches(row)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResponse([dict(row) for row in matched])

        if self.op == "delete":
            self.db.tables[self.table] = [row for row in rows if row not in matched]
            return FakeResponse([dict(row) for row in matched])

        result = [dict(row) for row in matched]
        if self.order_by:
            column, desc = self.order_by
            result.sort(key=lambda r: _comparable(r.get(column)) or "", reverse=desc)
        if self.max_rows is not None:
            result = result[: self.max_rows]
        if self.single_row:
            if len(result) != 1:
                raise Exception(f"{{'code': '{NO_ROWS_CODE}', 'message': 'JSON object requested, multiple (or no) rows returned'}}")
            return FakeResponse(result[0])
        return FakeResponse(result)


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db, self.name, self.params = db, name, params

    def execute(self) -> FakeResponse:
        self.db.rpc_calls.append((self.name, self.params))
        handler = self.db.rpc_handlers.get(self.name)
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return FakeResponse(handler(self.params))
        return FakeResponse(handler)


class FakeSupabase:
    """
    In-memory Supabase client.

    Tables are plain lists of dicts; RPCs return whatever is registered
    in rpc_handlers (a value, a callable taking params, or an exception).
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.rpc_handlers: dict[str, Any] = {}
        self.rpc_calls: list[tuple[str, dict]] = []
        self.queries: list[FakeQuery] = []
        self.failing_tables: set[str] = set()
        self.auth = MagicMock()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict | None = None) -> FakeRpc:
        return FakeRpc(self, name, params or {})

    def seed(self, table: str, *rows: dict) -> None:
        self.tables.setdefault(table, []).extend(dict(row) for row in rows)

    def rows(self, table: str) -> list[dict]:
        return self.tables.get(table, [])

    def rpc_names(self) -> list[str]:
        return [name for name, _ in self.rpc_calls]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db():
    """Install a FakeSupabase as the shared client for the test."""
    db = FakeSupabase()
    SupabaseClient._instance = db
    yield db
    SupabaseClient.reset()


@pytest.fixture(autouse=True)
def reset_process_state():
    """Email quota, rate limits and the geocoder are per-process state."""
    from app.dependencies import reset_rate_limits
    from core.services.email_service import EmailService
    from core.services.geo_service import GeoService

    EmailService.reset_usage()
    reset_rate_limits()
    GeoService._geolocator = None
    yield
    EmailService.reset_usage()
    reset_rate_limits()
    GeoService._geolocator = None


@pytest.fixture
def professional_id() -> str:
    return "11111111-1111-1111-1111-111111111111"


@pytest.fixture
def admin_id() -> str:
    return "99999999-9999-9999-9999-999999999999"


@pytest.fixture
def seeded_professional(fake_db, professional_id):
    """A professional with an account profile and a professional profile."""
    fake_db.seed("profiles", {
        "user_id": professional_id,
        "email": "jane@example.com",
        "full_name": "Jane Doe",
        "phone": None,
        "role": "professional",
        "created_at": "2025-01-01T00:00:00+00:00",
    })
    fake_db.seed("professional_profiles", {
        "id": "p-1",
        "user_id": professional_id,
        "available": True,
        "availablefrom": None,
        "profile_status": "pending",
        "is_searchable": True,
        "city": "Szeged",
    })
    fake_db.seed("registration_requests", {
        "id": "r-1",
        "user_id": professional_id,
        "status": "pending",
        "approved_at": None,
        "approved_by": None,
        "created_at": "2025-01-02T00:00:00+00:00",
    })
    return professional_id


@pytest.fixture
def mock_resend():
    """
    Patch the Resend SDK.

    send returns ids re_1, re_2, ... in call order; cancel echoes the id.
    """
    counter = {"n": 0}

    def _send(params):
        counter["n"] += 1
        return {"id": f"re_{counter['n']}"}

    with patch("resend.Emails.send", side_effect=_send) as send, \
            patch("resend.Emails.cancel", side_effect=lambda email_id: {"id": email_id}) as cancel:
        yield SimpleNamespace(send=send, cancel=cancel)
