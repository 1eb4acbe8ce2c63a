# =============================================================================
# tests/test_contact_service.py - Contact Request Tests
# =============================================================================
# Run with: pytest tests/test_contact_service.py -v
# =============================================================================

import pytest

from app.exceptions import ContactRequestNotFoundError, ProfileNotFoundError
from core.models.contact import ContactRequestCreate, ContactStatus
from core.services.contact_service import ContactService

TABLE = "contact_requests"


def _payload(**overrides) -> ContactRequestCreate:
    data = {
        "company_name": "Acme Kft.",
        "contact_person": "John Smith",
        "email": "john@acme.example",
        "message": "We have a three month project starting in May.",
    }
    data.update(overrides)
    return ContactRequestCreate(**data)


class TestCreate:
    """Tests for ContactService.create."""

    def test_stores_request_as_new(self, seeded_professional):
        # Act
        contact = ContactService.create(seeded_professional, _payload(phone="+36 30 123 4567"))

        # Assert
        assert contact["status"] == "new"
        assert contact["professional_id"] == seeded_professional
        assert contact["phone"] == "+36 30 123 4567"
        assert contact["id"]

    def test_unknown_professional(self, fake_db):
        with pytest.raises(ProfileNotFoundError):
            ContactService.create("00000000-0000-0000-0000-000000000000", _payload())

        assert fake_db.rows(TABLE) == []

    def test_insert_failure_propagates(self, seeded_professional, fake_db):
        fake_db.failing_tables.add(TABLE)

        with pytest.raises(Exception, match="simulated failure"):
            ContactService.create(seeded_professional, _payload())


class TestList:
    """Tests for ContactService.list."""

    @pytest.fixture
    def inbox(self, seeded_professional, fake_db):
        fake_db.seed(
            TABLE,
            {"id": "c-1", "professional_id": seeded_professional, "company_name": "Acme Kft.",
             "contact_person": "John Smith", "email": "john@acme.example", "status": "new",
             "created_at": "2025-03-01T10:00:00+00:00"},
            {"id": "c-2", "professional_id": "ghost", "company_name": "Globex",
             "contact_person": "Hank Scorpio", "email": "hank@globex.example", "status": "contacted",
             "created_at": "2025-03-02T10:00:00+00:00"},
            {"id": "c-3", "professional_id": None, "company_name": "Initech",
             "contact_person": "Bill Lumbergh", "email": "bill@initech.example", "status": "closed",
             "created_at": "2025-03-03T10:00:00+00:00"},
        )
        return fake_db

    def test_newest_first(self, inbox):
        rows = ContactService.list()

        assert [row["id"] for row in rows] == ["c-3", "c-2", "c-1"]

    def test_attaches_professional_names(self, inbox, seeded_professional):
        rows = {row["id"]: row for row in ContactService.list()}

        assert rows["c-1"]["professional"] == {"user_id": seeded_professional, "full_name": "Jane Doe"}
        assert rows["c-2"]["professional"] == {"user_id": "ghost", "full_name": "Unknown Professional"}
        assert rows["c-3"]["professional"] is None

    def test_status_filter(self, inbox):
        rows = ContactService.list(status=ContactStatus.CONTACTED)

        assert [row["id"] for row in rows] == ["c-2"]

    @pytest.mark.parametrize("search,expected", [
        ("acme", ["c-1"]),
        ("SCORPIO", ["c-2"]),
        ("initech.example", ["c-3"]),
        ("  globex ", ["c-2"]),
        ("nobody", []),
    ])
    def test_search(self, inbox, search, expected):
        rows = ContactService.list(search=search)

        assert [row["id"] for row in rows] == expected


class TestUpdateStatus:
    """Tests for ContactService.update_status."""

    def test_moves_status(self, fake_db):
        fake_db.seed(TABLE, {"id": "c-1", "status": "new"})

        updated = ContactService.update_status("c-1", ContactStatus.CLOSED)

        assert updated["status"] == "closed"
        assert updated["updated_at"]
        assert fake_db.rows(TABLE)[0]["status"] == "closed"

    def test_missing_request(self, fake_db):
        with pytest.raises(ContactRequestNotFoundError):
            ContactService.update_status("c-404", ContactStatus.CONTACTED)


class TestDelete:
    """Tests for ContactService.delete."""

    def test_deletes_row(self, fake_db):
        fake_db.seed(TABLE, {"id": "c-1"}, {"id": "c-2"})

        ContactService.delete("c-1")

        assert [row["id"] for row in fake_db.rows(TABLE)] == ["c-2"]

    def test_missing_request(self, fake_db):
        with pytest.raises(ContactRequestNotFoundError):
            ContactService.delete("c-404")
