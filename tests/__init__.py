# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the TalentFlow API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_*_service.py: Service tests against the in-memory FakeSupabase
# - test_geo.py, test_rate_limit.py, test_text_fields.py: lib helpers
# - test_api.py: Integration tests for API endpoints
#
# Run tests with: pytest
# =============================================================================
