# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the SymptomWatch API:
# - test_aggregator.py: Daily merge and window summaries
# - test_models.py: Record and payload model validation
# - test_prompt_builder.py: Outbreak prompt construction
# - test_services.py: Service layer with an in-memory store
# - test_supabase_client.py: Supabase wrapper with a mocked client
# - test_zip_metadata.py: ZIP metadata CSV lookups
# - test_api.py: HTTP endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
