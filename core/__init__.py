# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the symptom-tracking logic:
# - models/: Pydantic schemas for stored records and API payloads
# - services/: Aggregation, prompt building, and the service layer
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================
