# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - symptoms.py: Symptom set, DayEntry, ZipRecord, incoming reports
# - user.py: User record and registration/login payloads
# - analysis.py: Outbreak analysis payloads
#
# These models define the "contract" between API and clients.
# =============================================================================

from .symptoms import (
    SCHEMA_VERSION,
    SYMPTOM_KEYS,
    DayEntry,
    Symptom,
    SymptomReport,
    SymptomReportResponse,
    ZipRecord,
    empty_counts,
    normalize_counts,
)
from .user import LoginRequest, MessageResponse, RegisterRequest, UserRecord
from .analysis import AnalyzeRequest, InsightResponse, ZipAnalysisResponse

__all__ = [
    "SCHEMA_VERSION",
    "SYMPTOM_KEYS",
    "DayEntry",
    "Symptom",
    "SymptomReport",
    "SymptomReportResponse",
    "ZipRecord",
    "empty_counts",
    "normalize_counts",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "UserRecord",
    "AnalyzeRequest",
    "InsightResponse",
    "ZipAnalysisResponse",
]
