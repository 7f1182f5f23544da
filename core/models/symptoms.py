# =============================================================================
# core/models/symptoms.py - Symptom Record Schemas
# =============================================================================
# These models define the stored shape of per-ZIP symptom counters:
# - Symptom: The fixed set of reportable symptoms
# - DayEntry: One day's worth of symptom counts for a ZIP
# - ZipRecord: One document per ZIP code (entries + population)
# - SymptomReport: Incoming POST /postSymptoms body
#
# Every DayEntry carries every Symptom key, so summation never needs
# null checks.
# =============================================================================

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

# Current stored document layout (entries array of day buckets)
SCHEMA_VERSION = 2


class Symptom(str, Enum):
    """Reportable symptoms. Values are the wire/storage keys."""
    FEVER = "fever"
    FATIGUE = "fatigue"
    COUGH = "cough"
    SHORTNESS_OF_BREATH = "shortnessOfBreath"
    SORE_THROAT = "soreThroat"
    RUNNY_NOSE = "runnyNose"
    BODY_ACHES = "bodyAches"
    HEADACHE = "headache"
    CHILLS = "chills"
    NAUSEA = "nausea"
    DIARRHEA = "diarrhea"
    LOSS_OF_APPETITE = "lossOfAppetite"
    SWEATING = "sweating"
    JOINT_PAIN = "jointPain"
    SWOLLEN_LYMPH_NODES = "swollenLymphNodes"
    RASH = "rash"
    ABDOMINAL_PAIN = "abdominalPain"
    DIZZINESS = "dizziness"
    LOSS_OF_TASTE_OR_SMELL = "lossOfTasteOrSmell"
    CHEST_PAIN = "chestPain"


SYMPTOM_KEYS: tuple[str, ...] = tuple(symptom.value for symptom in Symptom)


def empty_counts() -> dict[str, int]:
    """All-zero counts for every symptom, in enumeration order."""
    return {key: 0 for key in SYMPTOM_KEYS}


def normalize_counts(incoming: Mapping[str, Any]) -> tuple[dict[str, int], list[str]]:
    """
    Project an arbitrary mapping onto the full symptom key set.

    Missing (or null) symptoms default to 0. Keys outside the symptom set
    are dropped and returned separately so callers can report them.

    Args:
        incoming: Mapping of symptom name -> count

    Returns:
        Tuple of (full counts dict, sorted list of ignored keys)

    Raises:
        ValueError: If a recognized symptom has a negative or non-integer count
    """
    counts = empty_counts()
    ignored = []

    for key, value in incoming.items():
        if key not in counts:
            ignored.append(key)
            continue
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Count for '{key}' must be an integer, got {value!r}")
        if value < 0:
            raise ValueError(f"Count for '{key}' must be non-negative, got {value}")
        counts[key] = value

    return counts, sorted(ignored)


# =============================================================================
# Stored Records
# =============================================================================

class DayEntry(BaseModel):
    """
    One day's symptom counts for a ZIP.

    Example:
        {"day": 19650, "symptoms": {"fever": 3, "fatigue": 0, ...}}
    """

    day: int = Field(..., description="Days since Unix epoch (UTC)")
    symptoms: dict[str, int] = Field(default_factory=empty_counts)

    @field_validator("symptoms", mode="before")
    @classmethod
    def fill_symptom_keys(cls, value: Any) -> dict[str, int]:
        """Stored entries are read back with the full key set."""
        if value is None:
            return empty_counts()
        counts, ignored = normalize_counts(value)
        if ignored:
            logger.warning(f"Dropping unknown symptom keys from stored entry: {ignored}")
        return counts


class ZipRecord(BaseModel):
    """
    Symptom document for one ZIP code.

    Entries are ordered by day (non-decreasing, one per day).
    """

    zip: str = Field(..., min_length=1)
    entries: list[DayEntry] = Field(default_factory=list)
    population: int | None = Field(default=None, ge=0)
    schema_version: int = Field(default=SCHEMA_VERSION)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> ZipRecord:
        """
        Build a ZipRecord from a stored document, upgrading old layouts.

        Version 1 documents carry a bare `symptoms` map (the legacy
        `symptoms` column) and a null `entries`. They become a single entry
        at day 0 so the counts are preserved.
        """
        doc = dict(document)
        if "entries" not in doc or doc.get("entries") is None:
            legacy = doc.pop("symptoms", None)
            doc["entries"] = [{"day": 0, "symptoms": legacy}] if legacy else []
            logger.info(f"Upgraded v1 document for ZIP {doc.get('zip')} to v{SCHEMA_VERSION}")
        doc["schema_version"] = SCHEMA_VERSION
        return cls.model_validate(doc)

    def entries_document(self) -> list[dict[str, Any]]:
        """Entries in their stored JSON shape."""
        return [entry.model_dump() for entry in self.entries]


# =============================================================================
# Request / Response Models
# =============================================================================

class SymptomReport(BaseModel):
    """
    Incoming daily report for a ZIP.

    The body is flat: the ZIP under `zipCode` and one key per symptom.

    Example:
        {"zipCode": "91344", "fever": 2, "cough": 1}
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    zip_code: str = Field(..., alias="zipCode", min_length=1)

    @field_validator("zip_code", mode="before")
    @classmethod
    def zip_code_as_text(cls, value: Any) -> Any:
        """Clients may send the ZIP as a JSON number."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def check_counts(self) -> SymptomReport:
        # Raises ValueError on bad counts so the request is rejected with 422
        normalize_counts(self.model_extra or {})
        return self

    def counts(self) -> tuple[dict[str, int], list[str]]:
        """Full symptom counts and the list of ignored keys."""
        return normalize_counts(self.model_extra or {})


class SymptomReportResponse(BaseModel):
    """Response for POST /postSymptoms."""
    message: str = "success"
    ignored: list[str] = Field(default_factory=list)
