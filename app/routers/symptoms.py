# =============================================================================
# app/routers/symptoms.py - Symptom Record Endpoints
# =============================================================================
# Read a ZIP's day buckets and post daily symptom reports.
#
# Handlers are plain `def` so FastAPI runs them in its threadpool; the
# per-ZIP lock in SymptomService serializes concurrent reports for one ZIP.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import SymptomServiceDep
from core.models.symptoms import SymptomReport, SymptomReportResponse, ZipRecord

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/symptoms/{zip_code}", response_model=ZipRecord)
def get_symptoms(
    zip_code: Annotated[str, Path(description="ZIP code")],
    service: SymptomServiceDep,
):
    """
    Get the symptom record for a ZIP.

    Returns every day entry with the full symptom key set. 404 if the ZIP
    has no record.
    """
    return service.get_zip_record(zip_code)


@router.post("/postSymptoms", response_model=SymptomReportResponse)
def post_symptoms(report: SymptomReport, service: SymptomServiceDep):
    """
    Add a daily symptom report to a ZIP.

    Counts are added to today's entry, or a new entry is started if today
    has none yet. Unknown symptom keys are ignored and listed in `ignored`.
    404 if the ZIP has no record; records are never created here.
    """
    counts, ignored = report.counts()
    if ignored:
        logger.warning(f"Ignoring unknown symptom keys for ZIP {report.zip_code}: {ignored}")

    service.record_report(report.zip_code, counts)
    return SymptomReportResponse(message="success", ignored=ignored)
