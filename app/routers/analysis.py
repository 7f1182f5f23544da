# =============================================================================
# app/routers/analysis.py - Outbreak Analysis Endpoints
# =============================================================================
# POST /analyze passes a free-form summary straight to the language model.
# GET /analyze/{zip} summarizes the ZIP's trailing window and asks the model
# for an outbreak assessment. Both return the model's text verbatim.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import AnalystDep, SymptomServiceDep, WindowDaysDep, ZipMetadataDep
from app.exceptions import PopulationMissingError
from core.models.analysis import AnalyzeRequest, InsightResponse, ZipAnalysisResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=InsightResponse)
def analyze_summary(request: AnalyzeRequest, analyst: AnalystDep):
    """
    Send a summary to the language model and return its answer.
    """
    insight = analyst.complete(request.summary)
    return InsightResponse(insight=insight)


@router.get("/analyze/{zip_code}", response_model=ZipAnalysisResponse)
def analyze_zip(
    zip_code: Annotated[str, Path(description="ZIP code")],
    service: SymptomServiceDep,
    analyst: AnalystDep,
    zip_metadata: ZipMetadataDep,
    window_days: WindowDaysDep,
):
    """
    Outbreak analysis for a ZIP.

    Uses the trailing window of day entries (ANALYSIS_WINDOW_DAYS) plus the
    ZIP's row of the metadata CSV.

    - 404 if the ZIP has no record, or is missing from the metadata CSV
    - 400 if the ZIP has no population
    """
    record = service.get_zip_record(zip_code)
    if not record.population:
        raise PopulationMissingError(zip_code)

    metadata_text = zip_metadata.describe(zip_code)
    analysis = analyst.analyze_zip(record, metadata_text, window_days)

    logger.info(f"Generated analysis for ZIP {zip_code}")
    return ZipAnalysisResponse(analysis=analysis)
