# =============================================================================
# core/models/analysis.py - Outbreak Analysis Schemas
# =============================================================================
# Request/response bodies for the analysis endpoints.
# The model's answer is opaque text; nothing here parses it.
# =============================================================================

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    """Body of POST /analyze (free-form passthrough)."""
    summary: str = Field(..., min_length=1, description="Prompt sent as-is to the language model")


class InsightResponse(BaseModel):
    """Response of POST /analyze."""
    insight: str


class ZipAnalysisResponse(BaseModel):
    """Response of GET /analyze/{zip}."""
    analysis: str
