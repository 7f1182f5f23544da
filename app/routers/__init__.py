# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - symptoms.py: ZIP symptom records and daily reports
# - analysis.py: Language-model outbreak analysis
#
# Each router is mounted in main.py.
# =============================================================================

from . import health
from . import symptoms
from . import analysis

__all__ = [
    "health",
    "symptoms",
    "analysis",
]
