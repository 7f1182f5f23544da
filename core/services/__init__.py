# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .aggregator import WindowSummary, day_index, merge_daily_report, summarize_window
from .prompt_builder import build_outbreak_prompt
from .symptom_service import SymptomService
from .analysis_service import OutbreakAnalyst
from .user_service import UserService, build_password_context

__all__ = [
    "WindowSummary",
    "day_index",
    "merge_daily_report",
    "summarize_window",
    "build_outbreak_prompt",
    "SymptomService",
    "OutbreakAnalyst",
    "UserService",
    "build_password_context",
]
