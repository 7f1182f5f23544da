# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# The handles are built once in the application lifespan (app/main.py),
# stored on app.state, and injected into route handlers using Depends().
# Tests replace them through app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request
from passlib.context import CryptContext

from app.config import settings
from core.services.analysis_service import OutbreakAnalyst
from core.services.symptom_service import SymptomService
from core.services.user_service import UserService
from lib.locks import ZipLockRegistry
from lib.supabase_client import SupabaseClient
from lib.zip_metadata import ZipMetadataSource


def get_store(request: Request) -> SupabaseClient:
    """Supabase store created at startup."""
    return request.app.state.store


def get_analyst(request: Request) -> OutbreakAnalyst:
    """OpenAI-backed analyst created at startup."""
    return request.app.state.analyst


def get_zip_metadata(request: Request) -> ZipMetadataSource:
    """ZIP metadata CSV source created at startup."""
    return request.app.state.zip_metadata


def get_zip_locks(request: Request) -> ZipLockRegistry:
    """Per-ZIP lock registry shared by all requests."""
    return request.app.state.zip_locks


def get_password_context(request: Request) -> CryptContext:
    """bcrypt context created at startup."""
    return request.app.state.passwords


def get_window_days() -> int:
    """Trailing window for ZIP analyses."""
    return settings.ANALYSIS_WINDOW_DAYS


# Type aliases for dependency injection
StoreDep = Annotated[SupabaseClient, Depends(get_store)]
AnalystDep = Annotated[OutbreakAnalyst, Depends(get_analyst)]
ZipMetadataDep = Annotated[ZipMetadataSource, Depends(get_zip_metadata)]
ZipLocksDep = Annotated[ZipLockRegistry, Depends(get_zip_locks)]
PasswordsDep = Annotated[CryptContext, Depends(get_password_context)]
WindowDaysDep = Annotated[int, Depends(get_window_days)]


def get_symptom_service(store: StoreDep, locks: ZipLocksDep) -> SymptomService:
    return SymptomService(store, locks)


def get_user_service(store: StoreDep, passwords: PasswordsDep) -> UserService:
    return UserService(store, passwords)


SymptomServiceDep = Annotated[SymptomService, Depends(get_symptom_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
