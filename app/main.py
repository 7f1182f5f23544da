# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the SymptomWatch API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    SymptomWatchException,
    symptomwatch_exception_handler,
    validation_exception_handler,
)
from app.routers import health, symptoms, analysis
from app.auth import routes as auth_routes
from core.services.analysis_service import OutbreakAnalyst
from core.services.user_service import build_password_context
from lib.locks import ZipLockRegistry
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.zip_metadata import ZipMetadataSource

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: Build the store, analyst, metadata source and lock registry
    - Shutdown: Release the store and the OpenAI client
    """
    logger.info(f"Starting SymptomWatch API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    app.state.store = SupabaseClient.from_settings(settings)
    app.state.analyst = OutbreakAnalyst.from_settings(settings)
    app.state.zip_metadata = ZipMetadataSource(
        settings.ZIP_METADATA_CSV,
        zip_column=settings.ZIP_METADATA_ZIP_COLUMN,
    )
    app.state.zip_locks = ZipLockRegistry()
    app.state.passwords = build_password_context(settings.BCRYPT_ROUNDS)

    yield

    logger.info("Shutting down SymptomWatch API")
    app.state.analyst.close()
    app.state.store.close()


# Create FastAPI application
app = FastAPI(
    title="SymptomWatch API",
    description="""
## Community Symptom Reporting API

Collects daily symptom counts per ZIP code and asks a language model for an
outbreak assessment of the last two weeks.

### Quick Start

```bash
# 1. Report symptoms for a seeded ZIP
curl -X POST http://localhost:5000/postSymptoms \\
  -H "Content-Type: application/json" \\
  -d '{"zipCode": "91344", "fever": 1, "cough": 1}'

# 2. Read the ZIP's day buckets
curl http://localhost:5000/symptoms/91344

# 3. Ask for an outbreak analysis
curl http://localhost:5000/analyze/91344
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Symptoms",
            "description": "ZIP symptom records and daily reports",
        },
        {
            "name": "Analysis",
            "description": "Language-model outbreak analysis",
        },
        {
            "name": "Auth",
            "description": "User registration and login",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(SymptomWatchException)
async def handle_symptomwatch_exception(request: Request, exc: SymptomWatchException):
    """Handle custom SymptomWatch exceptions."""
    return await symptomwatch_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request body/path validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_store_exception(request: Request, exc: SupabaseClientError):
    """Handle database failures without leaking driver messages."""
    logger.error(f"Store error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Database operation failed",
            "code": exc.code,
        }
    )


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(symptoms.router, tags=["Symptoms"])
app.include_router(analysis.router, tags=["Analysis"])
app.include_router(auth_routes.router, tags=["Auth"])
app.include_router(health.router, tags=["Health"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "SymptomWatch API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }
