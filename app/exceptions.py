# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error tells HOW to fix it, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class SymptomWatchException(Exception):
    """
    Base exception for the SymptomWatch API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SYMPTOMWATCH_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# ZIP Exceptions
# =============================================================================

class ZipNotFoundError(SymptomWatchException):
    """Raised when a ZIP code has no record in the store."""

    def __init__(self, zip_code: str):
        super().__init__(
            message=f"ZIP not found: {zip_code}",
            code="ZIP_NOT_FOUND",
            status_code=404,
            suggestion="Check the ZIP code, or seed it with scripts/seed_zips.py",
            details={"zip": zip_code}
        )


class PopulationMissingError(SymptomWatchException):
    """Raised when analysis is requested for a ZIP without population data."""

    def __init__(self, zip_code: str):
        super().__init__(
            message="Population data missing for this ZIP",
            code="POPULATION_MISSING",
            status_code=400,
            suggestion="Set a positive population on the ZIP record before requesting analysis",
            details={"zip": zip_code}
        )


class ZipMetadataNotFoundError(SymptomWatchException):
    """Raised when the ZIP metadata CSV has no row for a ZIP."""

    def __init__(self, zip_code: str):
        super().__init__(
            message=f"No data found for ZIP code '{zip_code}'",
            code="ZIP_METADATA_NOT_FOUND",
            status_code=404,
            suggestion="Add the ZIP code to the metadata CSV configured by ZIP_METADATA_CSV",
            details={"zip": zip_code}
        )


class ZipMetadataUnavailableError(SymptomWatchException):
    """Raised when the ZIP metadata CSV cannot be read."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Failed to read ZIP metadata: {error}",
            code="ZIP_METADATA_UNAVAILABLE",
            status_code=500,
            suggestion="Check that ZIP_METADATA_CSV points to a readable CSV file",
            details={"path": path}
        )


# =============================================================================
# User Exceptions
# =============================================================================

class EmailAlreadyRegisteredError(SymptomWatchException):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            message="User with this email already exists!",
            code="EMAIL_ALREADY_REGISTERED",
            status_code=400,
            suggestion="Log in with this email or register with a different one",
            details={"email": email}
        )


class UserNotFoundError(SymptomWatchException):
    """Raised when logging in with an unknown email."""

    def __init__(self, email: str):
        super().__init__(
            message="User not found!",
            code="USER_NOT_FOUND",
            status_code=400,
            suggestion="Register first using POST /register",
            details={"email": email}
        )


class InvalidPasswordError(SymptomWatchException):
    """Raised when the password does not match the stored hash."""

    def __init__(self):
        super().__init__(
            message="Invalid password!",
            code="INVALID_PASSWORD",
            status_code=401,
        )


# =============================================================================
# Upstream Exceptions
# =============================================================================

class UpstreamServiceError(SymptomWatchException):
    """Raised when the text-generation service call fails."""

    def __init__(self, service: str):
        super().__init__(
            message=f"Upstream service failed: {service}",
            code="UPSTREAM_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"service": service}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def symptomwatch_exception_handler(
    request: Request,
    exc: SymptomWatchException
) -> JSONResponse:
    """
    Convert SymptomWatchException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle request validation errors.

    Converts validation errors to user-friendly messages.
    """
    errors = exc.errors() if hasattr(exc, "errors") else str(exc)
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": jsonable_errors(errors),
        }
    )


def jsonable_errors(errors: Any) -> Any:
    """Strip non-serializable context (e.g. exception objects) from pydantic errors."""
    if not isinstance(errors, list):
        return errors
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in errors
    ]
