# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# Registration and login payloads plus the stored user record.
# Passwords are only ever stored as bcrypt hashes.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field


class UserRecord(BaseModel):
    """
    Stored user row.

    `password` holds the bcrypt hash, never the plain password.
    """
    email: str
    username: str | None = None
    password: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "UserRecord":
        return cls(
            email=row["email"],
            username=row.get("username"),
            password=row["password"],
        )


class RegisterRequest(BaseModel):
    """Body of POST /register."""
    username: str | None = Field(default=None, examples=["jdoe"])
    email: str = Field(..., min_length=1, examples=["jdoe@example.com"])
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Body of POST /login."""
    email: str = Field(..., min_length=1, examples=["jdoe@example.com"])
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str
