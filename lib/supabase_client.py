# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# The store holds two kinds of documents:
# - ZIP documents: {zip, entries (jsonb), population, schema_version}
# - User rows: {email (unique), username, password (bcrypt hash)}
#
# One SupabaseClient is created at application startup and handed to request
# handlers through FastAPI dependencies (see app/dependencies.py).
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   store = SupabaseClient.from_settings(settings)
#   doc = store.fetch_zip("91344")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST: no rows for .single()
NO_ROWS_CODE = "PGRST116"
# Postgres: unique_violation
UNIQUE_VIOLATION_CODE = "23505"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: errors tell HOW to fix,
    not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class DuplicateKeyError(SupabaseClientError):
    """Insert rejected by a unique constraint."""

    def __init__(self, table: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=f"Duplicate key in table '{table}'",
            code="DUPLICATE_KEY",
            details=details,
        )


def _error_code(error: Exception) -> str | None:
    """PostgREST/Postgres error code carried by a client exception, if any."""
    code = getattr(error, "code", None)
    if code:
        return str(code)
    text = str(error)
    for known in (NO_ROWS_CODE, UNIQUE_VIOLATION_CODE):
        if known in text:
            return known
    return None


class SupabaseClient:
    """
    Typed wrapper for Supabase table operations.

    Example:
        store = SupabaseClient.from_settings(settings)

        doc = store.fetch_zip("91344")
        store.update_zip_entries("91344", entries=[...], schema_version=2)

        store.insert_user({"email": "a@b.com", "username": "a", "password": hashed})
    """

    def __init__(
        self,
        client: Client,
        zips_table: str = "zips",
        users_table: str = "users",
    ):
        self.client = client
        self.zips_table = zips_table
        self.users_table = users_table

    @classmethod
    def from_settings(cls, settings: Any) -> SupabaseClient:
        """
        Create a store from application settings.

        Uses the service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        try:
            client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
            ) from e

        logger.info("Supabase client initialized successfully")
        return cls(client, zips_table=settings.ZIPS_TABLE, users_table=settings.USERS_TABLE)

    def close(self) -> None:
        """
        Drop the reference to the underlying client.

        The sync supabase Client has no close(); its HTTP sessions are freed
        with the object. Any call after close() raises SupabaseClientError.
        """
        logger.info("Supabase client released")
        self.client = None

    def ping(self) -> None:
        """
        Cheap connectivity check for the readiness endpoint.

        Raises:
            SupabaseClientError: If the zips table cannot be queried
        """
        try:
            self.client.table(self.zips_table).select("zip").limit(1).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Store not reachable: {e}",
                code="PING_FAILED",
                suggestion="Check network access to SUPABASE_URL"
            ) from e

    # -------------------------------------------------------------------------
    # ZIP Documents
    # -------------------------------------------------------------------------

    def fetch_zip(self, zip_code: str) -> dict[str, Any] | None:
        """
        Fetch the document for a ZIP code.

        Returns:
            Document dict, or None if the ZIP has no document

        Raises:
            SupabaseClientError: If the query fails
        """
        try:
            response = (
                self.client.table(self.zips_table)
                .select("*")
                .eq("zip", zip_code)
                .single()
                .execute()
            )
            logger.debug(f"Fetched document for ZIP {zip_code}")
            return response.data

        except Exception as e:
            if _error_code(e) == NO_ROWS_CODE:
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch ZIP: {e}",
                code="FETCH_ZIP_FAILED",
                suggestion=f"Check that the '{self.zips_table}' table exists and is accessible",
                details={"zip": zip_code}
            ) from e

    def update_zip_entries(
        self,
        zip_code: str,
        entries: list[dict[str, Any]],
        schema_version: int,
    ) -> None:
        """
        Replace the entries of an existing ZIP document.

        Never creates a document: updating an unknown ZIP is an error.

        Raises:
            SupabaseClientError: If the update fails or matches no row
        """
        try:
            response = (
                self.client.table(self.zips_table)
                .update({"entries": entries, "schema_version": schema_version})
                .eq("zip", zip_code)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update ZIP entries: {e}",
                code="UPDATE_ZIP_FAILED",
                details={"zip": zip_code, "entry_count": len(entries)}
            ) from e

        if not response.data:
            raise SupabaseClientError(
                message=f"Update matched no document for ZIP {zip_code}",
                code="UPDATE_ZIP_NO_MATCH",
                suggestion="Seed the ZIP with scripts/seed_zips.py before posting reports",
                details={"zip": zip_code}
            )
        logger.info(f"Processed ZIP: {zip_code}")

    def upsert_zip(
        self,
        zip_code: str,
        population: int | None,
    ) -> None:
        """
        Create or update the population of a ZIP document in one call.

        Only `zip` and `population` are sent, so on conflict the entries of
        an existing document are left untouched; new documents take the
        column defaults (no entries, current schema version).

        Raises:
            SupabaseClientError: If the write fails
        """
        try:
            (
                self.client.table(self.zips_table)
                .upsert({"zip": zip_code, "population": population}, on_conflict="zip")
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to upsert ZIP: {e}",
                code="UPSERT_ZIP_FAILED",
                details={"zip": zip_code}
            ) from e

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def fetch_user_by_email(self, email: str) -> dict[str, Any] | None:
        """
        Fetch a user row by email.

        Returns:
            User dict, or None if no user has this email

        Raises:
            SupabaseClientError: If the query fails
        """
        try:
            response = (
                self.client.table(self.users_table)
                .select("email, username, password")
                .eq("email", email)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch user: {e}",
                code="FETCH_USER_FAILED",
                suggestion=f"Check that the '{self.users_table}' table exists and is accessible"
            ) from e

    def insert_user(self, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new user row.

        Returns:
            Inserted row

        Raises:
            DuplicateKeyError: If the email is already registered
            SupabaseClientError: If the insert fails
        """
        try:
            response = (
                self.client.table(self.users_table)
                .insert(row)
                .execute()
            )
        except Exception as e:
            if _error_code(e) == UNIQUE_VIOLATION_CODE:
                raise DuplicateKeyError(self.users_table) from e
            raise SupabaseClientError(
                message=f"Failed to insert user: {e}",
                code="INSERT_USER_FAILED",
            ) from e

        if response.data:
            return response.data[0]
        raise SupabaseClientError(
            message="Insert returned no data",
            code="INSERT_NO_DATA"
        )
