# =============================================================================
# lib/ - Infrastructure Modules
# =============================================================================
# This package contains wrappers around external collaborators:
# - supabase_client.py: Typed Supabase wrapper for ZIP and user documents
# - zip_metadata.py: ZIP metadata CSV lookups (pandas)
# - locks.py: Per-ZIP lock registry for report ingestion
# =============================================================================

from lib.supabase_client import DuplicateKeyError, SupabaseClient, SupabaseClientError
from lib.locks import ZipLockRegistry
from lib.zip_metadata import ZipMetadataSource

__all__ = [
    "DuplicateKeyError",
    "SupabaseClient",
    "SupabaseClientError",
    "ZipLockRegistry",
    "ZipMetadataSource",
]
