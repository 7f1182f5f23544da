# =============================================================================
# core/services/symptom_service.py - Symptom Record Business Logic
# =============================================================================
# Reads ZIP records and ingests daily reports.
# Separates HTTP concerns from database/aggregation logic.
# =============================================================================

import logging
from datetime import datetime
from typing import Mapping

from app.exceptions import ZipNotFoundError
from core.models.symptoms import SCHEMA_VERSION, ZipRecord
from core.services.aggregator import day_index, merge_daily_report
from lib.locks import ZipLockRegistry
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class SymptomService:
    """
    Service for ZIP symptom records.

    Provides a clean interface between API routes and the store.
    """

    def __init__(self, store: SupabaseClient, locks: ZipLockRegistry):
        self.store = store
        self.locks = locks

    def find_zip_record(self, zip_code: str) -> ZipRecord | None:
        """Fetch and upgrade a ZIP document, or None if the ZIP is unknown."""
        document = self.store.fetch_zip(zip_code)
        if document is None:
            return None
        return ZipRecord.from_document(document)

    def get_zip_record(self, zip_code: str) -> ZipRecord:
        """
        Get the record for a ZIP.

        Raises:
            ZipNotFoundError: If the ZIP has no record
        """
        record = self.find_zip_record(zip_code)
        if record is None:
            logger.info(f"Requested ZIP not found: {zip_code}")
            raise ZipNotFoundError(zip_code)
        return record

    def record_report(
        self,
        zip_code: str,
        counts: Mapping[str, int],
        now: datetime | None = None,
    ) -> ZipRecord:
        """
        Merge a report into today's bucket for a ZIP and persist it.

        The fetch/merge/write sequence runs under the ZIP's lock.

        Args:
            zip_code: ZIP being reported
            counts: Symptom -> increment (unknown keys are ignored)
            now: Report time (default: current UTC time)

        Returns:
            The updated record

        Raises:
            ZipNotFoundError: If the ZIP has no record (no record is created)
        """
        today = day_index(now)

        # Unknown ZIPs never get a lock, so the registry only grows with seeded ZIPs
        if self.find_zip_record(zip_code) is None:
            raise ZipNotFoundError(zip_code)

        with self.locks.hold(zip_code):
            record = self.find_zip_record(zip_code)
            updated = merge_daily_report(record, counts, today, zip_code=zip_code)
            self.store.update_zip_entries(
                zip_code,
                entries=updated.entries_document(),
                schema_version=SCHEMA_VERSION,
            )

        logger.info(f"Recorded report for ZIP {zip_code} on day {today}")
        return updated
