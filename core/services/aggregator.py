# =============================================================================
# core/services/aggregator.py - Symptom Aggregator
# =============================================================================
# Daily bucketing of incoming symptom counts and trailing-window summaries.
#
# Entries are kept one per day, oldest first:
#   [{"day": 100, "symptoms": {...}}, {"day": 101, "symptoms": {...}}]
#
# Both operations are pure: they never mutate the entries they are given.
#
# Usage:
#   from core.services.aggregator import merge_daily_report, summarize_window
#   record = merge_daily_report(record, {"fever": 3}, day_index())
#   totals, included = summarize_window(record.entries, 14)
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Mapping, NamedTuple, Sequence

from app.exceptions import ZipNotFoundError
from core.models.symptoms import DayEntry, SYMPTOM_KEYS, ZipRecord, empty_counts, normalize_counts

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24


class WindowSummary(NamedTuple):
    """Per-symptom totals over a window and how many day entries fed them."""
    totals: dict[str, int]
    entries_included: int


def day_index(now: datetime | None = None) -> int:
    """
    Days since the Unix epoch (UTC) for `now` (default: current time).

    Example:
        day_index(datetime(2024, 1, 1, tzinfo=timezone.utc))  # 19723
    """
    now = now or datetime.now(timezone.utc)
    return int(now.timestamp() // SECONDS_PER_DAY)


def merge_daily_report(
    record: ZipRecord | None,
    incoming_counts: Mapping[str, int],
    now_day: int,
    zip_code: str | None = None,
) -> ZipRecord:
    """
    Merge one report into a ZIP record's day buckets.

    If the latest entry is for `now_day`, every symptom count is incremented
    by the incoming value (0 when absent). Otherwise a new entry for
    `now_day` is appended, seeded from the incoming counts. Keys outside
    the symptom set are ignored.

    Args:
        record: Existing record for the ZIP (None if the ZIP is unknown)
        incoming_counts: Mapping of symptom -> increment
        now_day: Current day index (see day_index)
        zip_code: ZIP being reported, used for the NotFound error

    Returns:
        A new ZipRecord; the input record and its entries are untouched

    Raises:
        ZipNotFoundError: If there is no record for the ZIP
        ValueError: If now_day precedes the latest entry, or a count is invalid
    """
    if record is None:
        raise ZipNotFoundError(zip_code or "")

    counts, ignored = normalize_counts(incoming_counts)
    if ignored:
        logger.debug(f"Ignoring unknown symptom keys for ZIP {record.zip}: {ignored}")

    entries = list(record.entries)
    last = entries[-1] if entries else None

    if last is not None and now_day < last.day:
        raise ValueError(
            f"Day {now_day} precedes latest entry day {last.day} for ZIP {record.zip}"
        )

    if last is not None and last.day == now_day:
        merged = {key: last.symptoms[key] + counts[key] for key in SYMPTOM_KEYS}
        entries[-1] = DayEntry(day=now_day, symptoms=merged)
    else:
        entries.append(DayEntry(day=now_day, symptoms=counts))

    return record.model_copy(update={"entries": entries})


def summarize_window(entries: Sequence[DayEntry], window_days: int) -> WindowSummary:
    """
    Sum symptom counts over the trailing `window_days` of the latest entry.

    The window is anchored at the last entry's day and is inclusive:
    window_days=1 keeps only the anchor day, window_days=14 keeps the
    anchor day and the 13 days before it.

    Returns:
        WindowSummary(totals, entries_included). entries_included is a
        number of day buckets, not of people; it is 0 for empty input.

    Raises:
        ValueError: If window_days < 1
    """
    if window_days < 1:
        raise ValueError(f"window_days must be at least 1, got {window_days}")

    totals = empty_counts()
    if not entries:
        return WindowSummary(totals, 0)

    anchor = entries[-1].day
    included = 0
    for entry in entries:
        if anchor - window_days < entry.day <= anchor:
            for key in SYMPTOM_KEYS:
                totals[key] += entry.symptoms.get(key, 0)
            included += 1

    return WindowSummary(totals, included)
