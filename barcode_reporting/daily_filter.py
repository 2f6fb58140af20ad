"""
Daily Filter

Selects the records scanned "today" in the reference timezone. Today is computed
once per call so a run that straddles midnight still compares against one date.
"""

from datetime import date
from typing import Iterable, List, Optional

from barcode_reporting.date_normalizer import normalize_date, today_in_timezone
from barcode_reporting.models import ScanRecord
from barcode_reporting.logger import get_logger

logger = get_logger(__name__)


def filter_records_for_date(
    records: Iterable[ScanRecord],
    target_date: date,
    reference_timezone: str
) -> List[ScanRecord]:
    """
    Keep the records whose normalized date equals target_date, in input order.

    Records without a date are dropped quietly. Records whose date cannot be
    parsed are dropped with a warning naming the raw value; they never abort
    the filter.
    """
    matched = []
    unparseable = 0

    for record in records:
        if record.date is None or (isinstance(record.date, str) and not record.date.strip()):
            logger.debug(f"Skipping record without date: item={record.item!r}")
            continue

        record_date, error = normalize_date(record.date, reference_timezone)
        if record_date is None:
            unparseable += 1
            logger.warning(f"Skipping record with unparseable date {record.date!r}: {error}")
            continue

        if record_date == target_date:
            matched.append(record)

    if unparseable:
        logger.warning(f"{unparseable} record(s) excluded due to unparseable dates")

    return matched


def filter_today(
    records: Iterable[ScanRecord],
    reference_timezone: str,
    today: Optional[date] = None
) -> List[ScanRecord]:
    """
    Keep the records dated today in the reference timezone.

    Args:
        records: Fetched scan records
        reference_timezone: IANA timezone name used for "today" and record dates
        today: Override for the current date (tests, re-runs)

    Returns:
        Matching records in fetch order; empty list when nothing matches
    """
    if today is None:
        today = today_in_timezone(reference_timezone)

    today_records = filter_records_for_date(records, today, reference_timezone)
    logger.info(f"Found {len(today_records)} items for today ({today.isoformat()}, {reference_timezone})")
    return today_records
