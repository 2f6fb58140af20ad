"""
Date Normalizer

Parses the free-form `date` strings found in the scanner feed into calendar dates
in the reference timezone. Two shapes are recognized:

- YYYY-MM-DD   (e.g. "2024-03-05")
- M/D/YYYY     (e.g. "3/5/2024" or "03/05/2024")

Either may arrive with backslash-escaped separators ("03\\/05\\/2024"). Anything else,
including timestamps with a time-of-day part, is rejected.

normalize_date() never raises; it returns (date, None) or (None, reason).
"""

import re
from datetime import date, datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from barcode_reporting.logger import get_logger

logger = get_logger(__name__)

ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$", re.ASCII)
US_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$", re.ASCII)


def _resolve_timezone(reference_timezone: str) -> Tuple[Optional[ZoneInfo], Optional[str]]:
    try:
        return ZoneInfo(reference_timezone), None
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        return None, f"Unknown timezone '{reference_timezone}': {str(e)}"


def clean_date_string(raw: str) -> str:
    """Drop escape backslashes left by the upstream encoding, then trim."""
    return raw.replace("\\", "").strip()


def normalize_date(raw, reference_timezone: str) -> Tuple[Optional[date], Optional[str]]:
    """
    Normalize a raw feed date into a calendar date in the reference timezone.

    Args:
        raw: Date value from the feed (expected to be a string)
        reference_timezone: IANA timezone name, e.g. "Asia/Manila"

    Returns:
        Tuple of (calendar_date: Optional[date], error_message: Optional[str])
        - calendar_date: parsed date, or None if the value is not recognized
        - error_message: reason for the failure, None on success
    """
    if not isinstance(raw, str):
        return None, f"Date value is not a string: {raw!r}"

    cleaned = clean_date_string(raw)
    if not cleaned:
        return None, "Date value is empty"

    iso_match = ISO_DATE_PATTERN.match(cleaned)
    us_match = US_DATE_PATTERN.match(cleaned)

    if iso_match:
        year, month, day = (int(part) for part in iso_match.groups())
    elif us_match:
        month, day, year = (int(part) for part in us_match.groups())
    else:
        return None, f"Unrecognized date format: {raw!r}"

    tz, tz_error = _resolve_timezone(reference_timezone)
    if tz is None:
        return None, tz_error

    try:
        # Anchor the triple at midnight in the reference zone so the result
        # never depends on the host's local timezone
        anchored = datetime(year, month, day, tzinfo=tz)
    except ValueError as e:
        return None, f"Invalid calendar date {raw!r}: {str(e)}"

    return anchored.date(), None


def today_in_timezone(reference_timezone: str, now: Optional[datetime] = None) -> date:
    """
    Current calendar date in the reference timezone.

    Args:
        reference_timezone: IANA timezone name
        now: Optional aware datetime to convert instead of the wall clock (for tests)

    Raises:
        ZoneInfoNotFoundError: If the timezone name is unknown
    """
    tz = ZoneInfo(reference_timezone)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    return now.astimezone(tz).date()
